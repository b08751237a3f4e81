"""
Rule table mapping detected patterns to recommended actions.
"""
from typing import List, NamedTuple, Optional, Tuple

from ..storage.models import ActionItem, ActionPriority, Pattern, PatternType

class ActionRule(NamedTuple):
    """Recommend ``item`` for a pattern of ``pattern_type`` whose message
    contains any of ``keywords`` (case-insensitive)."""
    pattern_type: PatternType
    keywords: Tuple[str, ...]
    item: ActionItem

    def matches(self, pattern: Pattern) -> bool:
        if pattern.type != self.pattern_type:
            return False
        message = pattern.message.lower()
        return any(keyword in message for keyword in self.keywords)

# Checked in order; the first matching rule wins for each pattern.
ACTION_RULES: List[ActionRule] = [
    ActionRule(
        PatternType.SKILL_GAP,
        ("system design",),
        ActionItem(
            priority=ActionPriority.CRITICAL,
            action="Take a system design course",
            description="Work through a structured system design course and practice "
                        "designing scalable services end to end.",
            timeframe="2 weeks",
            impact="Addresses your most frequent rejection reason",
            resources=[
                "Grokking the System Design Interview",
                "System Design Primer (GitHub)",
                "Designing Data-Intensive Applications",
            ],
        ),
    ),
    ActionRule(
        PatternType.SKILL_GAP,
        ("algorithm",),
        ActionItem(
            priority=ActionPriority.CRITICAL,
            action="Practice structured algorithm problem sets",
            description="Solve curated problem sets by topic, a few problems a day, "
                        "and review the patterns behind each solution.",
            timeframe="4 weeks",
            impact="Builds the problem-solving speed technical rounds look for",
            resources=["NeetCode 150", "LeetCode study plans"],
        ),
    ),
    ActionRule(
        PatternType.SKILL_GAP,
        ("production", "experience"),
        ActionItem(
            priority=ActionPriority.HIGH,
            action="Ship a production project",
            description="Build and deploy a project with real users, monitoring and "
                        "a CI pipeline you can talk through in interviews.",
            timeframe="3 weeks",
            impact="Gives concrete production experience to point to",
        ),
    ),
    ActionRule(
        PatternType.STAGE_PATTERN,
        ("technical",),
        ActionItem(
            priority=ActionPriority.CRITICAL,
            action="Do mock technical interviews",
            description="Schedule timed mock interviews with peers or a practice "
                        "platform and review each session afterwards.",
            timeframe="2 weeks",
            impact="Targets the stage where you are rejected most",
            resources=["Pramp", "interviewing.io"],
        ),
    ),
]

FALLBACK_ACTION = ActionItem(
    priority=ActionPriority.MEDIUM,
    action="Expand your application pool",
    description="No strong pattern yet. Apply to more roles to gather more "
                "feedback and reveal what to work on.",
    timeframe="Ongoing",
    impact="More data makes the insights more reliable",
)

def match_rule(pattern: Pattern, rules: List[ActionRule] = ACTION_RULES) -> Optional[ActionRule]:
    """Get the first rule that applies to a pattern."""
    for rule in rules:
        if rule.matches(pattern):
            return rule
    return None

def derive_actions(patterns: List[Pattern], rules: List[ActionRule] = ACTION_RULES) -> List[ActionItem]:
    """Build the action plan for detected patterns.

    Args:
        patterns: Patterns in detection order
        rules: Rule table to apply

    Returns:
        One action per pattern that matched a rule, in pattern order, or
        the single fallback action when nothing matched
    """
    actions = []
    for pattern in patterns:
        rule = match_rule(pattern, rules)
        if rule:
            actions.append(rule.item.model_copy(deep=True))

    if not actions:
        actions.append(FALLBACK_ACTION.model_copy(deep=True))
    return actions
