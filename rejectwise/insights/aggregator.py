"""
Insight aggregation over the rejection history.
"""
from collections import Counter
from typing import List, Optional, Sequence

from ..storage.models import (
    InsightSnapshot,
    Pattern,
    PatternSeverity,
    PatternType,
    ReasonCount,
    RejectionRecord,
    Stage,
)
from .rules import derive_actions

MIN_PATTERN_COUNT = 2
RECENT_WINDOW = 5
RECENT_TECHNICAL_THRESHOLD = 3
MIN_RECORDS_FOR_RATE = 4
TOP_REASONS_LIMIT = 3

INTERVIEW_PREP_MESSAGE = (
    "Several of your recent rejections came from technical interviews. "
    "Focus on interview preparation."
)

def stage_counts(history: Sequence[RejectionRecord]) -> Counter:
    """Count rejections per stage, in first-seen order."""
    return Counter(record.stage.value for record in history)

def reason_counts(history: Sequence[RejectionRecord]) -> Counter:
    """Count rejections per explicit reason, in first-seen order."""
    return Counter(record.explicit_reason for record in history)

def detect_patterns(history: Sequence[RejectionRecord]) -> List[Pattern]:
    """Detect recurring signals in the history.

    Patterns are independent of each other and always reported in the
    order stage pattern, skill gap, interview prep.
    """
    patterns = []

    # most_common keeps first-seen order between equal counts
    stages = stage_counts(history).most_common(1)
    if stages and stages[0][1] >= MIN_PATTERN_COUNT:
        stage, count = stages[0]
        patterns.append(Pattern(
            type=PatternType.STAGE_PATTERN,
            message=f"Most of your rejections happen at the {stage.replace('_', ' ')} stage ({count} times)",
            severity=PatternSeverity.HIGH,
            actionable=True
        ))

    reasons = reason_counts(history).most_common(1)
    if reasons and reasons[0][1] >= MIN_PATTERN_COUNT:
        reason, count = reasons[0]
        patterns.append(Pattern(
            type=PatternType.SKILL_GAP,
            message=f'Recurring feedback: "{reason}" ({count} times)',
            severity=PatternSeverity.CRITICAL,
            actionable=True
        ))

    recent = history[-RECENT_WINDOW:]
    recent_technical = sum(1 for record in recent if record.stage == Stage.TECHNICAL)
    if recent_technical >= RECENT_TECHNICAL_THRESHOLD:
        patterns.append(Pattern(
            type=PatternType.INTERVIEW_PREP,
            message=INTERVIEW_PREP_MESSAGE,
            severity=PatternSeverity.HIGH,
            actionable=True
        ))

    return patterns

def _interview_rate(records: Sequence[RejectionRecord]) -> float:
    passed_screen = sum(1 for record in records if record.stage != Stage.RESUME_SCREEN)
    return passed_screen / len(records)

def improvement_rate(history: Sequence[RejectionRecord]) -> Optional[float]:
    """Change in the share of rejections past the resume screen.

    Compares the first half of the history (floor(n/2) records) with the
    rest. Returns percentage points rounded to one decimal, or None when
    there are fewer than four records.
    """
    if len(history) < MIN_RECORDS_FOR_RATE:
        return None
    half = len(history) // 2
    first_rate = _interview_rate(history[:half])
    second_rate = _interview_rate(history[half:])
    return round((second_rate - first_rate) * 100, 1)

def aggregate(history: Sequence[RejectionRecord]) -> InsightSnapshot:
    """Compute the insight snapshot for a rejection history.

    Args:
        history: Rejection records in the order they were added

    Returns:
        InsightSnapshot derived only from ``history``
    """
    history = list(history)
    patterns = detect_patterns(history)
    return InsightSnapshot(
        total_rejections=len(history),
        patterns=patterns,
        stage_breakdown=dict(stage_counts(history)),
        top_reasons=[
            ReasonCount(reason=reason, count=count)
            for reason, count in reason_counts(history).most_common(TOP_REASONS_LIMIT)
        ],
        improvement_rate=improvement_rate(history),
        next_actions=derive_actions(patterns)
    )
