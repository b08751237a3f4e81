"""
Tests for insight aggregation.
"""
import math
import pytest
from rejectwise.insights.aggregator import aggregate, detect_patterns, improvement_rate
from rejectwise.storage.models import ActionPriority, PatternSeverity, PatternType

def test_empty_history():
    """Test that an empty history yields empty insights and the fallback action."""
    insights = aggregate([])

    assert insights.total_rejections == 0
    assert insights.patterns == []
    assert insights.stage_breakdown == {}
    assert insights.top_reasons == []
    assert insights.improvement_rate is None
    assert len(insights.next_actions) == 1
    assert insights.next_actions[0].priority == ActionPriority.MEDIUM
    assert insights.next_actions[0].action == "Expand your application pool"

def test_stage_pattern(make_record):
    """Test that a repeated plurality stage is reported with its count."""
    history = [
        make_record("phone", "communication"),
        make_record("behavioral", "culture fit"),
        make_record("behavioral", "leadership"),
    ]
    patterns = detect_patterns(history)

    assert len(patterns) == 1
    pattern = patterns[0]
    assert pattern.type == PatternType.STAGE_PATTERN
    assert pattern.severity == PatternSeverity.HIGH
    assert pattern.actionable is True
    assert "behavioral" in pattern.message
    assert "2 times" in pattern.message

def test_stage_pattern_replaces_underscores(make_record):
    """Test that stage names are shown with spaces."""
    history = [make_record("resume_screen", "a"), make_record("resume_screen", "b")]
    pattern = detect_patterns(history)[0]

    assert "resume screen" in pattern.message
    assert "resume_screen" not in pattern.message

def test_skill_gap_pattern(make_record):
    """Test that a repeated plurality reason is quoted with its count."""
    history = [
        make_record("phone", "algorithms"),
        make_record("behavioral", "algorithms"),
        make_record("final", "communication"),
    ]
    patterns = detect_patterns(history)

    assert [p.type for p in patterns] == [PatternType.SKILL_GAP]
    assert patterns[0].severity == PatternSeverity.CRITICAL
    assert '"algorithms"' in patterns[0].message
    assert "2 times" in patterns[0].message

def test_no_pattern_for_single_occurrences(make_record):
    """Test that counts of one never produce patterns."""
    history = [
        make_record("phone", "a"),
        make_record("technical", "b"),
        make_record("final", "c"),
    ]
    assert detect_patterns(history) == []

def test_top_stage_tie_keeps_first_seen(make_record):
    """Test that ties between stages go to the stage seen first."""
    history = [
        make_record("phone", "a"),
        make_record("final", "b"),
        make_record("final", "c"),
        make_record("phone", "d"),
    ]
    pattern = detect_patterns(history)[0]
    assert "phone" in pattern.message

def test_interview_prep_pattern(make_record):
    """Test that three technical rejections among the last five trigger interview prep."""
    history = [
        make_record("phone", "a"),
        make_record("phone", "b"),
        make_record("technical", "c"),
        make_record("technical", "d"),
        make_record("technical", "e"),
    ]
    patterns = detect_patterns(history)

    assert [p.type for p in patterns] == [PatternType.STAGE_PATTERN, PatternType.INTERVIEW_PREP]
    assert patterns[1].severity == PatternSeverity.HIGH

def test_interview_prep_only_looks_at_last_five(make_record):
    """Test that older technical rejections do not count toward interview prep."""
    history = [make_record("technical", f"t{i}") for i in range(3)]
    history += [make_record("phone", f"p{i}") for i in range(5)]

    types = [p.type for p in detect_patterns(history)]
    assert PatternType.INTERVIEW_PREP not in types

def test_improvement_rate_undefined_below_four(make_record):
    """Test that fewer than four records give no improvement rate."""
    history = []
    for _ in range(4):
        assert improvement_rate(history) is None
        history.append(make_record("technical"))
    assert improvement_rate(history) is not None

def test_improvement_rate_positive(make_record):
    """Test improvement when later rejections happen past the resume screen."""
    history = [
        make_record("resume_screen"),
        make_record("resume_screen"),
        make_record("phone"),
        make_record("technical"),
    ]
    assert improvement_rate(history) == 100.0

def test_improvement_rate_negative_odd_length(make_record):
    """Test that the second half takes the extra record for odd lengths."""
    history = [
        make_record("phone"),
        make_record("technical"),
        make_record("resume_screen"),
        make_record("phone"),
        make_record("resume_screen"),
    ]
    # first half 2/2 = 1.0, second half 1/3
    rate = improvement_rate(history)
    assert rate == -66.7
    assert math.isfinite(rate)

def test_top_reasons_sorted_and_limited(make_record):
    """Test that top reasons are capped at three and sorted by count."""
    reasons = ["a", "b", "b", "c", "d", "d", "d", "e"]
    insights = aggregate([make_record("phone", r) for r in reasons])

    assert [(r.reason, r.count) for r in insights.top_reasons] == [("d", 3), ("b", 2), ("a", 1)]

def test_stage_breakdown(make_record):
    """Test stage counts in first-seen order."""
    history = [make_record("final"), make_record("phone"), make_record("final")]
    insights = aggregate(history)

    assert insights.stage_breakdown == {"final": 2, "phone": 1}
    assert list(insights.stage_breakdown) == ["final", "phone"]
    assert insights.total_rejections == 3

def test_end_to_end_example(make_record):
    """Test the full snapshot for a system design heavy history."""
    history = [
        make_record("technical", "system design"),
        make_record("technical", "system design"),
        make_record("final", "system design"),
        make_record("phone", "communication"),
    ]
    insights = aggregate(history)

    assert [p.type for p in insights.patterns] == [PatternType.STAGE_PATTERN, PatternType.SKILL_GAP]
    assert "technical" in insights.patterns[0].message
    assert "2 times" in insights.patterns[0].message
    assert '"system design"' in insights.patterns[1].message
    assert "3 times" in insights.patterns[1].message

    course_actions = [a for a in insights.next_actions if "system design course" in a.action.lower()]
    assert len(course_actions) == 1
    assert course_actions[0].priority == ActionPriority.CRITICAL
    assert course_actions[0].timeframe == "2 weeks"
    assert course_actions[0].resources

    assert insights.improvement_rate == 0.0

def test_aggregate_is_pure(make_record):
    """Test that aggregating twice gives the same snapshot and leaves input alone."""
    history = [make_record("technical"), make_record("technical")]
    before = list(history)

    assert aggregate(history) == aggregate(history)
    assert history == before

@pytest.mark.parametrize("reason,expected_action", [
    ("System Design", "Take a system design course"),
    ("data structures and algorithms", "Practice structured algorithm problem sets"),
    ("lack of production experience", "Ship a production project"),
    ("not enough experience", "Ship a production project"),
])
def test_action_plan_from_skill_gap(make_record, reason, expected_action):
    """Test the action chosen for each kind of recurring reason."""
    history = [make_record("phone", reason), make_record("behavioral", reason)]
    actions = aggregate(history).next_actions

    assert [a.action for a in actions] == [expected_action]
