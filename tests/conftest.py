"""
Shared fixtures for rejectwise tests.
"""
from datetime import datetime, timedelta
import pytest
from rejectwise.storage.models import EmotionalContext, RejectionRecord, Severity, Stage

BASE_TIME = datetime(2025, 3, 1, 9, 0, 0)

@pytest.fixture
def make_record():
    """Factory for rejection records with increasing timestamps."""
    counter = {"n": 0}

    def _make(stage="technical", reason="system design", company="Test Corp", **kwargs):
        counter["n"] += 1
        stage = Stage(stage)
        fields = dict(
            company=company,
            role="Backend Engineer",
            stage=stage,
            explicit_reason=reason,
            implicit_signals=[],
            severity=Severity.MEDIUM,
            emotional_context=EmotionalContext.for_stage(stage),
            raw_text=f"Feedback {counter['n']}",
            created_at=BASE_TIME + timedelta(days=counter["n"]),
        )
        fields.update(kwargs)
        return RejectionRecord(**fields)

    return _make

@pytest.fixture
def extraction_reply():
    """A well-formed extraction service reply."""
    return (
        '{"company": "Acme", "role": "Backend Engineer", "stage": "technical", '
        '"explicitReason": "system design", "implicitSignals": ["scaling depth"], '
        '"severity": "high"}'
    )
