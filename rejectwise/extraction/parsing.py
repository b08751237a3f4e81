"""
Parsing of extraction service replies into rejection records.
"""
from datetime import datetime
import json
import re
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import ExtractionError
from ..storage.models import EmotionalContext, RejectionRecord, Severity, Stage

CODE_FENCE = re.compile(r"```[A-Za-z0-9_-]*")

def strip_code_fences(reply: str) -> str:
    """Remove Markdown code fence markers the model may add despite instructions."""
    return CODE_FENCE.sub("", reply).strip()

def _normalize_choice(value):
    if isinstance(value, str):
        return value.strip().lower().replace("-", "_").replace(" ", "_")
    return value

class ExtractedFeedback(BaseModel):
    """Fields requested from the extraction service, with their defaults."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    company: str = "Unknown"
    role: str = "Unknown"
    stage: Stage
    explicit_reason: str = Field(alias="explicitReason", min_length=1)
    implicit_signals: List[str] = Field(default_factory=list, alias="implicitSignals")
    severity: Severity = Severity.MEDIUM

    @field_validator("company", "role", mode="before")
    @classmethod
    def _default_unknown(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return "Unknown"
        return value.strip() if isinstance(value, str) else value

    @field_validator("stage", mode="before")
    @classmethod
    def _normalize_stage(cls, value):
        return _normalize_choice(value)

    @field_validator("severity", mode="before")
    @classmethod
    def _normalize_severity(cls, value):
        if value is None or value == "":
            return Severity.MEDIUM
        return _normalize_choice(value)

    @field_validator("explicit_reason", mode="before")
    @classmethod
    def _strip_reason(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("implicit_signals", mode="before")
    @classmethod
    def _listify_signals(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        if isinstance(value, list):
            return [str(item).strip() for item in value if item is not None and str(item).strip()]
        return value

def parse_extraction(
    reply: str,
    raw_text: str,
    created_at: Optional[datetime] = None
) -> RejectionRecord:
    """Turn a raw extraction reply into a rejection record.

    Args:
        reply: Text returned by the extraction service
        raw_text: Feedback text the user submitted
        created_at: Optional creation time (defaults to now)

    Returns:
        A fully populated RejectionRecord with a fresh identifier

    Raises:
        ExtractionError: If the reply is not a JSON object with the
            required fields
    """
    cleaned = strip_code_fences(reply or "")
    if not cleaned:
        raise ExtractionError("The extraction service returned an empty reply.")

    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Could not parse the extraction reply as JSON: {e.msg}.") from e

    if not isinstance(payload, dict):
        raise ExtractionError("The extraction reply is not a JSON object.")

    try:
        fields = ExtractedFeedback.model_validate(payload)
    except ValidationError as e:
        bad_fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        raise ExtractionError(
            "The extraction reply is missing or has invalid fields: " + ", ".join(bad_fields) + "."
        ) from e

    return RejectionRecord(
        company=fields.company,
        role=fields.role,
        stage=fields.stage,
        explicit_reason=fields.explicit_reason,
        implicit_signals=fields.implicit_signals,
        severity=fields.severity,
        emotional_context=EmotionalContext.for_stage(fields.stage),
        raw_text=raw_text,
        created_at=created_at or datetime.utcnow()
    )
