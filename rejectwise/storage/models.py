"""
Data models for rejection records, skill gaps and derived insights.
"""
from datetime import datetime
from enum import Enum
import time
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

class Stage(str, Enum):
    """Hiring stage at which a rejection happened."""
    RESUME_SCREEN = "resume_screen"
    PHONE = "phone"
    TECHNICAL = "technical"
    BEHAVIORAL = "behavioral"
    FINAL = "final"

class Severity(str, Enum):
    """How hard the rejection hit, as judged by the extraction service."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class EmotionalContext(str, Enum):
    """Emotional framing of a rejection, derived from its stage."""
    DEVASTATING = "devastating"
    EXPECTED = "expected"
    SURPRISING = "surprising"

    @classmethod
    def for_stage(cls, stage: Stage) -> "EmotionalContext":
        if stage == Stage.FINAL:
            return cls.DEVASTATING
        if stage == Stage.RESUME_SCREEN:
            return cls.EXPECTED
        return cls.SURPRISING

_last_stamp = 0

def new_record_id() -> str:
    """Return a time based identifier, strictly increasing within the process."""
    global _last_stamp
    stamp = max(time.time_ns(), _last_stamp + 1)
    _last_stamp = stamp
    return str(stamp)

class RejectionRecord(BaseModel):
    """One structured piece of rejection feedback."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_record_id)
    company: str = "Unknown"
    role: str = "Unknown"
    stage: Stage
    explicit_reason: str
    implicit_signals: Tuple[str, ...] = ()
    severity: Severity = Severity.MEDIUM
    emotional_context: EmotionalContext
    raw_text: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

class RemediationStatus(str, Enum):
    """Lifecycle of a skill gap."""
    IDENTIFIED = "identified"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

class GapPriority(str, Enum):
    """Priority of a skill gap."""
    HIGH = "high"
    MEDIUM = "medium"

class SkillGap(BaseModel):
    """Recurring explicit rejection reason tracked for the user."""
    area: str
    evidence_count: int = Field(default=1, ge=1)
    last_occurrence: datetime
    remediation_status: RemediationStatus = RemediationStatus.IDENTIFIED
    priority: GapPriority = GapPriority.MEDIUM
    started_date: Optional[datetime] = None

class TrackStatus(str, Enum):
    """Status of an improvement track."""
    ACTIVE = "active"
    COMPLETED = "completed"

class ImprovementTrack(BaseModel):
    """Remediation effort started by the user for one skill gap."""
    gap: str
    start_date: datetime = Field(default_factory=datetime.utcnow)
    actions: List[str] = []
    status: TrackStatus = TrackStatus.ACTIVE

class UserProfile(BaseModel):
    """Job seeker profile with skill gaps and improvement tracking."""
    name: str = ""
    target_role: str = ""
    skill_gaps: List[SkillGap] = []
    improvement_tracking: List[ImprovementTrack] = []

    def get_gap(self, area: str) -> Optional[SkillGap]:
        """Get the skill gap for an area, if any."""
        for gap in self.skill_gaps:
            if gap.area == area:
                return gap
        return None

class PatternType(str, Enum):
    """Kind of recurring signal detected across rejections."""
    STAGE_PATTERN = "stage_pattern"
    SKILL_GAP = "skill_gap"
    INTERVIEW_PREP = "interview_prep"

class PatternSeverity(str, Enum):
    HIGH = "high"
    CRITICAL = "critical"

class Pattern(BaseModel):
    """Detected pattern across the rejection history."""
    type: PatternType
    message: str
    severity: PatternSeverity
    actionable: bool = True

class ActionPriority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"

class ActionItem(BaseModel):
    """Recommended next step in the action plan."""
    priority: ActionPriority
    action: str
    description: str
    timeframe: str
    impact: str
    resources: Optional[List[str]] = None

class ReasonCount(BaseModel):
    """How many times an explicit reason was given."""
    reason: str
    count: int

class InsightSnapshot(BaseModel):
    """Summary derived from the full rejection history.

    Never edited directly: recomputed by the aggregator whenever the
    history changes and stored next to it for fast reload.
    """
    total_rejections: int = 0
    patterns: List[Pattern] = []
    stage_breakdown: Dict[str, int] = {}
    top_reasons: List[ReasonCount] = []
    improvement_rate: Optional[float] = None  # percentage points
    next_actions: List[ActionItem] = []

class RejectionData(BaseModel):
    """Everything persisted under the storage key."""
    rejections: List[RejectionRecord] = []
    insights: InsightSnapshot = Field(default_factory=InsightSnapshot)
    profile: UserProfile = Field(default_factory=UserProfile)
