"""
Session state and the reducers that update it.

Every reducer takes the current state and returns a new one; nothing
here touches storage or the network.
"""
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

from ..storage.models import (
    InsightSnapshot,
    RejectionData,
    RejectionRecord,
    UserProfile,
)
from .aggregator import aggregate
from .profile import build_profile, fold_record_into_profile, start_remediation

class Tab(str, Enum):
    """Views of the dashboard."""
    ADD = "add"
    INSIGHTS = "insights"
    ACTIONS = "actions"
    PROFILE = "profile"

class SessionState(BaseModel):
    """Everything a session knows, owned by one controller."""
    model_config = ConfigDict(frozen=True)

    rejections: Tuple[RejectionRecord, ...] = ()
    insights: InsightSnapshot = Field(default_factory=InsightSnapshot)
    profile: UserProfile = Field(default_factory=UserProfile)
    active_tab: Tab = Tab.ADD
    error: Optional[str] = None
    draft_text: str = ""
    submitting: bool = False

def initial_state(data: Optional[RejectionData] = None) -> SessionState:
    """Build the starting state from loaded data, if any.

    Insights are recomputed from the records rather than trusted from
    storage. A stored profile without gaps for a non-empty history is
    rebuilt from the records.
    """
    if data is None:
        return SessionState(insights=aggregate([]))

    profile = data.profile
    if data.rejections and not profile.skill_gaps:
        profile = build_profile(data.rejections, name=profile.name, target_role=profile.target_role)

    return SessionState(
        rejections=tuple(data.rejections),
        insights=aggregate(data.rejections),
        profile=profile
    )

def submission_started(state: SessionState, text: str) -> SessionState:
    return state.model_copy(update={"draft_text": text, "submitting": True, "error": None})

def record_added(state: SessionState, record: RejectionRecord) -> SessionState:
    """Append a record and recompute everything derived from the history."""
    rejections = state.rejections + (record,)
    return state.model_copy(update={
        "rejections": rejections,
        "insights": aggregate(rejections),
        "profile": fold_record_into_profile(state.profile, record),
        "draft_text": "",
        "error": None,
        "submitting": False,
    })

def extraction_failed(state: SessionState, message: str) -> SessionState:
    """Show an error while keeping the draft text for a retry."""
    return state.model_copy(update={"error": message, "submitting": False})

def remediation_started(
    state: SessionState,
    area: str,
    now: Optional[datetime] = None
) -> SessionState:
    profile = start_remediation(state.profile, area, now=now)
    if profile is state.profile:
        return state
    return state.model_copy(update={"profile": profile})

def profile_updated(state: SessionState, name: str, target_role: str) -> SessionState:
    profile = state.profile.model_copy(update={"name": name, "target_role": target_role})
    return state.model_copy(update={"profile": profile})

def tab_selected(state: SessionState, tab: Tab) -> SessionState:
    return state.model_copy(update={"active_tab": Tab(tab)})

def error_dismissed(state: SessionState) -> SessionState:
    return state.model_copy(update={"error": None})

def to_data(state: SessionState) -> RejectionData:
    """Get the part of the state that is persisted."""
    return RejectionData(
        rejections=list(state.rejections),
        insights=state.insights,
        profile=state.profile
    )
