"""
Skill gap profile folding and the remediation lifecycle.
"""
from datetime import datetime
import logging
from typing import Iterable, Optional

from ..errors import SkillGapNotFoundError
from ..storage.models import (
    GapPriority,
    ImprovementTrack,
    RejectionRecord,
    RemediationStatus,
    SkillGap,
    Stage,
    TrackStatus,
    UserProfile,
)

logger = logging.getLogger(__name__)

HIGH_PRIORITY_STAGES = {Stage.TECHNICAL, Stage.FINAL}

def fold_record_into_profile(profile: UserProfile, record: RejectionRecord) -> UserProfile:
    """Fold one rejection record into the profile's skill gaps.

    A record whose explicit reason matches an existing gap adds evidence
    to it; otherwise it opens a new gap. The input profile is not modified.

    Args:
        profile: Current profile
        record: Newly added rejection record

    Returns:
        Updated copy of the profile
    """
    updated = profile.model_copy(deep=True)
    gap = updated.get_gap(record.explicit_reason)
    if gap:
        gap.evidence_count += 1
        gap.last_occurrence = record.created_at
    else:
        priority = GapPriority.HIGH if record.stage in HIGH_PRIORITY_STAGES else GapPriority.MEDIUM
        updated.skill_gaps.append(SkillGap(
            area=record.explicit_reason,
            evidence_count=1,
            last_occurrence=record.created_at,
            remediation_status=RemediationStatus.IDENTIFIED,
            priority=priority
        ))
    return updated

def build_profile(
    records: Iterable[RejectionRecord],
    name: str = "",
    target_role: str = ""
) -> UserProfile:
    """Build a profile from scratch by folding every record in order."""
    profile = UserProfile(name=name, target_role=target_role)
    for record in records:
        profile = fold_record_into_profile(profile, record)
    return profile

def start_remediation(
    profile: UserProfile,
    area: str,
    now: Optional[datetime] = None
) -> UserProfile:
    """Move a skill gap from identified to in progress.

    Starts an active improvement track for the gap. Gaps that are already
    in progress or completed are left alone and the profile is returned
    unchanged, so repeated clicks never duplicate a track.

    Args:
        profile: Current profile
        area: Area of the skill gap to work on
        now: Optional start time (defaults to now)

    Returns:
        Updated copy of the profile, or ``profile`` itself for a no-op

    Raises:
        SkillGapNotFoundError: If the profile has no gap for ``area``
    """
    gap = profile.get_gap(area)
    if gap is None:
        raise SkillGapNotFoundError(f"No skill gap for area: {area}")

    if gap.remediation_status != RemediationStatus.IDENTIFIED:
        logger.info("Remediation for %r already %s", area, gap.remediation_status.value)
        return profile

    now = now or datetime.utcnow()
    updated = profile.model_copy(deep=True)
    gap = updated.get_gap(area)
    gap.remediation_status = RemediationStatus.IN_PROGRESS
    gap.started_date = now
    updated.improvement_tracking.append(ImprovementTrack(
        gap=area,
        start_date=now,
        actions=[],
        status=TrackStatus.ACTIVE
    ))
    return updated
