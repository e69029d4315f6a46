# parking_api/services/action_policy.py
"""
Enforcement Action Policy
Maps a resolved authorization status plus the plate's trailing-30-day
violation/warning history to the action the officer should take.

  authorized            → none
  grace_period          → verify_manually   (never auto-ticket inside the buffer)
  repeat offender       → ticket            (≥ 3 non-voided violations)
  warned recently       → ticket
  otherwise             → warning
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence

from parking_api.config import settings
from parking_api.services.status_resolver import AuthorizationStatus


class RecommendedAction(str, Enum):
    NONE = "none"
    WARNING = "warning"
    TICKET = "ticket"
    VERIFY_MANUALLY = "verify_manually"


@dataclass
class EnforcementAssessment:
    action: RecommendedAction
    is_repeat_offender: bool
    violation_count_30_days: int
    warning_count_30_days: int
    recent_violation_date: Optional[datetime] = None


def is_repeat_offender(violation_count: int) -> bool:
    return violation_count >= settings.REPEAT_OFFENDER_THRESHOLD


def recommend_action(status: AuthorizationStatus, violation_count: int, warning_count: int) -> RecommendedAction:
    if status == AuthorizationStatus.AUTHORIZED:
        return RecommendedAction.NONE
    if status == AuthorizationStatus.GRACE_PERIOD:
        return RecommendedAction.VERIFY_MANUALLY
    if is_repeat_offender(violation_count):
        return RecommendedAction.TICKET
    if warning_count > 0:
        return RecommendedAction.TICKET
    return RecommendedAction.WARNING


def assess(status: AuthorizationStatus, recent_violations: Sequence, recent_warnings: Sequence) -> EnforcementAssessment:
    """
    recent_violations must already be limited to non-voided tickets in the
    history window; recent_warnings to warnings in the same window.
    """
    violation_count = len(recent_violations)
    warning_count = len(recent_warnings)
    latest = max((v.issued_at for v in recent_violations), default=None)
    return EnforcementAssessment(
        action=recommend_action(status, violation_count, warning_count),
        is_repeat_offender=is_repeat_offender(violation_count),
        violation_count_30_days=violation_count,
        warning_count_30_days=warning_count,
        recent_violation_date=latest,
    )
