# parking_api/services/status_resolver.py
"""
Authorization Status Resolver
Turns a vehicle's permit rows and the current instant into one verdict:
  authorized    a live permit covers now
  grace_period  no live permit covers now, but now is within 5 min of a live permit's window
  expired       the vehicle has permit history, none current or in grace
  no_permit     no permit was ever issued

First match wins. A vehicle in grace for one permit and expired for another
reports grace_period.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Sequence

from parking_api.models.permit import Permit
from parking_api.utils.time_window import GRACE_PERIOD, TimeWindow, window_contains, within_grace


class AuthorizationStatus(str, Enum):
    AUTHORIZED = "authorized"
    GRACE_PERIOD = "grace_period"
    EXPIRED = "expired"
    NO_PERMIT = "no_permit"


@dataclass
class StatusResolution:
    status: AuthorizationStatus
    active_permit: Optional[Permit] = None
    grace_permit: Optional[Permit] = None
    grace_expires_at: Optional[datetime] = None

    @property
    def grace_period_active(self) -> bool:
        return self.status == AuthorizationStatus.GRACE_PERIOD


def permit_window(permit: Permit) -> TimeWindow:
    return TimeWindow(start=permit.valid_from, end=permit.valid_until)


def is_live(permit: Permit) -> bool:
    """Active and never revoked."""
    return bool(permit.is_active) and permit.revoked_at is None


def resolve_status(permits: Sequence[Permit], now: datetime,
                   grace: timedelta = GRACE_PERIOD) -> StatusResolution:
    live = [p for p in permits if is_live(p)]

    covering = [p for p in live if window_contains(permit_window(p), now)]
    if covering:
        # Longest remaining coverage wins
        best = max(covering, key=lambda p: p.valid_until)
        return StatusResolution(status=AuthorizationStatus.AUTHORIZED, active_permit=best)

    in_grace = [p for p in live if within_grace(permit_window(p), now, grace)]
    if in_grace:
        best = max(in_grace, key=lambda p: p.valid_until)
        return StatusResolution(
            status=AuthorizationStatus.GRACE_PERIOD,
            grace_permit=best,
            grace_expires_at=best.valid_until + grace,
        )

    if permits:
        return StatusResolution(status=AuthorizationStatus.EXPIRED)
    return StatusResolution(status=AuthorizationStatus.NO_PERMIT)
