# parking_api/utils/time_window.py
"""
Pure time-window predicates used by the status resolver, the permit lifecycle
and the duplicate-ticket guard. No I/O, no wall clock.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from parking_api.config import settings

GRACE_PERIOD = timedelta(minutes=settings.GRACE_PERIOD_MINUTES)


@dataclass(frozen=True)
class TimeWindow:
    start: datetime
    end: datetime

    @property
    def is_ordered(self) -> bool:
        return self.start < self.end


def window_contains(window: TimeWindow, instant: datetime) -> bool:
    """True iff start <= instant <= end (both ends inclusive)."""
    return window.start <= instant <= window.end


def within_grace(window: TimeWindow, instant: datetime, grace: timedelta = GRACE_PERIOD) -> bool:
    """True iff instant falls in [start - grace, end + grace]."""
    return window.start - grace <= instant <= window.end + grace
