# parking_api/utils/clock.py
"""
Injectable time source. Every decision component receives a clock instead of
reading the wall clock itself, so grace periods, duplicate windows and
backdating limits are deterministic under test.

All instants are naive UTC datetimes, matching what the DB stores.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional


class SystemClock:
    """Wall-clock time, naive UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)


class FixedClock:
    """A clock that only moves when told to."""

    def __init__(self, current: Optional[datetime] = None):
        self.current = current or SystemClock().now()

    def now(self) -> datetime:
        return self.current

    def set(self, current: datetime):
        self.current = current

    def advance(self, **delta):
        self.current = self.current + timedelta(**delta)


_system_clock = SystemClock()


def get_clock() -> SystemClock:
    """FastAPI dependency — overridden with a FixedClock in tests."""
    return _system_clock


def to_naive_utc(value: datetime) -> datetime:
    """Normalise an incoming (possibly tz-aware) datetime to naive UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
