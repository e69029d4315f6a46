# parking_api/services/duplicate_guard.py
"""
Duplicate-Issuance Guard
Same officer, same plate + jurisdiction, a non-voided ticket in the trailing
hour → the new ticket is refused. Scoped per officer: two officers may each
ticket the same plate within the hour.

The check is not atomic with the insert. The unique key on
violations(issued_by, plate, jurisdiction, duplicate_bucket) is the backstop.
"""

from datetime import datetime, timedelta

from parking_api.config import settings
from parking_api.errors import ConflictError
from parking_api.repositories.enforcement import ViolationStore
from parking_api.utils.logger import get_logger

logger = get_logger(__name__)

DUPLICATE_WINDOW = timedelta(minutes=settings.DUPLICATE_TICKET_WINDOW_MINUTES)
EPOCH = datetime(1970, 1, 1)


def is_duplicate(violations: ViolationStore, plate: str, jurisdiction: str, officer_id: str,
                 at: datetime, within_last: timedelta = DUPLICATE_WINDOW) -> bool:
    """True iff the officer already has a standing ticket for the plate in (at - within_last, at]."""
    existing = violations.officer_ticket_between(plate, jurisdiction, officer_id, at - within_last, at)
    return existing is not None


def ensure_not_duplicate(violations: ViolationStore, plate: str, jurisdiction: str, officer_id: str,
                         at: datetime):
    if is_duplicate(violations, plate, jurisdiction, officer_id, at):
        logger.warning(f"[Guard] Duplicate ticket refused: {plate}/{jurisdiction} by officer {officer_id}")
        raise ConflictError(
            "Duplicate ticket - a ticket for this license plate was already issued "
            "by this officer within the last hour"
        )


def duplicate_bucket(at: datetime, window: timedelta = DUPLICATE_WINDOW) -> str:
    """
    Start of the window-sized slot holding `at` (YYYYMMDDHHMM), stored on
    standing tickets. Two tickets in one slot are less than a window apart,
    so the unique key never refuses a ticket is_duplicate allows.
    """
    slot = (at - EPOCH) // window
    return (EPOCH + slot * window).strftime("%Y%m%d%H%M")
