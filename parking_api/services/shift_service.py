# parking_api/services/shift_service.py
"""
Officer shifts. One open shift per officer per day; closing it totals the
day's activity log into the report.
"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session
from parking_api.database import flush_or_raise, transaction
from parking_api.errors import ConflictError, NotFoundError
from parking_api.models.shift_report import ShiftReport
from parking_api.repositories.enforcement import ActivityStore, ShiftStore
from parking_api.services.enforcement_service import log_activity
from parking_api.services.registry_service import require_active_officer
from parking_api.utils.numbers import SHIFT_REPORT_PREFIX, generate_id, generate_number
from parking_api.utils.logger import get_logger

logger = get_logger(__name__)


def start_shift(db: Session, clock, officer_id: str) -> ShiftReport:
    require_active_officer(db, officer_id)
    now = clock.now()
    store = ShiftStore(db)
    if store.open_shift(officer_id, now.date()):
        raise ConflictError("Officer already has an active shift today")

    with transaction(db):
        report = store.add(ShiftReport(
            id=generate_id(),
            report_number=generate_number(SHIFT_REPORT_PREFIX, now),
            officer_id=officer_id,
            shift_date=now.date(),
            shift_start_time=now,
            total_scans=0,
            total_tickets=0,
            total_warnings=0,
            total_violations_found=0,
        ))
        flush_or_raise(db)
        log_activity(db, clock, officer_id, "shift_start", performed_at=now, commit=False)
    logger.info(f"[Shift] {report.report_number} started by {officer_id}")
    return report


def end_shift(db: Session, clock, officer_id: str, summary: Optional[str] = None,
              incidents: Optional[list] = None, patrol_areas: Optional[list] = None) -> ShiftReport:
    now = clock.now()
    report = ShiftStore(db).open_shift(officer_id, now.date())
    if not report:
        raise NotFoundError("No active shift found for today")

    counts = ActivityStore(db).counts_by_type(officer_id, report.shift_start_time)
    with transaction(db):
        report.shift_end_time = now
        report.total_scans = counts.get("scan", 0)
        report.total_tickets = counts.get("ticket", 0)
        report.total_warnings = counts.get("warning", 0)
        report.total_violations_found = report.total_tickets + report.total_warnings
        report.summary = summary
        report.incidents = list(incidents or [])
        report.patrol_areas = list(patrol_areas or [])
        log_activity(db, clock, officer_id, "shift_end", performed_at=now, commit=False)
    logger.info(
        f"[Shift] {report.report_number} closed: {report.total_scans} scans, "
        f"{report.total_tickets} tickets, {report.total_warnings} warnings"
    )
    return report


def current_shift(db: Session, clock, officer_id: str) -> Optional[ShiftReport]:
    return ShiftStore(db).open_shift(officer_id, clock.now().date())


def list_shift_reports(db: Session, officer_id: Optional[str] = None, day: Optional[date] = None,
                       start_date: Optional[date] = None, end_date: Optional[date] = None) -> list[ShiftReport]:
    return ShiftStore(db).search(officer_id=officer_id, day=day, start_date=start_date, end_date=end_date)
