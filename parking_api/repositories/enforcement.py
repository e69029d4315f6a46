# parking_api/repositories/enforcement.py
"""
Stores for enforcement records: tickets, warnings, the activity log and
shift reports. All plate-keyed queries use (license_plate, state_province).
"""

from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session
from parking_api.models.enforcement_activity import EnforcementActivity
from parking_api.models.shift_report import ShiftReport
from parking_api.models.violation import Violation
from parking_api.models.warning import ParkingWarning


def _day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, datetime.min.time())
    return start, start + timedelta(days=1)


class ViolationStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, violation_id: str) -> Optional[Violation]:
        return self.db.get(Violation, violation_id)

    def add(self, violation: Violation) -> Violation:
        self.db.add(violation)
        return violation

    def recent_for_plate(self, plate: str, jurisdiction: str, since: datetime) -> list[Violation]:
        """Non-voided tickets for the plate issued at or after `since`, newest first."""
        return self.db.query(Violation).filter(
            Violation.license_plate == plate,
            Violation.state_province == jurisdiction,
            Violation.issued_at >= since,
            Violation.status != "voided",
        ).order_by(Violation.issued_at.desc()).all()

    def officer_ticket_between(self, plate: str, jurisdiction: str, officer_id: str,
                               after: datetime, until: datetime) -> Optional[Violation]:
        """A non-voided ticket by this officer for this plate with after < issued_at <= until."""
        return self.db.query(Violation).filter(
            Violation.license_plate == plate,
            Violation.state_province == jurisdiction,
            Violation.issued_by == officer_id,
            Violation.issued_at > after,
            Violation.issued_at <= until,
            Violation.status != "voided",
        ).first()

    def search(self, officer_id: Optional[str] = None, day: Optional[date] = None,
               status: Optional[str] = None, plate: Optional[str] = None) -> list[Violation]:
        q = self.db.query(Violation)
        if officer_id:
            q = q.filter(Violation.issued_by == officer_id)
        if day:
            start, end = _day_bounds(day)
            q = q.filter(Violation.issued_at >= start, Violation.issued_at < end)
        if status:
            q = q.filter(Violation.status == status)
        if plate:
            q = q.filter(Violation.license_plate == plate.upper())
        return q.order_by(Violation.issued_at.desc()).all()


class WarningStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, warning_id: str) -> Optional[ParkingWarning]:
        return self.db.get(ParkingWarning, warning_id)

    def add(self, warning: ParkingWarning) -> ParkingWarning:
        self.db.add(warning)
        return warning

    def recent_for_plate(self, plate: str, jurisdiction: str, since: datetime) -> list[ParkingWarning]:
        return self.db.query(ParkingWarning).filter(
            ParkingWarning.license_plate == plate,
            ParkingWarning.state_province == jurisdiction,
            ParkingWarning.issued_at >= since,
        ).order_by(ParkingWarning.issued_at.desc()).all()

    def search(self, officer_id: Optional[str] = None, day: Optional[date] = None,
               plate: Optional[str] = None) -> list[ParkingWarning]:
        q = self.db.query(ParkingWarning)
        if officer_id:
            q = q.filter(ParkingWarning.issued_by == officer_id)
        if day:
            start, end = _day_bounds(day)
            q = q.filter(ParkingWarning.issued_at >= start, ParkingWarning.issued_at < end)
        if plate:
            q = q.filter(ParkingWarning.license_plate == plate.upper())
        return q.order_by(ParkingWarning.issued_at.desc()).all()


class ActivityStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, activity_id: str) -> Optional[EnforcementActivity]:
        return self.db.get(EnforcementActivity, activity_id)

    def add(self, activity: EnforcementActivity) -> EnforcementActivity:
        self.db.add(activity)
        return activity

    def search(self, officer_id: Optional[str] = None, day: Optional[date] = None,
               activity_type: Optional[str] = None) -> list[EnforcementActivity]:
        q = self.db.query(EnforcementActivity)
        if officer_id:
            q = q.filter(EnforcementActivity.officer_id == officer_id)
        if day:
            start, end = _day_bounds(day)
            q = q.filter(EnforcementActivity.performed_at >= start, EnforcementActivity.performed_at < end)
        if activity_type:
            q = q.filter(EnforcementActivity.activity_type == activity_type)
        return q.order_by(EnforcementActivity.performed_at.desc()).all()

    def counts_by_type(self, officer_id: str, since: datetime, until: Optional[datetime] = None) -> dict:
        """{activity_type: count} for one officer over [since, until)."""
        q = self.db.query(EnforcementActivity.activity_type, func.count(EnforcementActivity.id)).filter(
            EnforcementActivity.officer_id == officer_id,
            EnforcementActivity.performed_at >= since,
        )
        if until is not None:
            q = q.filter(EnforcementActivity.performed_at < until)
        return {activity_type: count for activity_type, count in q.group_by(EnforcementActivity.activity_type).all()}


class ShiftStore:
    def __init__(self, db: Session):
        self.db = db

    def add(self, report: ShiftReport) -> ShiftReport:
        self.db.add(report)
        return report

    def open_shift(self, officer_id: str, day: date) -> Optional[ShiftReport]:
        return self.db.query(ShiftReport).filter(
            ShiftReport.officer_id == officer_id,
            ShiftReport.shift_date == day,
            ShiftReport.shift_end_time.is_(None),
        ).first()

    def latest_for_day(self, officer_id: str, day: date) -> Optional[ShiftReport]:
        return self.db.query(ShiftReport).filter(
            ShiftReport.officer_id == officer_id, ShiftReport.shift_date == day
        ).order_by(ShiftReport.shift_start_time.desc()).first()

    def search(self, officer_id: Optional[str] = None, day: Optional[date] = None,
               start_date: Optional[date] = None, end_date: Optional[date] = None) -> list[ShiftReport]:
        q = self.db.query(ShiftReport)
        if officer_id:
            q = q.filter(ShiftReport.officer_id == officer_id)
        if day:
            q = q.filter(ShiftReport.shift_date == day)
        if start_date and end_date:
            q = q.filter(ShiftReport.shift_date.between(start_date, end_date))
        return q.order_by(ShiftReport.shift_date.desc(), ShiftReport.shift_start_time.desc()).all()
