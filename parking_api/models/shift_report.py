# parking_api/models/shift_report.py
"""Shift reports — one open shift per officer per day, totals filled on close."""

from sqlalchemy import Column, Integer, String, Date, DateTime, Text, ForeignKey, Index
from parking_api.database import Base
from parking_api.models.types import StringList


class ShiftReport(Base):
    __tablename__ = "shift_reports"
    __table_args__ = (
        Index("idx_shift_reports_officer_date", "officer_id", "shift_date"),
    )

    id = Column(String(36), primary_key=True)
    report_number = Column(String(20), unique=True, nullable=False, index=True)
    officer_id = Column(String(36), ForeignKey("enforcement_officers.id", ondelete="RESTRICT"), nullable=False)
    shift_date = Column(Date, nullable=False)
    shift_start_time = Column(DateTime, nullable=False)
    shift_end_time = Column(DateTime)
    total_scans = Column(Integer, default=0, nullable=False)
    total_tickets = Column(Integer, default=0, nullable=False)
    total_warnings = Column(Integer, default=0, nullable=False)
    total_violations_found = Column(Integer, default=0, nullable=False)
    patrol_areas = Column(StringList)
    incidents = Column(StringList)
    summary = Column(Text)

    @property
    def is_open(self) -> bool:
        return self.shift_end_time is None

    def __repr__(self):
        return f"<ShiftReport {self.report_number} officer={self.officer_id} open={self.is_open}>"
