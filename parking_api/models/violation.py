# parking_api/models/violation.py
"""
Violations (tickets) table.
References vehicles by (license_plate, state_province), never by FK, so that
unregistered plates can be ticketed. Immutable once issued except for the
status and void metadata.

duplicate_bucket holds the start of the duplicate-window slot (YYYYMMDDHHMM)
while the ticket stands and is cleared on void; the unique key over
(officer, plate, jurisdiction, bucket) is the storage backstop for
duplicate_guard.
"""

from sqlalchemy import (Column, String, DateTime, Float, Numeric, Text,
                        ForeignKey, CheckConstraint, UniqueConstraint, Index)
from parking_api.database import Base
from parking_api.models.types import StringList

VIOLATION_STATUSES = ("issued", "paid", "disputed", "voided")


class Violation(Base):
    __tablename__ = "violations"
    __table_args__ = (
        CheckConstraint("status IN ('issued', 'paid', 'disputed', 'voided')", name="ck_violations_status"),
        UniqueConstraint("issued_by", "license_plate", "state_province", "duplicate_bucket",
                         name="uq_violations_officer_plate_bucket"),
        Index("idx_violations_plate", "license_plate", "state_province"),
    )

    id = Column(String(36), primary_key=True)
    ticket_number = Column(String(20), unique=True, nullable=False, index=True)
    license_plate = Column(String(8), nullable=False)
    state_province = Column(String(10), nullable=False)
    issued_by = Column(String(36), ForeignKey("enforcement_officers.id", ondelete="RESTRICT"), nullable=False)
    violation_type = Column(String(100), nullable=False)
    violation_reason = Column(Text, nullable=False)
    location = Column(String(255))
    gps_latitude = Column(Float)
    gps_longitude = Column(Float)
    fine_amount = Column(Numeric(10, 2))
    evidence_photo_urls = Column(StringList)
    notes = Column(Text)
    status = Column(String(20), nullable=False, default="issued", index=True)
    issued_at = Column(DateTime, nullable=False, index=True)
    duplicate_bucket = Column(String(12))
    voided_at = Column(DateTime)
    voided_reason = Column(Text)

    def __repr__(self):
        return f"<Violation {self.ticket_number} plate={self.license_plate}/{self.state_province} status={self.status}>"
