# parking_api/models/enforcement_activity.py
"""
Append-only audit log of officer actions: scans, tickets, warnings,
patrols and shift boundaries. Rows are never updated.
"""

from sqlalchemy import Column, String, DateTime, Float, Text, ForeignKey, CheckConstraint, Index
from parking_api.database import Base

ACTIVITY_TYPES = ("scan", "ticket", "warning", "patrol", "shift_start", "shift_end")


class EnforcementActivity(Base):
    __tablename__ = "enforcement_activities"
    __table_args__ = (
        CheckConstraint(
            "activity_type IN ('scan', 'ticket', 'warning', 'patrol', 'shift_start', 'shift_end')",
            name="ck_activities_type",
        ),
        Index("idx_activities_officer_time", "officer_id", "performed_at"),
    )

    id = Column(String(36), primary_key=True)
    officer_id = Column(String(36), ForeignKey("enforcement_officers.id", ondelete="RESTRICT"), nullable=False)
    activity_type = Column(String(20), nullable=False, index=True)
    license_plate = Column(String(8))
    state_province = Column(String(10))
    location = Column(String(255))
    gps_latitude = Column(Float)
    gps_longitude = Column(Float)
    result = Column(String(50))      # authorized | expired | no_permit | violation_issued | ...
    notes = Column(Text)
    performed_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<EnforcementActivity {self.activity_type} officer={self.officer_id} result={self.result}>"
