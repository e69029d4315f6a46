# parking_api/models/warning.py
"""Warnings table — non-punitive citations, immutable after creation."""

from sqlalchemy import Column, String, DateTime, Float, Text, ForeignKey, Index
from parking_api.database import Base


class ParkingWarning(Base):
    __tablename__ = "warnings"
    __table_args__ = (
        Index("idx_warnings_plate", "license_plate", "state_province"),
    )

    id = Column(String(36), primary_key=True)
    warning_number = Column(String(20), unique=True, nullable=False, index=True)
    license_plate = Column(String(8), nullable=False)
    state_province = Column(String(10), nullable=False)
    issued_by = Column(String(36), ForeignKey("enforcement_officers.id", ondelete="RESTRICT"), nullable=False)
    warning_type = Column(String(100), nullable=False)
    warning_reason = Column(Text, nullable=False)
    location = Column(String(255))
    gps_latitude = Column(Float)
    gps_longitude = Column(Float)
    notes = Column(Text)
    issued_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<ParkingWarning {self.warning_number} plate={self.license_plate}/{self.state_province}>"
