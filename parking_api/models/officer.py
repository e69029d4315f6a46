# parking_api/models/officer.py
"""Enforcement officers table."""

from sqlalchemy import Column, String, DateTime, Boolean
from parking_api.database import Base


class EnforcementOfficer(Base):
    __tablename__ = "enforcement_officers"

    id = Column(String(36), primary_key=True)
    badge_number = Column(String(50), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    phone = Column(String(50))
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<EnforcementOfficer {self.badge_number} active={self.is_active}>"
