# parking_api/models/permit_type.py
"""Static permit type catalog (resident, guest, temporary, commercial)."""

from sqlalchemy import Column, Integer, String, Boolean, Text
from parking_api.database import Base


class PermitType(Base):
    __tablename__ = "permit_types"

    id = Column(String(50), primary_key=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    duration_days = Column(Integer, nullable=False)
    max_vehicles_per_tenant = Column(Integer, default=1, nullable=False)
    requires_approval = Column(Boolean, default=False, nullable=False)
    auto_approve = Column(Boolean, default=False, nullable=False)   # guest only
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<PermitType {self.id} auto_approve={self.auto_approve}>"
