# parking_api/models/permit.py
"""
Permits table — issued authorizations.
Exactly one permit per approved request: permit_request_id is unique, which is
the storage backstop for the issuance guard in permit_service.
"""

from sqlalchemy import Column, String, DateTime, Boolean, Text, ForeignKey, CheckConstraint
from parking_api.database import Base


class Permit(Base):
    __tablename__ = "permits"
    __table_args__ = (
        CheckConstraint("valid_from <= valid_until", name="ck_permits_window_ordered"),
    )

    id = Column(String(36), primary_key=True)
    permit_number = Column(String(20), unique=True, nullable=False, index=True)
    permit_request_id = Column(String(36), ForeignKey("permit_requests.id", ondelete="CASCADE"),
                               unique=True, nullable=False)
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    vehicle_id = Column(String(36), ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    permit_type_id = Column(String(50), ForeignKey("permit_types.id", ondelete="RESTRICT"), nullable=False)
    valid_from = Column(DateTime, nullable=False)
    valid_until = Column(DateTime, nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    issued_at = Column(DateTime, nullable=False)
    revoked_at = Column(DateTime)
    revoked_reason = Column(Text)

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    def __repr__(self):
        return f"<Permit {self.permit_number} {self.valid_from} → {self.valid_until} active={self.is_active}>"
