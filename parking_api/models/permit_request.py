# parking_api/models/permit_request.py
"""
Permit requests table.
Created by a tenant submission; only the review transitions mutate it and it
is never deleted. Status values live in PERMIT_REQUEST_STATUSES.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, CheckConstraint
from parking_api.database import Base

PERMIT_REQUEST_STATUSES = ("pending", "under_review", "approved", "rejected", "cancelled", "expired")


class PermitRequest(Base):
    __tablename__ = "permit_requests"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'under_review', 'approved', 'rejected', 'cancelled', 'expired')",
            name="ck_permit_requests_status",
        ),
    )

    id = Column(String(36), primary_key=True)
    request_number = Column(String(20), unique=True, nullable=False, index=True)
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    vehicle_id = Column(String(36), ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    permit_type_id = Column(String(50), ForeignKey("permit_types.id", ondelete="RESTRICT"), nullable=False)
    requested_start = Column(DateTime, nullable=False)
    requested_end = Column(DateTime, nullable=False)
    status = Column(String(20), nullable=False, default="pending", index=True)
    priority = Column(Integer, default=1, nullable=False)
    notes = Column(Text)
    internal_notes = Column(Text)
    submitted_at = Column(DateTime, nullable=False, index=True)
    reviewed_at = Column(DateTime)
    reviewed_by = Column(String(100))
    approved_at = Column(DateTime)
    rejected_at = Column(DateTime)
    rejection_reason = Column(Text)

    def __repr__(self):
        return f"<PermitRequest {self.request_number} status={self.status}>"
