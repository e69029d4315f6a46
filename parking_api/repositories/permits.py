# parking_api/repositories/permits.py
"""
Stores for the permit side: catalog, requests and issued permits.
Stores query and stage rows; committing is the caller's unit of work.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session
from parking_api.models.permit import Permit
from parking_api.models.permit_request import PermitRequest
from parking_api.models.permit_type import PermitType

OPEN_REQUEST_STATUSES = ("pending", "under_review")


class PermitTypeStore:
    def __init__(self, db: Session):
        self.db = db

    def get_active(self, type_id: str) -> Optional[PermitType]:
        return self.db.query(PermitType).filter(
            PermitType.id == type_id, PermitType.is_active.is_(True)
        ).first()

    def list_active(self) -> list[PermitType]:
        return self.db.query(PermitType).filter(PermitType.is_active.is_(True)).order_by(PermitType.name).all()


class PermitRequestStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, request_id: str) -> Optional[PermitRequest]:
        return self.db.get(PermitRequest, request_id)

    def add(self, request: PermitRequest) -> PermitRequest:
        self.db.add(request)
        return request

    def for_tenant(self, tenant_id: str, status: Optional[str] = None) -> list[PermitRequest]:
        q = self.db.query(PermitRequest).filter(PermitRequest.tenant_id == tenant_id)
        if status:
            q = q.filter(PermitRequest.status == status)
        return q.order_by(PermitRequest.submitted_at.desc()).all()

    def open_for_vehicle(self, vehicle_id: str) -> list[PermitRequest]:
        return self.db.query(PermitRequest).filter(
            PermitRequest.vehicle_id == vehicle_id,
            PermitRequest.status.in_(OPEN_REQUEST_STATUSES),
        ).order_by(PermitRequest.submitted_at.desc()).all()

    def review_queue(self, status: Optional[str] = None, limit: int = 20, offset: int = 0) -> list[PermitRequest]:
        """Highest priority first, then oldest submission first."""
        q = self.db.query(PermitRequest)
        if status:
            q = q.filter(PermitRequest.status == status)
        else:
            q = q.filter(PermitRequest.status.in_(OPEN_REQUEST_STATUSES))
        return (q.order_by(PermitRequest.priority.desc(), PermitRequest.submitted_at.asc())
                 .limit(limit).offset(offset).all())


class PermitStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, permit_id: str) -> Optional[Permit]:
        return self.db.get(Permit, permit_id)

    def add(self, permit: Permit) -> Permit:
        self.db.add(permit)
        return permit

    def for_request(self, request_id: str) -> Optional[Permit]:
        return self.db.query(Permit).filter(Permit.permit_request_id == request_id).first()

    def for_vehicle(self, vehicle_id: str) -> list[Permit]:
        """Full permit history for a vehicle, any state."""
        return self.db.query(Permit).filter(Permit.vehicle_id == vehicle_id).order_by(Permit.valid_until.desc()).all()

    def active_for_vehicle(self, vehicle_id: str, now: datetime) -> list[Permit]:
        """Active, unrevoked permits whose window has not ended yet."""
        return self.db.query(Permit).filter(
            Permit.vehicle_id == vehicle_id,
            Permit.is_active.is_(True),
            Permit.revoked_at.is_(None),
            Permit.valid_until >= now,
        ).order_by(Permit.valid_until.desc()).all()

    def issued_since(self, vehicle_id: str, since: datetime) -> list[Permit]:
        return self.db.query(Permit).filter(
            Permit.vehicle_id == vehicle_id, Permit.issued_at >= since
        ).order_by(Permit.issued_at.desc()).all()
