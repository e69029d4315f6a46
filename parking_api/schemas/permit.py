# parking_api/schemas/permit.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class PermitTypeOut(BaseModel):
    id: str
    name: str
    description: Optional[str]
    duration_days: int
    max_vehicles_per_tenant: int
    requires_approval: bool
    auto_approve: bool

    class Config:
        from_attributes = True


class PermitRequestCreate(BaseModel):
    vehicle_id: str
    permit_type_id: str
    requested_start: datetime
    requested_end: datetime
    priority: int = 1
    notes: Optional[str] = None


class PermitApplicationCreate(BaseModel):
    """Combined tenant + vehicle + request form."""
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    unit_number: Optional[str] = None
    building_code: Optional[str] = None
    full_address: Optional[str] = None
    license_plate: str
    state_province: str
    make: str
    model: str
    color: str
    year: Optional[int] = None
    country: Optional[str] = None
    permit_type_id: Optional[str] = None
    requested_start: Optional[datetime] = None
    requested_end: Optional[datetime] = None
    priority: int = 1
    notes: Optional[str] = None


class ReviewDecision(BaseModel):
    status: str              # under_review | approved | rejected | cancelled
    reviewed_by: Optional[str] = None
    reason: Optional[str] = None


class RevokePermit(BaseModel):
    reason: str


class PermitOut(BaseModel):
    id: str
    permit_number: str
    permit_request_id: str
    tenant_id: str
    vehicle_id: str
    permit_type_id: str
    valid_from: datetime
    valid_until: datetime
    is_active: bool
    issued_at: datetime
    revoked_at: Optional[datetime]
    revoked_reason: Optional[str]

    class Config:
        from_attributes = True


class PermitRequestOut(BaseModel):
    id: str
    request_number: str
    tenant_id: str
    vehicle_id: str
    permit_type_id: str
    requested_start: datetime
    requested_end: datetime
    status: str
    priority: int
    notes: Optional[str]
    submitted_at: datetime
    reviewed_at: Optional[datetime]
    reviewed_by: Optional[str]
    approved_at: Optional[datetime]
    rejected_at: Optional[datetime]
    rejection_reason: Optional[str]

    class Config:
        from_attributes = True
