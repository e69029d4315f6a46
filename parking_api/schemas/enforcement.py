# parking_api/schemas/enforcement.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional

from parking_api.schemas.permit import PermitOut, PermitRequestOut
from parking_api.schemas.tenant import tenant_info, vehicle_info


class OfficerCreate(BaseModel):
    badge_number: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None


class OfficerOut(BaseModel):
    id: str
    badge_number: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str]
    is_active: bool

    class Config:
        from_attributes = True


class TicketCreate(BaseModel):
    license_plate: str
    state_province: str
    issued_by: str
    violation_type: str
    violation_reason: str
    location: Optional[str] = None
    gps_latitude: Optional[float] = None
    gps_longitude: Optional[float] = None
    fine_amount: Optional[float] = None
    evidence_photo_urls: Optional[list[str]] = None
    notes: Optional[str] = None


class TicketVoid(BaseModel):
    voided_reason: str


class TicketOut(BaseModel):
    id: str
    ticket_number: str
    license_plate: str
    state_province: str
    issued_by: str
    violation_type: str
    violation_reason: str
    location: Optional[str]
    gps_latitude: Optional[float]
    gps_longitude: Optional[float]
    fine_amount: Optional[float]
    evidence_photo_urls: Optional[list[str]]
    notes: Optional[str]
    status: str
    issued_at: datetime
    voided_at: Optional[datetime]
    voided_reason: Optional[str]

    class Config:
        from_attributes = True


class WarningCreate(BaseModel):
    license_plate: str
    state_province: str
    issued_by: str
    warning_type: str
    warning_reason: str
    location: Optional[str] = None
    gps_latitude: Optional[float] = None
    gps_longitude: Optional[float] = None
    notes: Optional[str] = None


class WarningOut(BaseModel):
    id: str
    warning_number: str
    license_plate: str
    state_province: str
    issued_by: str
    warning_type: str
    warning_reason: str
    location: Optional[str]
    notes: Optional[str]
    issued_at: datetime

    class Config:
        from_attributes = True


class ActivityCreate(BaseModel):
    officer_id: str
    activity_type: str       # scan | ticket | warning | patrol | shift_start | shift_end
    license_plate: Optional[str] = None
    state_province: Optional[str] = None
    location: Optional[str] = None
    gps_latitude: Optional[float] = None
    gps_longitude: Optional[float] = None
    result: Optional[str] = None
    notes: Optional[str] = None


class ActivityOut(BaseModel):
    id: str
    officer_id: str
    activity_type: str
    license_plate: Optional[str]
    state_province: Optional[str]
    location: Optional[str]
    gps_latitude: Optional[float]
    gps_longitude: Optional[float]
    result: Optional[str]
    notes: Optional[str]
    performed_at: datetime

    class Config:
        from_attributes = True


class EnforcementContext(BaseModel):
    recent_violations: list[TicketOut]
    recent_warnings: list[WarningOut]
    is_repeat_offender: bool
    violation_count_30_days: int
    warning_count_30_days: int
    grace_period_active: bool
    grace_period_expires: Optional[datetime] = None
    recent_violation_date: Optional[datetime] = None


class PlateLookupOut(BaseModel):
    license_plate: str
    state_province: str
    is_registered: bool
    current_status: str
    recommended_action: str
    active_permits: list[PermitOut]
    enforcement_context: EnforcementContext
    tenant_info: Optional[dict] = None
    vehicle_info: Optional[dict] = None
    pending_requests: list[PermitRequestOut] = []
    permit_history: list[PermitOut] = []
    last_violation_date: Optional[datetime] = None


def plate_lookup_out(lookup) -> PlateLookupOut:
    """Shape a PlateLookup for the officer's device."""
    resolution, assessment = lookup.resolution, lookup.assessment
    return PlateLookupOut(
        license_plate=lookup.license_plate,
        state_province=lookup.state_province,
        is_registered=lookup.is_registered,
        current_status=resolution.status.value,
        recommended_action=assessment.action.value,
        active_permits=[PermitOut.model_validate(p) for p in lookup.active_permits],
        enforcement_context=EnforcementContext(
            recent_violations=[TicketOut.model_validate(v) for v in lookup.recent_violations],
            recent_warnings=[WarningOut.model_validate(w) for w in lookup.recent_warnings],
            is_repeat_offender=assessment.is_repeat_offender,
            violation_count_30_days=assessment.violation_count_30_days,
            warning_count_30_days=assessment.warning_count_30_days,
            grace_period_active=resolution.grace_period_active,
            grace_period_expires=resolution.grace_expires_at,
            recent_violation_date=assessment.recent_violation_date,
        ),
        tenant_info=tenant_info(lookup.tenant),
        vehicle_info=vehicle_info(lookup.vehicle),
        pending_requests=[PermitRequestOut.model_validate(r) for r in lookup.pending_requests],
        permit_history=[PermitOut.model_validate(p) for p in lookup.permit_history],
        last_violation_date=assessment.recent_violation_date,
    )
