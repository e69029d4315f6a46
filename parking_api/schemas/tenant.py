# parking_api/schemas/tenant.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional

from parking_api.schemas.permit import PermitOut, PermitRequestOut


class TenantCreate(BaseModel):
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    unit_number: Optional[str] = None
    building_code: Optional[str] = None
    full_address: Optional[str] = None


class TenantOut(BaseModel):
    id: str
    email: str
    phone: Optional[str]
    first_name: str
    last_name: str
    unit_number: str
    building_code: Optional[str]
    full_address: Optional[str]
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class VehicleCreate(BaseModel):
    license_plate: str
    state_province: str
    make: str
    model: str
    color: str
    year: Optional[int] = None
    country: Optional[str] = None
    is_primary: bool = False


class VehicleOut(BaseModel):
    id: str
    tenant_id: str
    license_plate: str
    state_province: str
    make: str
    model: str
    year: Optional[int]
    color: str
    country: str
    is_primary: bool
    created_at: datetime

    class Config:
        from_attributes = True


class PlateRegistrationOut(BaseModel):
    license_plate: str
    state_province: str
    is_registered: bool
    tenant_info: Optional[dict] = None
    vehicle_info: Optional[dict] = None
    active_permits: list[PermitOut] = []
    pending_requests: list[PermitRequestOut] = []
    permit_history: list[PermitOut] = []


def tenant_info(tenant) -> Optional[dict]:
    if not tenant:
        return None
    return {
        "id": tenant.id,
        "name": tenant.full_name,
        "email": tenant.email,
        "unit_number": tenant.unit_number,
        "phone": tenant.phone,
    }


def vehicle_info(vehicle) -> Optional[dict]:
    if not vehicle:
        return None
    return {
        "id": vehicle.id,
        "make": vehicle.make,
        "model": vehicle.model,
        "color": vehicle.color,
        "year": vehicle.year,
        "state_province": vehicle.state_province,
    }


def plate_registration_out(registration) -> PlateRegistrationOut:
    return PlateRegistrationOut(
        license_plate=registration.license_plate,
        state_province=registration.state_province,
        is_registered=registration.is_registered,
        tenant_info=tenant_info(registration.tenant),
        vehicle_info=vehicle_info(registration.vehicle),
        active_permits=[PermitOut.model_validate(p) for p in registration.active_permits],
        pending_requests=[PermitRequestOut.model_validate(r) for r in registration.pending_requests],
        permit_history=[PermitOut.model_validate(p) for p in registration.permit_history],
    )
