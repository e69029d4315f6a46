# parking_api/services/registry_service.py
"""
Tenant, vehicle and officer registration.
Used by the tenants router and by every enforcement entry point that needs
an active officer.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session
from parking_api.config import settings
from parking_api.database import commit_or_raise
from parking_api.errors import ConflictError, NotFoundError
from parking_api.models.officer import EnforcementOfficer
from parking_api.models.permit import Permit
from parking_api.models.permit_request import PermitRequest
from parking_api.models.tenant import Tenant
from parking_api.models.vehicle import Vehicle
from parking_api.repositories.permits import PermitRequestStore, PermitStore
from parking_api.repositories.registry import OfficerStore, TenantStore, VehicleStore
from parking_api.utils.numbers import generate_id
from parking_api.utils.validators import normalize_email, normalize_plate, require
from parking_api.utils.logger import get_logger

logger = get_logger(__name__)

PERMIT_HISTORY = timedelta(days=settings.PERMIT_HISTORY_DAYS)


@dataclass
class PlateRegistration:
    license_plate: str
    state_province: str
    tenant: Optional[Tenant] = None
    vehicle: Optional[Vehicle] = None
    active_permits: list[Permit] = field(default_factory=list)
    pending_requests: list[PermitRequest] = field(default_factory=list)
    permit_history: list[Permit] = field(default_factory=list)

    @property
    def is_registered(self) -> bool:
        return self.vehicle is not None


def create_tenant(db: Session, clock, *, first_name: str, last_name: str, email: str,
                  phone: Optional[str] = None, unit_number: Optional[str] = None,
                  building_code: Optional[str] = None, full_address: Optional[str] = None) -> Tenant:
    require({"first_name": first_name, "last_name": last_name, "email": email})
    email = normalize_email(email)
    if TenantStore(db).by_email(email):
        raise ConflictError("A tenant with this email already exists")

    now = clock.now()
    tenant = TenantStore(db).add(Tenant(
        id=generate_id(), email=email, phone=phone, first_name=first_name, last_name=last_name,
        unit_number=unit_number or "", building_code=building_code, full_address=full_address,
        is_active=True, created_at=now, updated_at=now,
    ))
    commit_or_raise(db)
    logger.info(f"[Tenant] Registered {email} (unit {tenant.unit_number or '-'})")
    return tenant


def get_tenant(db: Session, tenant_id: str) -> Tenant:
    tenant = TenantStore(db).get_active(tenant_id)
    if not tenant:
        raise NotFoundError("Tenant not found")
    return tenant


def add_vehicle(db: Session, clock, tenant_id: str, *, license_plate: str, state_province: str,
                make: str, model: str, color: str, year: Optional[int] = None,
                country: Optional[str] = None, is_primary: bool = False) -> Vehicle:
    """Register a vehicle for a tenant. A plate already registered anywhere is a conflict."""
    require({"license_plate": license_plate, "state_province": state_province,
             "make": make, "model": model, "color": color})
    plate, jurisdiction = normalize_plate(license_plate, state_province)
    tenant = get_tenant(db, tenant_id)

    now = clock.now()
    vehicle = VehicleStore(db).add(Vehicle(
        id=generate_id(), tenant_id=tenant.id, license_plate=plate, state_province=jurisdiction,
        make=make, model=model, year=year, color=color, country=country or "US",
        is_primary=is_primary, created_at=now, updated_at=now,
    ))
    # The unique key on (plate, jurisdiction) turns a racing duplicate into ConflictError
    commit_or_raise(db)
    logger.info(f"[Vehicle] {plate}/{jurisdiction} registered to tenant {tenant.id}")
    return vehicle


def list_vehicles(db: Session, tenant_id: str) -> list[Vehicle]:
    get_tenant(db, tenant_id)
    return VehicleStore(db).for_tenant(tenant_id)


def create_officer(db: Session, clock, *, badge_number: str, first_name: str, last_name: str,
                   email: str, phone: Optional[str] = None) -> EnforcementOfficer:
    require({"badge_number": badge_number, "first_name": first_name,
             "last_name": last_name, "email": email})
    officer = OfficerStore(db).add(EnforcementOfficer(
        id=generate_id(), badge_number=badge_number, first_name=first_name,
        last_name=last_name, email=normalize_email(email), phone=phone,
        is_active=True, created_at=clock.now(),
    ))
    commit_or_raise(db)
    logger.info(f"[Officer] Registered badge {badge_number}")
    return officer


def get_active_officer(db: Session, officer_id: str) -> Optional[EnforcementOfficer]:
    return OfficerStore(db).get_active(officer_id)


def require_active_officer(db: Session, officer_id: str) -> EnforcementOfficer:
    officer = get_active_officer(db, officer_id)
    if not officer:
        raise NotFoundError("Enforcement officer not found or inactive")
    return officer


def lookup_registration(db: Session, clock, plate: str, jurisdiction: Optional[str] = None) -> PlateRegistration:
    """
    Registration view of a plate: owning tenant, vehicle, live permits, open
    requests and recent permit history. No authorization verdict, no scan log.
    """
    plate, jurisdiction = normalize_plate(plate, jurisdiction or settings.DEFAULT_JURISDICTION)
    registration = PlateRegistration(license_plate=plate, state_province=jurisdiction)

    vehicle = VehicleStore(db).registered(plate, jurisdiction)
    if vehicle:
        now = clock.now()
        permits = PermitStore(db)
        registration.vehicle = vehicle
        registration.tenant = TenantStore(db).get_active(vehicle.tenant_id)
        registration.active_permits = permits.active_for_vehicle(vehicle.id, now)
        registration.pending_requests = PermitRequestStore(db).open_for_vehicle(vehicle.id)
        registration.permit_history = permits.issued_since(vehicle.id, now - PERMIT_HISTORY)
    return registration
