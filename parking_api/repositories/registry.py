# parking_api/repositories/registry.py
"""Stores for tenants, their vehicles, and enforcement officers."""

from typing import Optional

from sqlalchemy.orm import Session
from parking_api.models.officer import EnforcementOfficer
from parking_api.models.tenant import Tenant
from parking_api.models.vehicle import Vehicle


class TenantStore:
    def __init__(self, db: Session):
        self.db = db

    def get_active(self, tenant_id: str) -> Optional[Tenant]:
        return self.db.query(Tenant).filter(Tenant.id == tenant_id, Tenant.is_active.is_(True)).first()

    def by_email(self, email: str) -> Optional[Tenant]:
        return self.db.query(Tenant).filter(Tenant.email == email, Tenant.is_active.is_(True)).first()

    def add(self, tenant: Tenant) -> Tenant:
        self.db.add(tenant)
        return tenant


class VehicleStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, vehicle_id: str) -> Optional[Vehicle]:
        return self.db.get(Vehicle, vehicle_id)

    def add(self, vehicle: Vehicle) -> Vehicle:
        self.db.add(vehicle)
        return vehicle

    def registered(self, plate: str, jurisdiction: str) -> Optional[Vehicle]:
        """The vehicle registered under an active tenant for this plate, if any."""
        return (
            self.db.query(Vehicle)
            .join(Tenant, Tenant.id == Vehicle.tenant_id)
            .filter(
                Vehicle.license_plate == plate,
                Vehicle.state_province == jurisdiction,
                Tenant.is_active.is_(True),
            )
            .first()
        )

    def for_tenant_plate(self, tenant_id: str, plate: str, jurisdiction: str) -> Optional[Vehicle]:
        return self.db.query(Vehicle).filter(
            Vehicle.tenant_id == tenant_id,
            Vehicle.license_plate == plate,
            Vehicle.state_province == jurisdiction,
        ).first()

    def for_tenant(self, tenant_id: str) -> list[Vehicle]:
        return (self.db.query(Vehicle).filter(Vehicle.tenant_id == tenant_id)
                .order_by(Vehicle.is_primary.desc(), Vehicle.created_at.asc()).all())


class OfficerStore:
    def __init__(self, db: Session):
        self.db = db

    def get_active(self, officer_id: str) -> Optional[EnforcementOfficer]:
        return self.db.query(EnforcementOfficer).filter(
            EnforcementOfficer.id == officer_id, EnforcementOfficer.is_active.is_(True)
        ).first()

    def add(self, officer: EnforcementOfficer) -> EnforcementOfficer:
        self.db.add(officer)
        return officer
