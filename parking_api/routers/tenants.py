# parking_api/routers/tenants.py
"""Tenants, their registered vehicles, and the public plate registration lookup."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from parking_api.database import get_db
from parking_api.repositories.permits import PermitRequestStore
from parking_api.schemas.permit import PermitRequestOut
from parking_api.schemas.tenant import (
    TenantCreate, TenantOut, VehicleCreate, VehicleOut, plate_registration_out,
)
from parking_api.services import registry_service
from parking_api.utils.clock import get_clock
from typing import Optional

router = APIRouter()


@router.post("/tenants", status_code=status.HTTP_201_CREATED, summary="Register a tenant")
def create_tenant(body: TenantCreate, db: Session = Depends(get_db), clock=Depends(get_clock)):
    tenant = registry_service.create_tenant(db, clock, **body.model_dump())
    return {"success": True, "data": TenantOut.model_validate(tenant), "message": "Tenant created"}


@router.get("/tenants/{tenant_id}", summary="Get a tenant")
def get_tenant(tenant_id: str, db: Session = Depends(get_db)):
    tenant = registry_service.get_tenant(db, tenant_id)
    return {"success": True, "data": TenantOut.model_validate(tenant)}


@router.post("/tenants/{tenant_id}/vehicles", status_code=status.HTTP_201_CREATED,
             summary="Register a vehicle for a tenant")
def add_vehicle(tenant_id: str, body: VehicleCreate, db: Session = Depends(get_db), clock=Depends(get_clock)):
    vehicle = registry_service.add_vehicle(db, clock, tenant_id, **body.model_dump())
    return {"success": True, "data": VehicleOut.model_validate(vehicle), "message": "Vehicle registered"}


@router.get("/tenants/{tenant_id}/vehicles", summary="List a tenant's vehicles")
def list_vehicles(tenant_id: str, db: Session = Depends(get_db)):
    vehicles = registry_service.list_vehicles(db, tenant_id)
    return {"success": True, "data": [VehicleOut.model_validate(v) for v in vehicles]}


@router.get("/tenants/{tenant_id}/permit-requests", summary="A tenant's permit requests")
def tenant_permit_requests(tenant_id: str, status: Optional[str] = None, db: Session = Depends(get_db)):
    registry_service.get_tenant(db, tenant_id)
    requests = PermitRequestStore(db).for_tenant(tenant_id, status)
    return {"success": True, "data": [PermitRequestOut.model_validate(r) for r in requests]}


@router.get("/license-plates/{plate}", summary="Registration details for a plate")
def license_plate_registration(plate: str, state: Optional[str] = None, db: Session = Depends(get_db),
                               clock=Depends(get_clock)):
    """Tenant, vehicle and permits on file. No verdict and no scan is logged."""
    registration = registry_service.lookup_registration(db, clock, plate, state)
    return {"success": True, "data": plate_registration_out(registration)}
