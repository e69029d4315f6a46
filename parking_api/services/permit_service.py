# parking_api/services/permit_service.py
"""
Permit Lifecycle
  submit_request            tenant submission; auto-approving types (guest) are
                            approved immediately and get their Permit issued here
  review_request            admin transition along the request state machine
  issue_permit              1:1 issuance, guarded against double issue
  revoke_permit             permit-side lifecycle, independent of the request
  submit_permit_application tenant + vehicle + request in one transaction

Request state machine:
  pending      → under_review | approved | rejected | cancelled
  under_review → approved | rejected
  approved / rejected / cancelled are terminal
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session
from parking_api.config import settings
from parking_api.database import commit_or_raise, flush_or_raise, transaction
from parking_api.errors import ConflictError, NotFoundError, ValidationError
from parking_api.models.permit import Permit
from parking_api.models.permit_request import PermitRequest
from parking_api.models.tenant import Tenant
from parking_api.models.vehicle import Vehicle
from parking_api.repositories.permits import PermitRequestStore, PermitStore, PermitTypeStore
from parking_api.repositories.registry import TenantStore, VehicleStore
from parking_api.utils.numbers import PERMIT_PREFIX, REQUEST_PREFIX, generate_id, generate_number
from parking_api.utils.time_window import TimeWindow
from parking_api.utils.validators import normalize_email, normalize_plate, require
from parking_api.utils.logger import get_logger

logger = get_logger(__name__)

MAX_BACKDATE = timedelta(hours=settings.MAX_BACKDATE_HOURS)
DEFAULT_PERMIT_TYPE = "guest"
DEFAULT_APPLICATION_LENGTH = timedelta(hours=24)

REQUEST_TRANSITIONS = {
    "pending": {"under_review", "approved", "rejected", "cancelled"},
    "under_review": {"approved", "rejected"},
}
REVIEW_DECISIONS = ("under_review", "approved", "rejected", "cancelled")


@dataclass
class SubmissionResult:
    permit_request: PermitRequest
    auto_approved: bool
    permit: Optional[Permit] = None


def validate_window(window: TimeWindow, now):
    if not window.is_ordered:
        raise ValidationError("End date must be after start date")
    if window.start < now - MAX_BACKDATE:
        raise ValidationError(
            f"Start date cannot be more than {settings.MAX_BACKDATE_HOURS} hours in the past"
        )


def submit_request(db: Session, clock, vehicle_id: str, permit_type_id: str, window: TimeWindow,
                   priority: int = 1, notes: Optional[str] = None, commit: bool = True) -> SubmissionResult:
    """
    Create a PermitRequest. With commit=False the rows are only flushed and the
    caller owns the transaction.
    """
    if commit:
        with transaction(db):
            return _submit(db, clock, vehicle_id, permit_type_id, window, priority, notes)
    return _submit(db, clock, vehicle_id, permit_type_id, window, priority, notes)


def _submit(db: Session, clock, vehicle_id, permit_type_id, window, priority, notes) -> SubmissionResult:
    now = clock.now()
    validate_window(window, now)

    permit_type = PermitTypeStore(db).get_active(permit_type_id)
    if not permit_type:
        raise NotFoundError("Permit type not found")

    vehicle = VehicleStore(db).get(vehicle_id)
    if not vehicle or not TenantStore(db).get_active(vehicle.tenant_id):
        raise NotFoundError("Tenant or vehicle not found")

    request = PermitRequestStore(db).add(PermitRequest(
        id=generate_id(),
        request_number=generate_number(REQUEST_PREFIX, now),
        tenant_id=vehicle.tenant_id,
        vehicle_id=vehicle.id,
        permit_type_id=permit_type.id,
        requested_start=window.start,
        requested_end=window.end,
        status="pending",
        priority=priority or 1,
        notes=notes,
        submitted_at=now,
    ))
    flush_or_raise(db)

    permit = None
    if permit_type.auto_approve:
        _transition(request, "approved", now, reviewer="auto")
        permit = issue_permit(db, clock, request, commit=False)
        logger.info(f"[Permit] {request.request_number} auto-approved → {permit.permit_number}")
    else:
        logger.info(f"[Permit] {request.request_number} submitted, pending review ({permit_type.id})")
    return SubmissionResult(permit_request=request, auto_approved=permit is not None, permit=permit)


def issue_permit(db: Session, clock, request: PermitRequest, commit: bool = True) -> Permit:
    """Issue the single Permit for an approved request, with the requested window."""
    if request.status != "approved":
        raise ConflictError("Permit can only be issued for an approved request")
    store = PermitStore(db)
    if store.for_request(request.id) is not None:
        raise ConflictError("A permit was already issued for this request")
    if request.requested_start > request.requested_end:
        raise ValidationError("Permit window must start before it ends")

    now = clock.now()
    permit = store.add(Permit(
        id=generate_id(),
        permit_number=generate_number(PERMIT_PREFIX, now),
        permit_request_id=request.id,
        tenant_id=request.tenant_id,
        vehicle_id=request.vehicle_id,
        permit_type_id=request.permit_type_id,
        valid_from=request.requested_start,
        valid_until=request.requested_end,
        is_active=True,
        issued_at=now,
    ))
    flush_or_raise(db)
    if commit:
        commit_or_raise(db)
    return permit


def _transition(request: PermitRequest, new_status: str, now, reviewer: Optional[str] = None,
                reason: Optional[str] = None):
    allowed = REQUEST_TRANSITIONS.get(request.status, set())
    if new_status not in allowed:
        raise ConflictError(f"Cannot move permit request from '{request.status}' to '{new_status}'")
    request.status = new_status
    request.reviewed_at = now
    request.reviewed_by = reviewer
    if new_status == "approved":
        request.approved_at = now
    elif new_status == "rejected":
        request.rejected_at = now
        request.rejection_reason = reason


def review_request(db: Session, clock, request_id: str, decision: str,
                   reviewer: Optional[str] = None, reason: Optional[str] = None) -> SubmissionResult:
    """Administrative transition. Approval issues the permit in the same commit."""
    request = PermitRequestStore(db).get(request_id)
    if not request:
        raise NotFoundError("Permit request not found")
    if decision not in REVIEW_DECISIONS:
        raise ValidationError(f"Invalid review decision: {decision}")
    if decision == "rejected" and not reason:
        raise ValidationError("Missing required field: reason")

    now = clock.now()
    permit = None
    with transaction(db):
        _transition(request, decision, now, reviewer=reviewer, reason=reason)
        if decision == "approved":
            permit = issue_permit(db, clock, request, commit=False)
    logger.info(f"[Permit] {request.request_number} → {decision} by {reviewer or 'admin'}")
    return SubmissionResult(permit_request=request, auto_approved=False, permit=permit)


def revoke_permit(db: Session, clock, permit_id: str, reason: str) -> Permit:
    require({"reason": reason})
    permit = PermitStore(db).get(permit_id)
    if not permit:
        raise NotFoundError("Permit not found")
    if permit.revoked_at is not None:
        raise ConflictError("Permit is already revoked")
    permit.is_active = False
    permit.revoked_at = clock.now()
    permit.revoked_reason = reason
    commit_or_raise(db)
    logger.info(f"[Permit] {permit.permit_number} revoked: {reason}")
    return permit


def submit_permit_application(db: Session, clock, *, first_name: str, last_name: str, email: str,
                              license_plate: str, state_province: str, make: str, model: str, color: str,
                              year: Optional[int] = None, country: Optional[str] = None,
                              phone: Optional[str] = None, unit_number: Optional[str] = None,
                              building_code: Optional[str] = None, full_address: Optional[str] = None,
                              permit_type_id: Optional[str] = None, window: Optional[TimeWindow] = None,
                              priority: int = 1, notes: Optional[str] = None) -> SubmissionResult:
    """
    Combined form submission: find-or-create tenant (by email), find-or-create
    vehicle (by plate for that tenant), then submit_request. All rows written
    here commit together or not at all.
    """
    require({
        "first_name": first_name, "last_name": last_name, "email": email,
        "license_plate": license_plate, "make": make, "model": model,
        "color": color, "state_province": state_province,
    })
    email = normalize_email(email)
    plate, jurisdiction = normalize_plate(license_plate, state_province)
    now = clock.now()
    window = window or TimeWindow(start=now, end=now + DEFAULT_APPLICATION_LENGTH)

    with transaction(db):
        tenants = TenantStore(db)
        tenant = tenants.by_email(email)
        if tenant:
            tenant.phone = phone or tenant.phone
            tenant.full_address = full_address or tenant.full_address
            tenant.unit_number = unit_number or tenant.unit_number
            tenant.updated_at = now
        else:
            tenant = tenants.add(Tenant(
                id=generate_id(), email=email, phone=phone, first_name=first_name,
                last_name=last_name, unit_number=unit_number or "", building_code=building_code,
                full_address=full_address, is_active=True, created_at=now, updated_at=now,
            ))
        flush_or_raise(db)

        vehicles = VehicleStore(db)
        vehicle = vehicles.for_tenant_plate(tenant.id, plate, jurisdiction)
        if vehicle:
            vehicle.make, vehicle.model, vehicle.color = make, model, color
            vehicle.year = year
            vehicle.country = country or "US"
            vehicle.updated_at = now
        else:
            vehicle = vehicles.add(Vehicle(
                id=generate_id(), tenant_id=tenant.id, license_plate=plate, state_province=jurisdiction,
                make=make, model=model, year=year, color=color, country=country or "US",
                is_primary=False, created_at=now, updated_at=now,
            ))
        flush_or_raise(db)

        result = submit_request(db, clock, vehicle.id, permit_type_id or DEFAULT_PERMIT_TYPE, window,
                                priority=priority, notes=notes, commit=False)
    return result
