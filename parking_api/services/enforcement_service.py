# parking_api/services/enforcement_service.py
"""
Field enforcement: plate lookup, tickets, warnings, the activity log.

These are the single entry points for both live requests and offline replay.
With commit=False a call only stages + flushes its rows so the offline
reconciler can commit the record and the synced flag together.

Plate lookup flow:
  1. Normalise plate, resolve registration (active tenant only)
  2. Resolve authorization from the vehicle's full permit history
  3. Load trailing-30-day non-voided tickets and warnings for the plate
  4. Assess the recommended action; log a scan if an officer is given
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session
from parking_api.config import settings
from parking_api.database import commit_or_raise, flush_or_raise
from parking_api.errors import ConflictError, NotFoundError, ValidationError
from parking_api.models.enforcement_activity import ACTIVITY_TYPES, EnforcementActivity
from parking_api.models.permit import Permit
from parking_api.models.permit_request import PermitRequest
from parking_api.models.tenant import Tenant
from parking_api.models.vehicle import Vehicle
from parking_api.models.violation import Violation
from parking_api.models.warning import ParkingWarning
from parking_api.repositories.enforcement import ActivityStore, ViolationStore, WarningStore
from parking_api.repositories.permits import PermitStore
from parking_api.services.action_policy import EnforcementAssessment, assess
from parking_api.services.duplicate_guard import duplicate_bucket, ensure_not_duplicate
from parking_api.services.status_resolver import StatusResolution, resolve_status
from parking_api.services.registry_service import lookup_registration, require_active_officer
from parking_api.utils.numbers import TICKET_PREFIX, WARNING_PREFIX, generate_id, generate_number
from parking_api.utils.validators import normalize_plate, require, validate_gps
from parking_api.utils.logger import get_logger

logger = get_logger(__name__)

RECENT_HISTORY = timedelta(days=settings.RECENT_HISTORY_DAYS)
SUMMARY_PERIODS = {"today": None, "week": timedelta(days=7), "month": timedelta(days=30)}


@dataclass
class PlateLookup:
    license_plate: str
    state_province: str
    is_registered: bool
    resolution: StatusResolution
    assessment: EnforcementAssessment
    tenant: Optional[Tenant] = None
    vehicle: Optional[Vehicle] = None
    active_permits: list[Permit] = field(default_factory=list)
    pending_requests: list[PermitRequest] = field(default_factory=list)
    permit_history: list[Permit] = field(default_factory=list)
    recent_violations: list[Violation] = field(default_factory=list)
    recent_warnings: list[ParkingWarning] = field(default_factory=list)


def lookup_plate(db: Session, clock, plate: str, jurisdiction: Optional[str] = None,
                 officer_id: Optional[str] = None) -> PlateLookup:
    registration = lookup_registration(db, clock, plate, jurisdiction)
    plate, jurisdiction = registration.license_plate, registration.state_province
    now = clock.now()

    vehicle = registration.vehicle
    permits = PermitStore(db).for_vehicle(vehicle.id) if vehicle else []
    resolution = resolve_status(permits, now)

    since = now - RECENT_HISTORY
    violations = ViolationStore(db).recent_for_plate(plate, jurisdiction, since)
    warnings = WarningStore(db).recent_for_plate(plate, jurisdiction, since)
    assessment = assess(resolution.status, violations, warnings)

    lookup = PlateLookup(
        license_plate=plate,
        state_province=jurisdiction,
        is_registered=registration.is_registered,
        resolution=resolution,
        assessment=assessment,
        tenant=registration.tenant,
        vehicle=vehicle,
        active_permits=registration.active_permits,
        pending_requests=registration.pending_requests,
        permit_history=registration.permit_history,
        recent_violations=violations,
        recent_warnings=warnings,
    )

    logger.info(
        f"[Lookup] {plate}/{jurisdiction} registered={lookup.is_registered} "
        f"status={resolution.status.value} action={assessment.action.value}"
    )

    if officer_id:
        log_activity(db, clock, officer_id, "scan", license_plate=plate, state_province=jurisdiction,
                     result=resolution.status.value)
    return lookup


def issue_ticket(db: Session, clock, *, license_plate: str, state_province: str, officer_id: str,
                 violation_type: str, violation_reason: str, location: Optional[str] = None,
                 gps_latitude: Optional[float] = None, gps_longitude: Optional[float] = None,
                 fine_amount: Optional[Decimal] = None, evidence_photo_urls: Optional[list] = None,
                 notes: Optional[str] = None, ticket_id: Optional[str] = None,
                 ticket_number: Optional[str] = None, issued_at: Optional[datetime] = None,
                 commit: bool = True) -> Violation:
    """
    Issue a ticket. `issued_at` defaults to now; offline replay passes the
    capture time so the duplicate guard looks back from when it happened.
    """
    require({"license_plate": license_plate, "state_province": state_province, "issued_by": officer_id,
             "violation_type": violation_type, "violation_reason": violation_reason})
    plate, jurisdiction = normalize_plate(license_plate, state_province)
    validate_gps(gps_latitude, gps_longitude)
    if fine_amount is not None and Decimal(str(fine_amount)) < 0:
        raise ValidationError("Fine amount cannot be negative")
    require_active_officer(db, officer_id)

    store = ViolationStore(db)
    if ticket_id and store.get(ticket_id) is not None:
        raise ConflictError("A ticket with this id already exists")

    at = issued_at or clock.now()
    ensure_not_duplicate(store, plate, jurisdiction, officer_id, at)

    violation = store.add(Violation(
        id=ticket_id or generate_id(),
        ticket_number=ticket_number or generate_number(TICKET_PREFIX, at),
        license_plate=plate,
        state_province=jurisdiction,
        issued_by=officer_id,
        violation_type=violation_type,
        violation_reason=violation_reason,
        location=location,
        gps_latitude=gps_latitude,
        gps_longitude=gps_longitude,
        fine_amount=fine_amount,
        evidence_photo_urls=list(evidence_photo_urls) if evidence_photo_urls else None,
        notes=notes,
        status="issued",
        issued_at=at,
        duplicate_bucket=duplicate_bucket(at),
    ))
    flush_or_raise(db)

    log_activity(db, clock, officer_id, "ticket", license_plate=plate, state_province=jurisdiction,
                 location=location, gps_latitude=gps_latitude, gps_longitude=gps_longitude,
                 result="violation_issued", performed_at=at, commit=False)
    if commit:
        commit_or_raise(db)
    logger.info(f"[Ticket] {violation.ticket_number} issued to {plate}/{jurisdiction} by {officer_id}")
    return violation


def issue_warning(db: Session, clock, *, license_plate: str, state_province: str, officer_id: str,
                  warning_type: str, warning_reason: str, location: Optional[str] = None,
                  gps_latitude: Optional[float] = None, gps_longitude: Optional[float] = None,
                  notes: Optional[str] = None, warning_id: Optional[str] = None,
                  warning_number: Optional[str] = None, issued_at: Optional[datetime] = None,
                  commit: bool = True) -> ParkingWarning:
    require({"license_plate": license_plate, "state_province": state_province, "issued_by": officer_id,
             "warning_type": warning_type, "warning_reason": warning_reason})
    plate, jurisdiction = normalize_plate(license_plate, state_province)
    validate_gps(gps_latitude, gps_longitude)
    require_active_officer(db, officer_id)

    store = WarningStore(db)
    if warning_id and store.get(warning_id) is not None:
        raise ConflictError("A warning with this id already exists")

    at = issued_at or clock.now()
    warning = store.add(ParkingWarning(
        id=warning_id or generate_id(),
        warning_number=warning_number or generate_number(WARNING_PREFIX, at),
        license_plate=plate,
        state_province=jurisdiction,
        issued_by=officer_id,
        warning_type=warning_type,
        warning_reason=warning_reason,
        location=location,
        gps_latitude=gps_latitude,
        gps_longitude=gps_longitude,
        notes=notes,
        issued_at=at,
    ))
    flush_or_raise(db)

    log_activity(db, clock, officer_id, "warning", license_plate=plate, state_province=jurisdiction,
                 location=location, gps_latitude=gps_latitude, gps_longitude=gps_longitude,
                 result="warning_issued", performed_at=at, commit=False)
    if commit:
        commit_or_raise(db)
    logger.info(f"[Warning] {warning.warning_number} issued to {plate}/{jurisdiction} by {officer_id}")
    return warning


def log_activity(db: Session, clock, officer_id: str, activity_type: str, *,
                 license_plate: Optional[str] = None, state_province: Optional[str] = None,
                 location: Optional[str] = None, gps_latitude: Optional[float] = None,
                 gps_longitude: Optional[float] = None, result: Optional[str] = None,
                 notes: Optional[str] = None, activity_id: Optional[str] = None,
                 performed_at: Optional[datetime] = None, commit: bool = True) -> EnforcementActivity:
    require({"officer_id": officer_id, "activity_type": activity_type})
    if activity_type not in ACTIVITY_TYPES:
        raise ValidationError(f"Unknown activity type: {activity_type}")
    validate_gps(gps_latitude, gps_longitude)
    if license_plate:
        license_plate, state_province = normalize_plate(license_plate, state_province or settings.DEFAULT_JURISDICTION)
    require_active_officer(db, officer_id)

    store = ActivityStore(db)
    if activity_id and store.get(activity_id) is not None:
        raise ConflictError("An activity with this id already exists")

    now = clock.now()
    activity = store.add(EnforcementActivity(
        id=activity_id or generate_id(),
        officer_id=officer_id,
        activity_type=activity_type,
        license_plate=license_plate,
        state_province=state_province,
        location=location,
        gps_latitude=gps_latitude,
        gps_longitude=gps_longitude,
        result=result,
        notes=notes,
        performed_at=performed_at or now,
        created_at=now,
    ))
    if commit:
        commit_or_raise(db)
    else:
        flush_or_raise(db)
    return activity


def void_ticket(db: Session, clock, ticket_id: str, reason: str) -> Violation:
    """Voiding twice is a conflict, not a silent success."""
    require({"voided_reason": reason})
    violation = ViolationStore(db).get(ticket_id)
    if not violation:
        raise NotFoundError("Ticket not found")
    if violation.status == "voided":
        raise ConflictError("Ticket is already voided")

    violation.status = "voided"
    violation.voided_at = clock.now()
    violation.voided_reason = reason
    violation.duplicate_bucket = None   # frees the slot for a corrected ticket
    commit_or_raise(db)
    logger.info(f"[Ticket] {violation.ticket_number} voided: {reason}")
    return violation


def activity_summary(db: Session, clock, officer_id: str, period: str = "today") -> dict:
    require({"officer_id": officer_id})
    now = clock.now()
    if period not in SUMMARY_PERIODS:
        period = "today"
    window = SUMMARY_PERIODS[period]
    since = datetime.combine(now.date(), datetime.min.time()) if window is None else now - window

    counts = ActivityStore(db).counts_by_type(officer_id, since)
    return {
        "officer_id": officer_id,
        "period": period,
        "summary": {
            "total_activities": sum(counts.values()),
            "total_scans": counts.get("scan", 0),
            "total_tickets": counts.get("ticket", 0),
            "total_warnings": counts.get("warning", 0),
            "total_patrols": counts.get("patrol", 0),
        },
    }
