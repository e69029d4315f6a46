# parking_api/routers/enforcement.py
"""
Officer-facing endpoints: plate lookup, tickets, warnings, activity log.
All issuance goes through enforcement_service so live and offline paths
apply the same rules.
"""

from datetime import date
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from parking_api.database import get_db
from parking_api.repositories.enforcement import ActivityStore, ViolationStore, WarningStore
from parking_api.schemas.enforcement import (
    ActivityCreate, ActivityOut, OfficerCreate, OfficerOut, TicketCreate, TicketOut,
    TicketVoid, WarningCreate, WarningOut, plate_lookup_out,
)
from parking_api.services import enforcement_service, registry_service
from parking_api.utils.clock import get_clock
from typing import Optional

router = APIRouter()


@router.get("/enforcement/license-plates/{plate}", summary="Resolve authorization for a plate")
def lookup_license_plate(plate: str, state_province: Optional[str] = None, state: Optional[str] = None,
                         officer_id: Optional[str] = None,
                         db: Session = Depends(get_db), clock=Depends(get_clock)):
    """
    Verdict + recommended action for the officer. Passing officer_id records
    the scan in the activity log. `state` is accepted as a synonym for
    `state_province`.
    """
    lookup = enforcement_service.lookup_plate(db, clock, plate, state_province or state, officer_id=officer_id)
    return {"success": True, "data": plate_lookup_out(lookup)}


@router.post("/enforcement/officers", status_code=status.HTTP_201_CREATED, summary="Register an officer")
def create_officer(body: OfficerCreate, db: Session = Depends(get_db), clock=Depends(get_clock)):
    officer = registry_service.create_officer(db, clock, **body.model_dump())
    return {"success": True, "data": OfficerOut.model_validate(officer), "message": "Officer registered"}


# ── Tickets ──────────────────────────────────────────────────────────────────

@router.post("/enforcement/tickets", status_code=status.HTTP_201_CREATED, summary="Issue a ticket")
def issue_ticket(body: TicketCreate, db: Session = Depends(get_db), clock=Depends(get_clock)):
    ticket = enforcement_service.issue_ticket(
        db, clock,
        license_plate=body.license_plate,
        state_province=body.state_province,
        officer_id=body.issued_by,
        violation_type=body.violation_type,
        violation_reason=body.violation_reason,
        location=body.location,
        gps_latitude=body.gps_latitude,
        gps_longitude=body.gps_longitude,
        fine_amount=body.fine_amount,
        evidence_photo_urls=body.evidence_photo_urls,
        notes=body.notes,
    )
    return {"success": True, "data": TicketOut.model_validate(ticket), "message": "Ticket issued"}


@router.get("/enforcement/tickets", summary="List tickets")
def list_tickets(officer_id: Optional[str] = None, day: Optional[date] = None,
                 status: Optional[str] = None, license_plate: Optional[str] = None,
                 db: Session = Depends(get_db)):
    tickets = ViolationStore(db).search(officer_id=officer_id, day=day, status=status, plate=license_plate)
    return {"success": True, "data": [TicketOut.model_validate(t) for t in tickets]}


@router.put("/enforcement/tickets/{ticket_id}/void", summary="Void a ticket")
def void_ticket(ticket_id: str, body: TicketVoid, db: Session = Depends(get_db), clock=Depends(get_clock)):
    ticket = enforcement_service.void_ticket(db, clock, ticket_id, body.voided_reason)
    return {"success": True, "data": TicketOut.model_validate(ticket), "message": "Ticket voided"}


# ── Warnings ─────────────────────────────────────────────────────────────────

@router.post("/enforcement/warnings", status_code=status.HTTP_201_CREATED, summary="Issue a warning")
def issue_warning(body: WarningCreate, db: Session = Depends(get_db), clock=Depends(get_clock)):
    warning = enforcement_service.issue_warning(
        db, clock,
        license_plate=body.license_plate,
        state_province=body.state_province,
        officer_id=body.issued_by,
        warning_type=body.warning_type,
        warning_reason=body.warning_reason,
        location=body.location,
        gps_latitude=body.gps_latitude,
        gps_longitude=body.gps_longitude,
        notes=body.notes,
    )
    return {"success": True, "data": WarningOut.model_validate(warning), "message": "Warning issued"}


@router.get("/enforcement/warnings", summary="List warnings")
def list_warnings(officer_id: Optional[str] = None, day: Optional[date] = None,
                  license_plate: Optional[str] = None, db: Session = Depends(get_db)):
    warnings = WarningStore(db).search(officer_id=officer_id, day=day, plate=license_plate)
    return {"success": True, "data": [WarningOut.model_validate(w) for w in warnings]}


# ── Activity log ─────────────────────────────────────────────────────────────

@router.post("/enforcement/activities", status_code=status.HTTP_201_CREATED, summary="Log an officer activity")
def log_activity(body: ActivityCreate, db: Session = Depends(get_db), clock=Depends(get_clock)):
    fields = body.model_dump(exclude={"officer_id", "activity_type"})
    activity = enforcement_service.log_activity(db, clock, body.officer_id, body.activity_type, **fields)
    return {"success": True, "data": ActivityOut.model_validate(activity), "message": "Activity logged"}


@router.get("/enforcement/activities/summary", summary="Activity totals for today / week / month")
def activity_summary(officer_id: str, period: str = "today", db: Session = Depends(get_db),
                     clock=Depends(get_clock)):
    return {"success": True, "data": enforcement_service.activity_summary(db, clock, officer_id, period)}


@router.get("/enforcement/activities", summary="List officer activities")
def list_activities(officer_id: Optional[str] = None, day: Optional[date] = None,
                    activity_type: Optional[str] = None, db: Session = Depends(get_db)):
    activities = ActivityStore(db).search(officer_id=officer_id, day=day, activity_type=activity_type)
    return {"success": True, "data": [ActivityOut.model_validate(a) for a in activities]}
