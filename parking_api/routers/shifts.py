# parking_api/routers/shifts.py
"""Officer shift start/end and shift reports."""

from datetime import date
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from parking_api.database import get_db
from parking_api.schemas.shift import ShiftEnd, ShiftReportOut, ShiftStart
from parking_api.services import shift_service
from parking_api.utils.clock import get_clock
from typing import Optional

router = APIRouter()


@router.post("/enforcement/shifts/start", status_code=status.HTTP_201_CREATED, summary="Start a shift")
def start_shift(body: ShiftStart, db: Session = Depends(get_db), clock=Depends(get_clock)):
    report = shift_service.start_shift(db, clock, body.officer_id)
    return {"success": True, "data": ShiftReportOut.model_validate(report), "message": "Shift started"}


@router.post("/enforcement/shifts/end", summary="End the current shift")
def end_shift(body: ShiftEnd, db: Session = Depends(get_db), clock=Depends(get_clock)):
    report = shift_service.end_shift(
        db, clock, body.officer_id, summary=body.summary,
        incidents=body.incidents, patrol_areas=body.patrol_areas,
    )
    return {"success": True, "data": ShiftReportOut.model_validate(report), "message": "Shift ended"}


@router.get("/enforcement/shifts/current", summary="The officer's open shift, if any")
def current_shift(officer_id: str, db: Session = Depends(get_db), clock=Depends(get_clock)):
    report = shift_service.current_shift(db, clock, officer_id)
    return {"success": True, "data": ShiftReportOut.model_validate(report) if report else None}


@router.get("/enforcement/shifts", summary="List shift reports")
def list_shift_reports(officer_id: Optional[str] = None, day: Optional[date] = None,
                       start_date: Optional[date] = None, end_date: Optional[date] = None,
                       db: Session = Depends(get_db)):
    reports = shift_service.list_shift_reports(db, officer_id=officer_id, day=day,
                                               start_date=start_date, end_date=end_date)
    return {"success": True, "data": [ShiftReportOut.model_validate(r) for r in reports]}
