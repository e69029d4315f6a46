# parking_api/routers/permits.py
"""Permit types, permit requests and the admin review queue."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from parking_api.database import get_db
from parking_api.repositories.permits import PermitRequestStore, PermitTypeStore
from parking_api.schemas.permit import (
    PermitApplicationCreate, PermitOut, PermitRequestCreate, PermitRequestOut,
    PermitTypeOut, ReviewDecision, RevokePermit,
)
from parking_api.services import permit_service
from parking_api.utils.clock import get_clock, to_naive_utc
from parking_api.utils.time_window import TimeWindow
from typing import Optional

router = APIRouter()


def _submission(result) -> dict:
    data = {
        "permit_request": PermitRequestOut.model_validate(result.permit_request),
        "auto_approved": result.auto_approved,
    }
    if result.permit is not None:
        data["permit"] = PermitOut.model_validate(result.permit)
    return data


@router.get("/permit-types", summary="Active permit type catalog")
def list_permit_types(db: Session = Depends(get_db)):
    types = PermitTypeStore(db).list_active()
    return {"success": True, "data": [PermitTypeOut.model_validate(t) for t in types]}


@router.post("/permit-requests", status_code=status.HTTP_201_CREATED, summary="Submit a permit request")
def submit_permit_request(body: PermitRequestCreate, db: Session = Depends(get_db), clock=Depends(get_clock)):
    window = TimeWindow(start=to_naive_utc(body.requested_start), end=to_naive_utc(body.requested_end))
    result = permit_service.submit_request(
        db, clock, body.vehicle_id, body.permit_type_id, window,
        priority=body.priority, notes=body.notes,
    )
    message = "Permit auto-approved" if result.auto_approved else "Permit request submitted for review"
    return {"success": True, "data": _submission(result), "message": message}


@router.post("/submit-permit-request", status_code=status.HTTP_201_CREATED,
             summary="Combined tenant + vehicle + permit request form")
def submit_permit_application(body: PermitApplicationCreate, db: Session = Depends(get_db),
                              clock=Depends(get_clock)):
    fields = body.model_dump(exclude={"requested_start", "requested_end"})
    window = None
    if body.requested_start and body.requested_end:
        window = TimeWindow(start=to_naive_utc(body.requested_start), end=to_naive_utc(body.requested_end))
    result = permit_service.submit_permit_application(db, clock, window=window, **fields)
    return {"success": True, "data": _submission(result), "message": "Permit application submitted"}


@router.get("/permit-requests", summary="Review queue — highest priority, oldest first")
def review_queue(status: Optional[str] = None, limit: int = 20, offset: int = 0,
                 db: Session = Depends(get_db)):
    requests = PermitRequestStore(db).review_queue(status, limit=min(limit, 100), offset=max(offset, 0))
    return {
        "success": True,
        "data": [PermitRequestOut.model_validate(r) for r in requests],
        "pagination": {"limit": min(limit, 100), "offset": max(offset, 0)},
    }


@router.put("/permit-requests/{request_id}/review", summary="Review a permit request")
def review_permit_request(request_id: str, body: ReviewDecision, db: Session = Depends(get_db),
                          clock=Depends(get_clock)):
    result = permit_service.review_request(
        db, clock, request_id, body.status, reviewer=body.reviewed_by, reason=body.reason,
    )
    return {"success": True, "data": _submission(result), "message": f"Permit request {body.status}"}


@router.put("/permits/{permit_id}/revoke", summary="Revoke an issued permit")
def revoke_permit(permit_id: str, body: RevokePermit, db: Session = Depends(get_db), clock=Depends(get_clock)):
    permit = permit_service.revoke_permit(db, clock, permit_id, body.reason)
    return {"success": True, "data": PermitOut.model_validate(permit), "message": "Permit revoked"}
