# parking_api/routers/sync.py
"""Offline action queue: enqueue, reconcile, status."""

from dataclasses import asdict
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from parking_api.database import get_db
from parking_api.schemas.sync import OfflineActionCreate, OfflineActionOut, ReconcileOut, SyncProcess, SyncStatusOut
from parking_api.services import offline_sync_service
from parking_api.utils.clock import get_clock

router = APIRouter()


@router.post("/enforcement/sync/queue", status_code=status.HTTP_201_CREATED, summary="Queue an offline action")
def queue_offline_action(body: OfflineActionCreate, db: Session = Depends(get_db), clock=Depends(get_clock)):
    action = offline_sync_service.enqueue(
        db, clock, body.officer_id, body.action_type, body.action_data, body.performed_at,
    )
    return {"success": True, "data": OfflineActionOut.model_validate(action), "message": "Action queued"}


@router.post("/enforcement/sync/process", summary="Reconcile an officer's queued actions")
def process_offline_actions(body: SyncProcess, db: Session = Depends(get_db), clock=Depends(get_clock)):
    result = offline_sync_service.reconcile(db, clock, body.officer_id)
    return {
        "success": True,
        "data": ReconcileOut(**asdict(result)),
        "message": f"Processed {result.processed} actions: {result.succeeded} succeeded, {result.failed} failed",
    }


@router.get("/enforcement/sync/status", summary="Offline queue status for an officer")
def sync_status(officer_id: str, db: Session = Depends(get_db)):
    return {"success": True, "data": SyncStatusOut(**offline_sync_service.sync_status(db, officer_id))}
