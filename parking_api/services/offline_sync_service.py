# parking_api/services/offline_sync_service.py
"""
Offline Action Reconciler
Officers capture tickets, warnings and scans without connectivity; the device
queues them here and later asks for a reconciliation run.

Pipeline per reconcile(officer):
  1. Take the officer's sync lock (one run per officer at a time)
  2. Load unsynced actions, oldest performed_at first
  3. Replay each through the live issuance functions, with the payload id as
     the record id and performed_at as the issuance instant
  4. Record + synced flag commit together; a failed action is rolled back,
     reported, left unsynced, and the loop moves on
  5. Release the lock

A payload id that already exists as a record means an earlier run applied it
but never got to flip the flag: the action is marked synced as already_applied.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from parking_api.config import settings
from parking_api.database import commit_or_raise
from parking_api.errors import ConflictError, ParkingError, ValidationError
from parking_api.models.offline_action import OfflineAction
from parking_api.models.sync_lock import SyncLock
from parking_api.repositories.enforcement import ActivityStore, ViolationStore, WarningStore
from parking_api.repositories.offline import OfflineActionStore, SyncLockStore
from parking_api.schemas.sync import ScanPayload, TicketPayload, WarningPayload
from parking_api.services import enforcement_service
from parking_api.services.registry_service import require_active_officer
from parking_api.utils.clock import to_naive_utc
from parking_api.utils.json_parser import safe_parse_json
from parking_api.utils.numbers import generate_id
from parking_api.utils.validators import require
from parking_api.utils.logger import get_logger

logger = get_logger(__name__)

ACTION_TYPES = ("ticket", "warning", "scan")
LOCK_TIMEOUT = timedelta(seconds=settings.SYNC_LOCK_TIMEOUT_SECONDS)


@dataclass
class ActionResult:
    action_id: str
    action_type: str
    status: str                      # synced | already_applied | failed
    record_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status != "failed"


@dataclass
class ReconcileResult:
    officer_id: str
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    results: list[ActionResult] = field(default_factory=list)

    def add(self, result: ActionResult):
        self.processed += 1
        if result.succeeded:
            self.succeeded += 1
        else:
            self.failed += 1
        self.results.append(result)


# ── Queue ────────────────────────────────────────────────────────────────────

def enqueue(db: Session, clock, officer_id: str, action_type: str, payload: dict,
            performed_at: datetime) -> OfflineAction:
    """
    Store a captured action as unsynced. Unknown action types are accepted
    here and fail at reconciliation, so nothing captured in the field is lost.
    """
    require({"officer_id": officer_id, "action_type": action_type,
             "action_data": payload, "performed_at": performed_at})
    if not isinstance(payload, dict) or not payload.get("id"):
        raise ValidationError("Offline action payload must carry an id")
    require_active_officer(db, officer_id)

    action = OfflineActionStore(db).add(OfflineAction(
        id=generate_id(),
        officer_id=officer_id,
        action_type=action_type,
        action_data=json.dumps(payload, default=str),
        performed_at=to_naive_utc(performed_at),
        is_synced=False,
        created_at=clock.now(),
    ))
    commit_or_raise(db)
    logger.info(f"[Sync] Queued {action_type} {payload['id']} for officer {officer_id}")
    return action


def sync_status(db: Session, officer_id: str) -> dict:
    require({"officer_id": officer_id})
    status = OfflineActionStore(db).status_for_officer(officer_id)
    return {"officer_id": officer_id, **status}


# ── Payload parsing ──────────────────────────────────────────────────────────

def _parse(model, payload: dict):
    """Type-check a stored payload; a malformed one fails its own action only."""
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        where = ".".join(str(part) for part in first["loc"]) or "payload"
        raise ValidationError(f"Invalid {where}: {first['msg']}")


# ── Handlers: (record_id, already_applied) ───────────────────────────────────

def _replay_ticket(db: Session, clock, action: OfflineAction, payload: dict):
    data = _parse(TicketPayload, payload)
    record_id = str(data.id)
    if ViolationStore(db).get(record_id) is not None:
        return record_id, True
    enforcement_service.issue_ticket(
        db, clock,
        license_plate=data.license_plate,
        state_province=data.state_province,
        officer_id=action.officer_id,
        violation_type=data.violation_type,
        violation_reason=data.violation_reason,
        location=data.location,
        gps_latitude=data.gps_latitude,
        gps_longitude=data.gps_longitude,
        fine_amount=data.fine_amount,
        evidence_photo_urls=data.evidence_photo_urls,
        notes=data.notes,
        ticket_id=record_id,
        ticket_number=data.ticket_number,
        issued_at=action.performed_at,
        commit=False,
    )
    return record_id, False


def _replay_warning(db: Session, clock, action: OfflineAction, payload: dict):
    data = _parse(WarningPayload, payload)
    record_id = str(data.id)
    if WarningStore(db).get(record_id) is not None:
        return record_id, True
    enforcement_service.issue_warning(
        db, clock,
        license_plate=data.license_plate,
        state_province=data.state_province,
        officer_id=action.officer_id,
        warning_type=data.warning_type,
        warning_reason=data.warning_reason,
        location=data.location,
        gps_latitude=data.gps_latitude,
        gps_longitude=data.gps_longitude,
        notes=data.notes,
        warning_id=record_id,
        warning_number=data.warning_number,
        issued_at=action.performed_at,
        commit=False,
    )
    return record_id, False


def _replay_scan(db: Session, clock, action: OfflineAction, payload: dict):
    data = _parse(ScanPayload, payload)
    record_id = str(data.id)
    if ActivityStore(db).get(record_id) is not None:
        return record_id, True
    enforcement_service.log_activity(
        db, clock, action.officer_id, "scan",
        license_plate=data.license_plate,
        state_province=data.state_province,
        location=data.location,
        gps_latitude=data.gps_latitude,
        gps_longitude=data.gps_longitude,
        result=data.result,
        notes=data.notes,
        activity_id=record_id,
        performed_at=action.performed_at,
        commit=False,
    )
    return record_id, False


HANDLERS = {
    "ticket": _replay_ticket,
    "warning": _replay_warning,
    "scan": _replay_scan,
}


# ── Lock ─────────────────────────────────────────────────────────────────────

def _acquire_lock(db: Session, clock, officer_id: str) -> str:
    locks = SyncLockStore(db)
    now = clock.now()
    held = locks.get(officer_id)
    if held is not None:
        if now - held.acquired_at < LOCK_TIMEOUT:
            raise ConflictError("Reconciliation already in progress for this officer")
        logger.warning(f"[Sync] Taking over stale lock for officer {officer_id} (since {held.acquired_at})")
        if not locks.delete(officer_id, held.token):
            raise ConflictError("Reconciliation already in progress for this officer")

    token = generate_id()
    locks.add(SyncLock(officer_id=officer_id, acquired_at=now, token=token))
    try:
        commit_or_raise(db)
    except ConflictError as exc:
        raise ConflictError("Reconciliation already in progress for this officer") from exc
    return token


def _release_lock(db: Session, officer_id: str, token: str):
    db.rollback()
    SyncLockStore(db).delete(officer_id, token)
    commit_or_raise(db)


# ── Reconcile ────────────────────────────────────────────────────────────────

def _replay(db: Session, clock, store: OfflineActionStore, action: OfflineAction) -> ActionResult:
    action_id, action_type = action.id, action.action_type
    try:
        handler = HANDLERS.get(action_type)
        if handler is None:
            raise ValidationError(f"Unknown action type: {action_type}")
        payload = safe_parse_json(action.action_data)
        if not isinstance(payload, dict) or not payload.get("id"):
            raise ValidationError("Offline action payload is missing its id")

        record_id, already_applied = handler(db, clock, action, payload)
        if not store.mark_synced(action_id, clock.now()):
            raise ConflictError("Offline action was already synced")
        commit_or_raise(db)
    except ParkingError as exc:
        db.rollback()
        logger.warning(f"[Sync] {action_type} {action_id} failed: {exc.message}")
        return ActionResult(action_id=action_id, action_type=action_type, status="failed", error=exc.message)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"[Sync] {action_type} {action_id} storage failure: {exc}", exc_info=True)
        return ActionResult(action_id=action_id, action_type=action_type, status="failed", error="Storage failure")

    status = "already_applied" if already_applied else "synced"
    logger.info(f"[Sync] {action_type} {action_id} → {status} ({record_id})")
    return ActionResult(action_id=action_id, action_type=action_type, status=status, record_id=record_id)


def reconcile(db: Session, clock, officer_id: str) -> ReconcileResult:
    require_active_officer(db, officer_id)
    token = _acquire_lock(db, clock, officer_id)
    result = ReconcileResult(officer_id=officer_id)
    try:
        store = OfflineActionStore(db)
        for action in store.unsynced_for_officer(officer_id):
            result.add(_replay(db, clock, store, action))
    finally:
        _release_lock(db, officer_id, token)

    logger.info(
        f"[Sync] Officer {officer_id}: processed={result.processed} "
        f"succeeded={result.succeeded} failed={result.failed}"
    )
    return result
