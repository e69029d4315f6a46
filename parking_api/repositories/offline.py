# parking_api/repositories/offline.py
"""Stores for the offline action queue and the per-officer reconciliation lock."""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, case
from sqlalchemy.orm import Session
from parking_api.models.offline_action import OfflineAction
from parking_api.models.sync_lock import SyncLock


class OfflineActionStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, action_id: str) -> Optional[OfflineAction]:
        return self.db.get(OfflineAction, action_id)

    def add(self, action: OfflineAction) -> OfflineAction:
        self.db.add(action)
        return action

    def unsynced_for_officer(self, officer_id: str) -> list[OfflineAction]:
        """Capture order: oldest performed_at first."""
        return self.db.query(OfflineAction).filter(
            OfflineAction.officer_id == officer_id,
            OfflineAction.is_synced.is_(False),
        ).order_by(OfflineAction.performed_at.asc(), OfflineAction.created_at.asc()).all()

    def mark_synced(self, action_id: str, synced_at: datetime) -> bool:
        """
        One-way false → true flip. Returns False when the action was already
        synced (or does not exist), so the caller can treat it as a conflict.
        """
        updated = self.db.query(OfflineAction).filter(
            OfflineAction.id == action_id,
            OfflineAction.is_synced.is_(False),
        ).update({"is_synced": True, "synced_at": synced_at}, synchronize_session="fetch")
        return updated == 1

    def status_for_officer(self, officer_id: str) -> dict:
        total, synced, last_sync = self.db.query(
            func.count(OfflineAction.id),
            func.sum(case((OfflineAction.is_synced.is_(True), 1), else_=0)),
            func.max(OfflineAction.synced_at),
        ).filter(OfflineAction.officer_id == officer_id).one()
        synced = int(synced or 0)
        return {
            "total_actions": total,
            "synced_actions": synced,
            "pending_actions": total - synced,
            "last_sync_time": last_sync,
        }


class SyncLockStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, officer_id: str) -> Optional[SyncLock]:
        return self.db.get(SyncLock, officer_id)

    def add(self, lock: SyncLock) -> SyncLock:
        self.db.add(lock)
        return lock

    def delete(self, officer_id: str, token: str) -> bool:
        """Delete the lock only if it is still held under `token`."""
        deleted = self.db.query(SyncLock).filter(
            SyncLock.officer_id == officer_id, SyncLock.token == token
        ).delete(synchronize_session="fetch")
        return deleted == 1
