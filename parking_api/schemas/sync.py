# parking_api/schemas/sync.py
from pydantic import BaseModel, field_validator
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Union


class OfflineActionCreate(BaseModel):
    officer_id: str
    action_type: str         # ticket | warning | scan
    action_data: dict[str, Any]
    performed_at: datetime


class OfflineActionOut(BaseModel):
    id: str
    officer_id: str
    action_type: str
    performed_at: datetime
    is_synced: bool
    synced_at: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class SyncProcess(BaseModel):
    officer_id: str


class ActionResultOut(BaseModel):
    action_id: str
    action_type: str
    status: str
    record_id: Optional[str] = None
    error: Optional[str] = None


class ReconcileOut(BaseModel):
    officer_id: str
    processed: int
    succeeded: int
    failed: int
    results: list[ActionResultOut]


class SyncStatusOut(BaseModel):
    officer_id: str
    total_actions: int
    synced_actions: int
    pending_actions: int
    last_sync_time: Optional[datetime]


# ── Queued payloads (checked before replay) ─────────────────────────────────
# Presence is left to the issuance functions; these only pin down types.

class TicketPayload(BaseModel):
    id: Union[str, int]
    license_plate: Optional[str] = None
    state_province: Optional[str] = None
    violation_type: Optional[str] = None
    violation_reason: Optional[str] = None
    location: Optional[str] = None
    gps_latitude: Optional[float] = None
    gps_longitude: Optional[float] = None
    fine_amount: Optional[Decimal] = None
    evidence_photo_urls: Optional[list[str]] = None
    notes: Optional[str] = None
    ticket_number: Optional[str] = None

    @field_validator("gps_latitude", "gps_longitude", "fine_amount", mode="before")
    @classmethod
    def blank_is_none(cls, value):
        return None if value == "" else value


class WarningPayload(BaseModel):
    id: Union[str, int]
    license_plate: Optional[str] = None
    state_province: Optional[str] = None
    warning_type: Optional[str] = None
    warning_reason: Optional[str] = None
    location: Optional[str] = None
    gps_latitude: Optional[float] = None
    gps_longitude: Optional[float] = None
    notes: Optional[str] = None
    warning_number: Optional[str] = None

    @field_validator("gps_latitude", "gps_longitude", mode="before")
    @classmethod
    def blank_is_none(cls, value):
        return None if value == "" else value


class ScanPayload(BaseModel):
    id: Union[str, int]
    license_plate: Optional[str] = None
    state_province: Optional[str] = None
    location: Optional[str] = None
    gps_latitude: Optional[float] = None
    gps_longitude: Optional[float] = None
    result: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("gps_latitude", "gps_longitude", mode="before")
    @classmethod
    def blank_is_none(cls, value):
        return None if value == "" else value
