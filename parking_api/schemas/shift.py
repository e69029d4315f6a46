# parking_api/schemas/shift.py
from pydantic import BaseModel
from datetime import date, datetime
from typing import Optional


class ShiftStart(BaseModel):
    officer_id: str


class ShiftEnd(BaseModel):
    officer_id: str
    summary: Optional[str] = None
    incidents: list[str] = []
    patrol_areas: list[str] = []


class ShiftReportOut(BaseModel):
    id: str
    report_number: str
    officer_id: str
    shift_date: date
    shift_start_time: datetime
    shift_end_time: Optional[datetime]
    total_scans: int
    total_tickets: int
    total_warnings: int
    total_violations_found: int
    patrol_areas: Optional[list[str]]
    incidents: Optional[list[str]]
    summary: Optional[str]

    class Config:
        from_attributes = True
