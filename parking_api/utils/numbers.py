# parking_api/utils/numbers.py
"""Human-facing record numbers: PR- / PM- / TK- / WN- / SR-YYYYMMDD-NNNNN."""

import secrets
import uuid
from datetime import datetime

REQUEST_PREFIX = "PR"
PERMIT_PREFIX = "PM"
TICKET_PREFIX = "TK"
WARNING_PREFIX = "WN"
SHIFT_REPORT_PREFIX = "SR"


def generate_id() -> str:
    return str(uuid.uuid4())


def generate_number(prefix: str, now: datetime) -> str:
    return f"{prefix}-{now.strftime('%Y%m%d')}-{secrets.randbelow(100000):05d}"
