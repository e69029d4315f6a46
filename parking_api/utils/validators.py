# parking_api/utils/validators.py
"""Input normalisation shared by live requests and offline replay."""

import re
from typing import Optional, Tuple

from parking_api.errors import ValidationError

PLATE_PATTERN = re.compile(r"^[A-Z0-9]{2,8}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_plate(plate: Optional[str], jurisdiction: Optional[str]) -> Tuple[str, str]:
    """Upper-case and validate a plate + jurisdiction pair. Raises ValidationError."""
    if not plate or not jurisdiction:
        raise ValidationError("License plate and state/province are required")
    plate = plate.strip().upper()
    jurisdiction = jurisdiction.strip().upper()
    if not PLATE_PATTERN.match(plate):
        raise ValidationError("Invalid license plate format")
    return plate, jurisdiction


def validate_gps(latitude: Optional[float], longitude: Optional[float]):
    if latitude is not None and not -90 <= latitude <= 90:
        raise ValidationError("Invalid GPS coordinates")
    if longitude is not None and not -180 <= longitude <= 180:
        raise ValidationError("Invalid GPS coordinates")


def normalize_email(email: Optional[str]) -> str:
    if not email or not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email format")
    return email.lower()


def require(fields: dict):
    """Raise a ValidationError naming every missing (falsy) field."""
    missing = [name for name, value in fields.items() if value in (None, "")]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
