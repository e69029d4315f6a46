# parking_api/errors.py
"""
Domain error taxonomy shared by services, stores and routers.
Each error carries the HTTP status the API layer answers with.
"""


class ParkingError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ParkingError):
    """Malformed or logically inconsistent input. Never retried."""
    status_code = 400


class NotFoundError(ParkingError):
    """Referenced record does not exist or is inactive."""
    status_code = 404


class ConflictError(ParkingError):
    """Uniqueness violation, duplicate ticket, double void, re-sync."""
    status_code = 409


class StorageError(ParkingError):
    """Opaque persistence failure."""
    status_code = 500
