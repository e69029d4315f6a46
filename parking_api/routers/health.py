# parking_api/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from parking_api.database import get_db
from parking_api.utils.clock import get_clock

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db), clock=Depends(get_clock)):
    result = {
        "status": "ok",
        "timestamp": clock.now().isoformat(),
        "backend": "ok",
        "database": "unknown",
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except SQLAlchemyError as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
