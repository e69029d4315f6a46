# parking_api/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy with PostgreSQL (SQLite accepted for local runs and tests).
All models are auto-imported here so create_tables() creates every table in one call.
"""

from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from parking_api.config import settings
from parking_api.errors import ConflictError, StorageError
from parking_api.utils.logger import get_logger

logger = get_logger(__name__)


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,   # Auto-reconnect if DB connection drops
        "pool_size": 10,
        "max_overflow": 20,
    }


engine = create_engine(settings.DATABASE_URL, echo=False, **_engine_options(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit_or_raise(db: Session):
    """
    Commit the unit of work. Uniqueness violations become ConflictError,
    every other storage failure becomes an opaque StorageError.
    """
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning(f"Integrity violation on commit: {exc.orig}")
        raise ConflictError("Record conflicts with an existing record") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Storage failure on commit: {exc}", exc_info=True)
        raise StorageError("Storage failure") from exc


def flush_or_raise(db: Session):
    """Same error mapping as commit_or_raise, without ending the transaction."""
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Record conflicts with an existing record") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Storage failure on flush: {exc}", exc_info=True)
        raise StorageError("Storage failure") from exc


@contextmanager
def transaction(db: Session):
    """
    All-or-nothing block: commits on success, rolls back everything written
    inside the block on any exception and re-raises it.
    """
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    commit_or_raise(db)


def create_tables():
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    import parking_api.models  # noqa

    Base.metadata.create_all(bind=engine)


PERMIT_TYPE_CATALOG = [
    # id, name, description, duration_days, max_vehicles, requires_approval, auto_approve
    ("resident", "Resident Permit", "Standard residential parking permit", 365, 2, False, False),
    ("guest", "Guest Permit", "Temporary guest parking permit", 7, 1, False, True),
    ("temporary", "Temporary Permit", "Short-term temporary parking permit", 30, 1, True, False),
    ("commercial", "Commercial Permit", "Commercial vehicle parking permit", 365, 1, True, False),
]


def seed_permit_types(db: Session):
    """Insert the static permit type catalog. Existing rows are left untouched."""
    from parking_api.models.permit_type import PermitType

    for type_id, name, description, days, max_vehicles, requires_approval, auto_approve in PERMIT_TYPE_CATALOG:
        if db.get(PermitType, type_id) is not None:
            continue
        db.add(PermitType(
            id=type_id, name=name, description=description, duration_days=days,
            max_vehicles_per_tenant=max_vehicles, requires_approval=requires_approval,
            auto_approve=auto_approve, is_active=True,
        ))
    commit_or_raise(db)
