# tests/conftest.py
"""
Shared fixtures: an in-memory SQLite database per test, a FixedClock, the
seeded permit catalog, two active officers and one registered vehicle.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest
from datetime import datetime
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import parking_api.models  # noqa
from parking_api.database import Base, get_db, seed_permit_types
from parking_api.models.officer import EnforcementOfficer
from parking_api.services import registry_service
from parking_api.utils.clock import FixedClock, get_clock

NOW = datetime(2026, 3, 10, 14, 0, 0)


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    seed_permit_types(session)
    yield session
    session.close()


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def officers(db, clock):
    """Two active officers, ids O1 and O2."""
    rows = []
    for officer_id, badge in (("O1", "B-100"), ("O2", "B-200")):
        officer = EnforcementOfficer(
            id=officer_id, badge_number=badge, first_name="Field", last_name=officer_id,
            email=f"{officer_id.lower()}@enforcement.test", is_active=True, created_at=clock.now(),
        )
        db.add(officer)
        rows.append(officer)
    db.commit()
    return rows


@pytest.fixture
def tenant(db, clock):
    return registry_service.create_tenant(
        db, clock, first_name="Dana", last_name="Reyes", email="dana@example.com", unit_number="4B",
    )


@pytest.fixture
def vehicle(db, clock, tenant):
    return registry_service.add_vehicle(
        db, clock, tenant.id, license_plate="abc123", state_province="ca",
        make="Toyota", model="Corolla", color="Blue", year=2021,
    )


@pytest.fixture
def client(db, session_factory, clock):
    """TestClient bound to the same in-memory database and clock as `db`."""
    from parking_api.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()
