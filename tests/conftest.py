import os
import tempfile
from datetime import timedelta
from decimal import Decimal
from pathlib import Path

# Point the app at a throwaway SQLite file before anything imports settings
_DB_FILE = Path(tempfile.mkstemp(prefix="macairlines-test", suffix=".db")[1])
os.environ["DATABASE_URL"] = f"sqlite+pysqlite:///{_DB_FILE}"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["SEED_ON_START"] = "false"

import uuid

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core.clock import utcnow
from app.core.security import create_access_token, hash_password
from app.db.session import Base, SessionLocal, engine
from app.models.audit_log import AuditLog  # noqa: F401
from app.models.user import User
from app.seed import SEED_LAYOUT
from app.services.flight_service import create_flight


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield


@pytest.fixture
def session_factory():
    return SessionLocal


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def _make_user(email: str, role: str, first: str, last: str) -> User:
    with SessionLocal() as session:
        u = User(
            id=str(uuid.uuid4()),
            email=email,
            first_name=first,
            last_name=last,
            phone=None,
            role=role,
            password_hash=hash_password("password123"),
        )
        session.add(u)
        session.commit()
        return u


@pytest.fixture
def customer():
    return _make_user("priya@example.com", "customer", "Priya", "Krishnan")


@pytest.fixture
def other_customer():
    return _make_user("arjun@example.com", "customer", "Arjun", "Raman")


@pytest.fixture
def employee():
    return _make_user("lakshmi@airways.example", "employee", "Lakshmi", "Sharma")


@pytest.fixture
def make_flight(employee):
    """Create a flight with business rows 1-3 (A/C/D/F, +2000) and economy rows 4-28."""
    counter = {"n": 0}

    def _make(departure_in=timedelta(days=3), base_price="4500.00", layout=SEED_LAYOUT, **overrides):
        counter["n"] += 1
        departure = utcnow().replace(microsecond=0) + departure_in
        data = {
            "flight_number": f"MA{100 + counter['n']}",
            "airline": "MacAirlines",
            "aircraft": "Airbus A320neo",
            "origin": "Chennai (MAA)",
            "destination": "Mumbai (BOM)",
            "departure_time": departure,
            "arrival_time": departure + timedelta(minutes=135),
            "base_price": Decimal(base_price),
            "gate": "A12",
            "status": "scheduled",
        }
        data.update(overrides)
        with SessionLocal() as session:
            return create_flight(session, data, employee, layout=layout)

    return _make


@pytest.fixture
def passenger_data():
    return {
        "first_name": "Priya",
        "last_name": "Krishnan",
        "email": "Priya@Example.com",
        "phone": "+91 98765 43210",
    }


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id, role=user.role)}"}
    return _headers


def pytest_sessionfinish(session, exitstatus):
    engine.dispose()
    _DB_FILE.unlink(missing_ok=True)
