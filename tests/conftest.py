# tests/conftest.py
import os

# Settings are cached on first import, so the test environment goes in first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SALON_TIMEZONE"] = "UTC"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["JWT_ALGORITHM"] = "HS256"

from datetime import date, datetime, time, timedelta

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from salonbook.config.database import get_db
from salonbook.models import Base, Employee, Reservation, ReservationStatus, Service
from salonbook.services.working_hours.working_hours_service import WorkingHoursService

# Monday 19 October 2026, 08:00 salon time
NOW = datetime(2026, 10, 19, 8, 0)
MONDAY = NOW.date()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def salon_schedule(db):
    """Sunday closed, Mon-Fri 09:00-18:00, Sat 09:00-17:00, break 12:00-13:00"""
    return WorkingHoursService(db).setup_default_schedule()


@pytest.fixture
def make_service(db):
    def _make(duration_min=60, name="Haircut"):
        service = Service(name=name, duration_min=duration_min)
        db.add(service)
        db.commit()
        return service
    return _make


@pytest.fixture
def make_employee(db):
    def _make(full_name="Salma", services=()):
        employee = Employee(full_name=full_name, services=list(services))
        db.add(employee)
        db.commit()
        return employee
    return _make


@pytest.fixture
def book(db):
    """Insert a reservation directly, bypassing the booking checks"""
    def _book(employee, service, start_at, status=ReservationStatus.CONFIRMED, duration_min=None):
        duration = duration_min if duration_min is not None else service.duration_min
        reservation = Reservation(
            employee_id=employee.id,
            service_id=service.id,
            client_id="client-1",
            start_at=start_at,
            end_at=start_at + timedelta(minutes=duration),
            status=status.value,
        )
        db.add(reservation)
        db.commit()
        return reservation
    return _book


def at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute))


def iso(day: date, hour: int, minute: int = 0) -> str:
    return f"{at(day, hour, minute).isoformat()}+00:00"


# ----------------------------------------------------------------------------
# API fixtures
# ----------------------------------------------------------------------------

def make_token(sub="client-1", role="CLIENT", token_type="access", secret="test-secret"):
    return jwt.encode({"sub": sub, "role": role, "type": token_type}, secret, algorithm="HS256")


@pytest.fixture
def client(db):
    from salonbook.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def client_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def owner_headers():
    return {"Authorization": f"Bearer {make_token(sub='owner-1', role='OWNER')}"}
