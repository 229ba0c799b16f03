"""
Pytest configuration and shared fixtures
"""
import os
from datetime import datetime, timedelta

import pytest

# Must be set before servicehub.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DEFAULT_SERVICES"] = "false"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from servicehub.database import Base  # noqa: E402
from servicehub.models import Employee, Vehicle  # noqa: E402
from servicehub.seed import seed_services  # noqa: E402


@pytest.fixture
def engine():
    """Fresh in-memory database per test"""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def services(db):
    """Default catalog, keyed by service name"""
    seed_services(db)
    from servicehub.domain.catalog.repository import ServiceRepository

    return {s.name: s for s in ServiceRepository.list_services(db)}


@pytest.fixture
def employees(db):
    staff = [
        Employee(id="E7", full_name="Dana Perera", email="dana@example.com", role="EMPLOYEE"),
        Employee(id="E8", full_name="Ravi Silva", email="ravi@example.com", role="EMPLOYEE"),
    ]
    db.add_all(staff)
    db.commit()
    return {e.id: e for e in staff}


@pytest.fixture
def vehicles(db):
    """One vehicle for customer C1 and one for customer C2"""
    own = Vehicle(customer_id="C1", make_model="Toyota Corolla", license_plate="CAB-1234", year=2019)
    other = Vehicle(customer_id="C2", make_model="Honda Civic", license_plate="KX-9911", year=2021)
    db.add_all([own, other])
    db.commit()
    return {"C1": own, "C2": other}


class FakeClock:
    """Deterministic replacement for the UTC clock"""

    def __init__(self, start=datetime(2025, 11, 12, 9, 0)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def lifecycle(db, services, employees, vehicles, clock):
    from servicehub.domain.work_items.service import WorkItemLifecycle

    return WorkItemLifecycle(db, timer_mode="manual", clock=clock)


@pytest.fixture
def appointment_payload(services, vehicles):
    return {
        "customerId": "C1",
        "vehicleId": vehicles["C1"].id,
        "serviceId": services["Oil Change"].id,
        "date": "2025-11-12",
        "startTime": "09:00",
        "description": "Regular service",
    }


@pytest.fixture
def booked(lifecycle, appointment_payload):
    """A REQUESTING Oil Change appointment for C1 on 2025-11-12 at 09:00"""
    from servicehub.domain.work_items.schemas import AppointmentCreate

    return lifecycle.create_appointment(AppointmentCreate(**appointment_payload))


@pytest.fixture
def client(session_factory, services, employees, vehicles):
    """TestClient with get_db bound to the test database"""
    from fastapi.testclient import TestClient

    from servicehub.database import get_db
    from servicehub.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with_client = TestClient(app)
    yield with_client
    app.dependency_overrides.clear()
