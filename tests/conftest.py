"""
Pytest configuration and shared fixtures.
"""

import os

# Must be set before salon_api is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from datetime import date, datetime  # noqa: E402
from types import SimpleNamespace  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from salon_api.database import Base, build_engine, get_db  # noqa: E402
from salon_api.domain.salons.service import default_schedules  # noqa: E402
from salon_api.main import app  # noqa: E402
from salon_api.models import Client, Salon, Service, Staff  # noqa: E402

# A Monday; the default salon week is open 09:00-12:00 and 14:00-18:00
MONDAY = date(2030, 6, 3)
SUNDAY = date(2030, 6, 2)
SATURDAY = date(2030, 6, 8)
# Fixed "now" for services, the Saturday before
NOW = datetime(2030, 6, 1, 8, 0)


@pytest.fixture
def engine(tmp_path):
    """A fresh file-backed SQLite database per test"""
    engine = build_engine(f"sqlite:///{tmp_path / 'salon.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def seeded(session_factory):
    """One salon on the default week, two staff members, two services and a client"""
    with session_factory() as session:
        salon = Salon(name="Studio Lumière", slug="studio-lumiere", schedules=default_schedules())
        alice = Staff(salon=salon, first_name="Alice", last_name="Martin")
        bruno = Staff(salon=salon, first_name="Bruno", last_name="Petit")
        haircut = Service(salon=salon, name="Haircut", duration=30, price=35.0)
        coloring = Service(salon=salon, name="Coloring", duration=60, price=80.0)
        client = Client(first_name="Chloé", last_name="Durand", email="chloe@example.com")
        other_client = Client(first_name="Hugo", last_name="Leroy", email="hugo@example.com")
        session.add_all([salon, alice, bruno, haircut, coloring, client, other_client])
        session.commit()

        return SimpleNamespace(
            salon_id=salon.id,
            staff_id=alice.id,
            other_staff_id=bruno.id,
            haircut_id=haircut.id,
            coloring_id=coloring.id,
            client_id=client.id,
            other_client_id=other_client.id,
        )


@pytest.fixture
def now():
    return lambda: NOW


@pytest.fixture
def client(session_factory):
    """FastAPI test client bound to the per-test database"""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
