"""
Shared pytest fixtures.

Every test runs against a fresh in-memory SQLite database; the FastAPI app's
``get_db`` dependency is overridden to hand out sessions bound to it.
"""
import os

os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("LOG_FORMAT", "plain")
os.environ.setdefault("ENABLE_REQUEST_LOGGING", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import smarthourly.models  # noqa: F401
from smarthourly.database import Base, get_db
from smarthourly.main import app
from smarthourly.models.user import Profile, User, UserRole
from smarthourly.utils.events import configure_event_bus
from smarthourly.utils.security import create_access_token, get_password_hash


TEST_PASSWORD = "Password123!"


@pytest.fixture()
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


@pytest.fixture()
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def event_bus():
    bus = configure_event_bus()
    yield bus
    bus.clear()


@pytest.fixture()
def client(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db, email: str, name: str, role: str) -> User:
    user = User(email=email, hashed_password=get_password_hash(TEST_PASSWORD))
    user.role_entry = UserRole(role=role)
    user.profile = Profile(name=name, department="Production", phone="9000000000")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture()
def operator_user(db):
    return make_user(db, "operator@plant.test", "Olivia Operator", "operator")


@pytest.fixture()
def supervisor_user(db):
    return make_user(db, "supervisor@plant.test", "Sam Supervisor", "supervisor")


@pytest.fixture()
def admin_user(db):
    return make_user(db, "admin@plant.test", "Ada Admin", "admin")


@pytest.fixture()
def operator_headers(operator_user):
    return auth_headers(operator_user)


@pytest.fixture()
def supervisor_headers(supervisor_user):
    return auth_headers(supervisor_user)


@pytest.fixture()
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture()
def draft():
    return {
        "entry_date": "2026-03-02",
        "shift": "A",
        "line": "Line-01",
        "time_slot": "07:00-08:00",
        "customer_name": "Acme Meters",
        "mo_type": "Fresh",
        "mo_number": "MO-1001",
        "meter_from": "M0001",
        "meter_to": "M0100",
        "ok_qty": 95,
        "nok_qty": 5,
        "downtime": 0,
    }
