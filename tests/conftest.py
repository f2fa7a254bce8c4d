"""Shared fixtures: a file-backed SQLite database per test and an API client."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlmodel import Session

from app.db.db import build_engine, get_session, init_db
from app.main import app
from app.models.office import Office
from app.models.status import Role
from app.models.user import User
from app.services import lifecycle
from app.utils.admin_gate import Actor, AdminGate
from app.utils.auth_helper import get_admin_gate

JWT_SECRET = "test-jwt-secret"
ADMIN_SECRET = "test-admin-secret"
NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'lostfound.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def admin_actor() -> Actor:
    return Actor(user_id="admin-1", role=Role.admin, admin_authorized=True)


@pytest.fixture
def plain_actor() -> Actor:
    return Actor(user_id="staff-1", role=Role.staff, office_id="OFF-LIB")


def make_report(session, name="Blue Backpack", reporter="student-1", days_ago=0):
    return lifecycle.create_lost_report(
        session,
        reporter_id=reporter,
        item_name=name,
        item_type="Bag",
        item_color="Blue",
        description="Blue backpack with a laptop sleeve",
        last_seen_date=NOW - timedelta(days=days_ago + 1),
        last_seen_location="Library, 2nd floor",
        now=NOW - timedelta(days=days_ago),
    )


def make_found(session, name="Blue Backpack", office="OFF-LIB"):
    return lifecycle.log_found_item(
        session,
        logged_by="staff-1",
        custodian_office_id=office,
        item_name=name,
        item_color="Blue",
        description="Blue backpack left near the study carrels",
        found_date=NOW,
        found_location="Library front desk",
        now=NOW,
    )


# API fixtures


def token_for(public_id: str) -> dict:
    token = jwt.encode({"sub": public_id}, JWT_SECRET, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def directory(session):
    session.add(Office(office_id="OFF-LIB", name="Library"))
    session.add(Office(office_id="OFF-SPORT", name="Sports Centre"))
    session.commit()

    session.add_all([
        User(public_id="student-1", name="Ada Student", email="ada@example.edu", role=Role.student),
        User(public_id="student-2", name="Ben Student", email="ben@example.edu", role=Role.student),
        User(public_id="staff-1", name="Sam Staff", email="sam@example.edu", role=Role.staff, office_id="OFF-LIB"),
        User(public_id="admin-1", name="Alex Admin", email="alex@example.edu", role=Role.admin),
    ])
    session.commit()


@pytest.fixture
def client(engine, directory, monkeypatch):
    monkeypatch.setenv("JWT_SECRET", JWT_SECRET)

    def override_session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_admin_gate] = lambda: AdminGate(ADMIN_SECRET)

    yield TestClient(app)

    app.dependency_overrides.clear()
