# File: tests/conftest.py

"""
Shared fixtures.

The environment is set before the app is imported so the engine binds to a
private in-memory SQLite database and no demo data is seeded.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DEMO_DATA"] = "false"

import pytest
from fastapi.testclient import TestClient

from community_action.db.init_db import DEMO_PROJECTS
from community_action.db.session import SessionLocal, engine
from community_action.main import app
from community_action.models.base import Base
from community_action.schemas.user import SessionUser
from community_action.services.gateway import DataGateway


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def gateway(db):
    return DataGateway(db)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def sample_projects(gateway):
    """The six demo projects, inserted in order (ids 1..6)."""
    return [gateway.insert("projects", dict(record)) for record in DEMO_PROJECTS]


def make_user(gateway: DataGateway, email: str, full_name: str = None) -> SessionUser:
    row = gateway.insert("users", {"email": email, "full_name": full_name})
    return SessionUser(id=row["id"], email=row["email"], metadata={"full_name": full_name})


def sign_in(client: TestClient, email: str, full_name: str = None) -> dict:
    resp = client.post(
        "/api/v1/auth/login",
        json={"provider": "email", "email": email, "full_name": full_name},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["user"]


def fetch(table: str, id):
    """Read a row through a fresh session so nothing is served from a stale identity map."""
    session = SessionLocal()
    try:
        return DataGateway(session).select_one(table, id)
    finally:
        session.close()
