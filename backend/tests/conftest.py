"""Pytest fixtures — fresh SQLite database per test, helpers for auth flows."""
import os
import tempfile

# Settings are read at import time, so configure them before importing the app.
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("ADMIN_REGISTRATION_TOKEN", "test-admin-token")
os.environ.setdefault("UPLOAD_DIR", os.path.join(tempfile.gettempdir(), "eventdesk-test-uploads"))

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from eventdesk.database import Base, get_db
from eventdesk.errors import UploadError
from eventdesk.main import app
from eventdesk.services.image_storage import get_image_storage

# Import all models so they register with Base.metadata
from eventdesk.models.user import User                  # noqa: F401
from eventdesk.models.event import Event                # noqa: F401
from eventdesk.models.invitation import Invitation      # noqa: F401
from eventdesk.models.comment import Comment            # noqa: F401
from eventdesk.models.notification import Notification  # noqa: F401

SQLITE_URL = "sqlite:///./test.db"
ADMIN_TOKEN = "test-admin-token"


class FakeImageStorage:
    """In-memory image storage; set ``fail`` to simulate an unreachable host."""

    def __init__(self):
        self.saved: list[tuple[str, str, bytes]] = []
        self.deleted: list[str] = []
        self.fail = False

    def save(self, filename: str, content_type: str, data: bytes) -> str:
        if self.fail:
            raise UploadError("Image host unreachable")
        self.saved.append((filename, content_type, data))
        return f"https://images.example.test/{len(self.saved)}/{filename}"

    def delete(self, url: str) -> None:
        self.deleted.append(url)


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session for direct store assertions."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def image_storage():
    return FakeImageStorage()


@pytest.fixture(scope="function")
def client(db_engine, image_storage):
    """FastAPI TestClient with the database and image storage overridden."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_image_storage] = lambda: image_storage
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: register / login / create via the API, return response JSON
# ---------------------------------------------------------------------------
def register_user(client: TestClient, username: str, role: str = None,
                  password: str = "secret", email: str = None) -> dict:
    """Helper — POST /api/auth/register and return response JSON."""
    payload = {
        "username": username,
        "email": email or f"{username}@example.com",
        "password": password,
    }
    if role:
        payload["role"] = role
    if role == "admin":
        payload["admin_token"] = ADMIN_TOKEN
    resp = client.post("/api/auth/register", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def login(client: TestClient, username: str, password: str = "secret") -> dict:
    """Helper — POST /api/auth/login and return response JSON."""
    resp = client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def make_user(client: TestClient, username: str, role: str = None) -> tuple[dict, dict]:
    """Helper — register and log in; returns (user JSON, auth headers)."""
    user = register_user(client, username, role=role)
    token = login(client, username)["token"]
    return user, auth_headers(token)


def create_event(client: TestClient, headers: dict, name: str = "Demo", date: str = "2099-01-01",
                 time: str = "10:00", location: str = "HQ", **extra) -> dict:
    """Helper — POST /api/events (JSON) and return response JSON."""
    payload = {"name": name, "date": date, "time": time, "location": location, **extra}
    resp = client.post("/api/events", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def invite(client: TestClient, headers: dict, event_id: str, user_id: str) -> dict:
    """Helper — POST /api/events/{id}/invitations and return response JSON."""
    resp = client.post(f"/api/events/{event_id}/invitations", json={"user_id": user_id}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()
