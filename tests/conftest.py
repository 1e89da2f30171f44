"""Pytest fixtures — SQLite database for fast, isolated tests."""
import os
import uuid
from datetime import datetime, timezone, timedelta

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("CLEANUP_ENABLED", "false")
os.environ.setdefault("ADMIN_EMAIL", "")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from community_events.database import Base, get_db
from community_events.dependencies import get_notifier
from community_events.main import app
from community_events.models.event import Event
from community_events.models.user import User, UserRole
from community_events.services.notification_service import Message, Notifier

SQLITE_URL = "sqlite:///./test.db"


class RecordingNotifier(Notifier):
    """Keeps rendered messages instead of sending them."""

    def __init__(self):
        super().__init__(app_name="Test Events")
        self.sent: list[Message] = []

    def deliver(self, message: Message) -> None:
        self.sent.append(message)


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Yield a database session, closed after the test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def notifier():
    return RecordingNotifier()


@pytest.fixture(scope="function")
def client(session_factory, notifier):
    """FastAPI TestClient with the database and notifier dependencies overridden."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def admin(session_factory):
    """An ADMIN user inserted directly (admins cannot self-register)."""
    session = session_factory()
    try:
        user = User(email="admin@example.com", name="Admin", role=UserRole.admin, enabled=True)
        session.add(user)
        session.commit()
        return {"user_id": user.user_id, "email": user.email, "role": "ADMIN"}
    finally:
        session.close()


# ---------------------------------------------------------------------------
# API helpers
# ---------------------------------------------------------------------------
def create_test_user(client: TestClient, name: str = "Test User", role: str = "PARTICIPANT") -> dict:
    """Helper — POST /api/users and return response JSON."""
    resp = client.post("/api/users/", json={
        "email": f"{name.lower().replace(' ', '.')}.{uuid.uuid4().hex[:8]}@example.com",
        "name": name,
        "role": role,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_event(client: TestClient, organizer_id: str, title: str = "Test Event",
                      start_offset_hours: int = 24, duration_hours: int = 2, **overrides) -> dict:
    """Helper — POST /api/events as ``organizer_id`` and return response JSON."""
    start = datetime.now(timezone.utc) + timedelta(hours=start_offset_hours)
    payload = {
        "title": title,
        "description": "A community gathering",
        "category": "MEETUP",
        "location": "Community Hall",
        "start_time_utc": start.isoformat(),
        "end_time_utc": (start + timedelta(hours=duration_hours)).isoformat(),
    }
    payload.update(overrides)
    resp = client.post(f"/api/events/?actor_user_id={organizer_id}", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


# ---------------------------------------------------------------------------
# Service-level helpers
# ---------------------------------------------------------------------------
def make_user(db, name: str = "User", role: UserRole = UserRole.participant) -> User:
    user = User(email=f"{name.lower()}.{uuid.uuid4().hex[:8]}@example.com", name=name, role=role)
    db.add(user)
    db.commit()
    return user


def make_event(db, organizer: User, title: str = "Event", start_offset_hours: int = 24,
               duration_hours=2, **overrides) -> Event:
    start = datetime.now(timezone.utc) + timedelta(hours=start_offset_hours)
    values = {
        "title": title,
        "location": "Community Hall",
        "start_time_utc": start,
        "end_time_utc": start + timedelta(hours=duration_hours) if duration_hours is not None else None,
        "organizer_id": organizer.user_id,
    }
    values.update(overrides)
    event = Event(**values)
    db.add(event)
    db.commit()
    return event
