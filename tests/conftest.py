import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_JSON", "false")

from datetime import timedelta
from uuid import uuid4

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from vantake.db import Base, get_db
from vantake.deps import get_polymarket_client
from vantake.main import app
from vantake.models import NotificationSettings, Profile, UserAuth, UserSession, utcnow
from vantake.polymarket.client import PolymarketClient


@pytest.fixture()
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def client(db_session):
    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def upstream(client):
    """Route Polymarket calls to a handler; returns the list of seen requests."""
    seen: list[httpx.Request] = []
    handlers = {}

    def _install(handler):
        def _record(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        handlers["current"] = _record
        app.dependency_overrides[get_polymarket_client] = lambda: PolymarketClient(
            transport=httpx.MockTransport(handlers["current"])
        )
        return seen

    return _install


@pytest.fixture()
def make_user(db_session):
    """Create a profile with an active session token."""

    def _make(*, email="test@example.com", wallet=None, expires_in=timedelta(days=1)):
        profile = Profile(id=uuid4(), display_name="Test User", email=email, polymarket_wallet=wallet)
        auth = UserAuth(user_id=profile.id, email=email, password_hash="hash")
        prefs = NotificationSettings(user_id=profile.id)
        now = utcnow()
        session = UserSession(
            token=uuid4().hex,
            user_id=profile.id,
            created_at=now - timedelta(days=30),
            expires_at=now + expires_in,
        )
        db_session.add_all([profile, auth, prefs])
        db_session.flush()
        db_session.add(session)
        db_session.commit()
        return profile, session.token

    return _make
