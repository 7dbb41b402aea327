"""Shared test fixtures and configuration.

Sets test environment variables before any application import, and provides
an in-memory database, a TestClient bound to it and admin credentials.
"""

import os

# Patch env vars BEFORE any application imports
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DEFAULT_TENANT_POLICY", "oldest_active")
os.environ.setdefault("CORS_ALLOWED_ORIGINS", "*")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import app
from api.routes.auth import create_access_token
from core.database import get_db, init_db
from utils import admin_manager
from utils.access_key_manager import AccessKeyManager
from utils.channel_manager import ChannelManager
from utils.group_manager import GroupManager


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Use the cheapest bcrypt cost so admin fixtures stay fast."""
    monkeypatch.setattr(admin_manager, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin(db):
    return admin_manager.AdminManager(db).create_admin("root", "correct-horse", email="root@example.com")


@pytest.fixture
def auth_headers(admin):
    return {"Authorization": f"Bearer {create_access_token(admin)}"}


@pytest.fixture
def access_key(db, admin):
    return AccessKeyManager(db).issue_access_key(admin.id)


def register_channel(db, admin, name="Family", line_channel_id="1650000000"):
    """Issue a fresh key and redeem it for a new channel."""
    key = AccessKeyManager(db).issue_access_key(admin.id)
    return ChannelManager(db).register_channel(
        access_key=key.key,
        name=name,
        line_channel_id=line_channel_id,
        line_channel_access_token=f"token-{line_channel_id}",
        line_channel_secret=f"secret-{line_channel_id}",
        liff_id=f"liff-{line_channel_id}",
    )


@pytest.fixture
def channel(db, admin):
    return register_channel(db, admin)


@pytest.fixture
def group(db, channel):
    return GroupManager(db).ensure_group(channel.id, "C-line-group-1", "Home")
