"""Pytest fixtures for the token service.

Every test gets a fresh in-memory SQLite database, a codec with its own
randomly generated secret and a controllable clock, so no `.env` or running
database is needed.
"""
import base64
import os
import secrets
from datetime import datetime, timedelta

import pytest

# Must be set before session_auth.core.database builds its default engine
os.environ.setdefault("DATABASE_URL", "sqlite://")

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from session_auth.core.database import init_db  # noqa: E402
from session_auth.core.security import SigningKeyCache, TokenCodec  # noqa: E402
from session_auth.schemas.auth import LoginUser, PermissionView  # noqa: E402
from session_auth.services.session_store import InMemorySessionStore  # noqa: E402
from session_auth.services.token_service import TokenService  # noqa: E402


class FakeClock:
    """Naive-UTC clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


class RecordingAudit:
    def __init__(self):
        self.events = []

    def record(self, user_id, action, success, detail=None):
        self.events.append((user_id, action, success, detail))


def make_secret() -> str:
    return base64.b64encode(secrets.token_bytes(32)).decode("ascii")


@pytest.fixture
def secret():
    return make_secret()


@pytest.fixture
def key_cache(secret):
    return SigningKeyCache(secret)


@pytest.fixture
def codec(key_cache):
    return TokenCodec(key_cache)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 1, 0, 0, 0))


@pytest.fixture
def audit():
    return RecordingAudit()


@pytest.fixture
def memory_store(clock):
    return InMemorySessionStore(clock=clock)


@pytest.fixture
def token_service(memory_store, codec, audit, clock):
    return TokenService(memory_store, codec, audit, expire_seconds=3600, clock=clock)


@pytest.fixture
def login_user():
    return LoginUser(
        id=1,
        username="alice",
        nickname="Alice",
        email="alice@example.com",
        status="active",
        permissions=[
            PermissionView(id=1, name="Users", href="/users", type=1, permission="sys:user:query"),
            PermissionView(id=2, parent_id=1, name="Add user", type=2, permission="sys:user:add"),
        ],
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    """Yield a SQLAlchemy session for direct DB access in tests."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
