"""Session store tests against SQLite and the in-memory store."""
from datetime import timedelta

import pytest

from session_auth.core.database import Base
from session_auth.models.session import TokenModel
from session_auth.schemas.session import SessionRecord
from session_auth.services.session_store import InMemorySessionStore, SqlSessionStore
from session_auth.services.token_service import TokenService
from session_auth.utils.errors import SessionNotFoundError, StoreUnavailableError


def make_record(clock, session_id="session-1", ttl=3600, val='{"id": 1}'):
    now = clock()
    return SessionRecord(
        id=session_id,
        created_at=now,
        updated_at=now,
        expires_at=now + timedelta(seconds=ttl),
        val=val,
    )


@pytest.fixture(params=["sql", "memory"])
def store(request, db_session, clock):
    if request.param == "sql":
        return SqlSessionStore(db_session, clock=clock)
    return InMemorySessionStore(clock=clock)


def test_save_and_get(store, clock):
    record = make_record(clock)
    store.save(record)
    assert store.get_by_id("session-1") == record


def test_get_missing_returns_none(store):
    assert store.get_by_id("missing") is None


def test_expired_record_is_absent(store, clock):
    store.save(make_record(clock, ttl=60))
    clock.advance(59)
    assert store.get_by_id("session-1") is not None
    clock.advance(1)
    assert store.get_by_id("session-1") is None


def test_update_replaces_fields(store, clock):
    store.save(make_record(clock))
    clock.advance(100)

    updated = make_record(clock, val='{"id": 1, "nickname": "new"}')
    store.update(updated)

    found = store.get_by_id("session-1")
    assert found.val == '{"id": 1, "nickname": "new"}'
    assert found.updated_at == clock()
    assert found.expires_at == clock() + timedelta(seconds=3600)


def test_update_missing_raises(store, clock):
    with pytest.raises(SessionNotFoundError):
        store.update(make_record(clock, session_id="ghost"))


def test_delete(store, clock):
    store.save(make_record(clock))
    assert store.delete("session-1") is True
    assert store.get_by_id("session-1") is None
    # only the first delete removes anything
    assert store.delete("session-1") is False


def test_purge_expired(store, clock):
    store.save(make_record(clock, session_id="short", ttl=60))
    store.save(make_record(clock, session_id="long", ttl=7200))
    clock.advance(120)

    assert store.purge_expired() == 1
    assert store.get_by_id("long") is not None
    assert store.purge_expired() == 0


def test_sql_store_keeps_expired_rows_until_purged(db_session, clock):
    store = SqlSessionStore(db_session, clock=clock)
    store.save(make_record(clock, ttl=60))
    clock.advance(600)

    assert store.get_by_id("session-1") is None
    assert db_session.get(TokenModel, "session-1") is not None
    store.purge_expired()
    assert db_session.get(TokenModel, "session-1") is None


def test_sql_store_wraps_database_errors(db_session, engine, clock):
    store = SqlSessionStore(db_session, clock=clock)
    Base.metadata.tables["sys_token"].drop(engine)

    with pytest.raises(StoreUnavailableError):
        store.get_by_id("session-1")
    with pytest.raises(StoreUnavailableError):
        store.save(make_record(clock))


def test_token_service_over_sql_store(db_session, codec, audit, clock, login_user):
    service = TokenService(SqlSessionStore(db_session, clock=clock), codec, audit, expire_seconds=3600, clock=clock)

    token = service.save_token(login_user)
    assert service.get_login_user(token.token) == login_user

    clock.advance(1800)
    service.refresh(login_user)
    row = db_session.get(TokenModel, login_user.token)
    assert row.expires_at == clock() + timedelta(seconds=3600)

    assert service.delete_token(token.token) is True
    assert service.delete_token(token.token) is False
