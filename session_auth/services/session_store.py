"""Session record storage.

Both stores treat a record as absent once `now >= expires_at`, so an expired
session can never be resolved, refreshed or logged out even if the row has
not been purged yet.
"""
import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from session_auth.models.session import TokenModel
from session_auth.schemas.session import SessionRecord
from session_auth.utils.errors import SessionNotFoundError, StoreUnavailableError
from session_auth.utils.helpers import Clock, utcnow

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    def get_by_id(self, session_id: str) -> Optional[SessionRecord]:
        ...

    def save(self, record: SessionRecord) -> None:
        ...

    def update(self, record: SessionRecord) -> None:
        ...

    def delete(self, session_id: str) -> bool:
        ...

    def purge_expired(self) -> int:
        ...


class SqlSessionStore:
    """Session records in the `sys_token` table, one DB session per request."""

    def __init__(self, db: Session, clock: Clock = utcnow):
        self.db = db
        self.clock = clock

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Session store failed to %s", action, exc_info=exc)
            raise StoreUnavailableError(f"Session store failed to {action}") from exc

    def get_by_id(self, session_id: str) -> Optional[SessionRecord]:
        with self._guard("load session"):
            row = (
                self.db.query(TokenModel)
                .filter(
                    TokenModel.id == session_id,
                    TokenModel.expires_at > self.clock(),
                )
                .first()
            )
        return SessionRecord.model_validate(row) if row else None

    def save(self, record: SessionRecord) -> None:
        with self._guard("save session"):
            self.db.add(TokenModel(**record.model_dump()))
            self.db.commit()

    def update(self, record: SessionRecord) -> None:
        with self._guard("update session"):
            row = self.db.get(TokenModel, record.id)
            if row is None:
                raise SessionNotFoundError(record.id)
            row.updated_at = record.updated_at
            row.expires_at = record.expires_at
            row.val = record.val
            self.db.commit()

    def delete(self, session_id: str) -> bool:
        """True when this call removed the row."""
        with self._guard("delete session"):
            removed = self.db.query(TokenModel).filter(TokenModel.id == session_id).delete()
            self.db.commit()
        return removed == 1

    def purge_expired(self) -> int:
        with self._guard("purge sessions"):
            removed = (
                self.db.query(TokenModel)
                .filter(TokenModel.expires_at <= self.clock())
                .delete()
            )
            self.db.commit()
        return removed


class InMemorySessionStore:
    """Process-local store for tests and single-process development."""

    def __init__(self, clock: Clock = utcnow):
        self.clock = clock
        self._lock = threading.Lock()
        self._records: Dict[str, SessionRecord] = {}

    def get_by_id(self, session_id: str) -> Optional[SessionRecord]:
        with self._lock:
            record = self._records.get(session_id)
            if record is None or record.is_expired(self.clock()):
                return None
            return record.model_copy()

    def save(self, record: SessionRecord) -> None:
        with self._lock:
            self._records[record.id] = record.model_copy()

    def update(self, record: SessionRecord) -> None:
        with self._lock:
            if record.id not in self._records:
                raise SessionNotFoundError(record.id)
            self._records[record.id] = record.model_copy()

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._records.pop(session_id, None) is not None

    def purge_expired(self) -> int:
        now = self.clock()
        with self._lock:
            expired = [sid for sid, record in self._records.items() if record.is_expired(now)]
            for sid in expired:
                del self._records[sid]
        return len(expired)
