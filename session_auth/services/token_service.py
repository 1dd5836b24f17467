from datetime import datetime, timedelta
from typing import Optional
import logging
import secrets

from session_auth.core.security import TokenCodec
from session_auth.schemas.auth import LoginUser, Token
from session_auth.schemas.session import SessionRecord
from session_auth.services.audit_service import LOGIN, LOGOUT, AuditSink
from session_auth.services.session_store import SessionStore
from session_auth.utils.errors import ConfigurationError, SessionNotFoundError
from session_auth.utils.helpers import Clock, to_millis, utcnow

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    """256 random bits, URL-safe; never reused."""
    return secrets.token_urlsafe(32)


class TokenService:
    """
    Session lifecycle: login, refresh, lookup and logout.

    The JWT handed to clients only references a session record, so
    revocation is a delete in the store. Concurrent refreshes of one session
    are last-write-wins on the payload and expiry.
    """

    def __init__(
        self,
        store: SessionStore,
        codec: TokenCodec,
        audit: AuditSink,
        expire_seconds: int,
        clock: Clock = utcnow,
    ):
        if expire_seconds <= 0:
            raise ConfigurationError("Token expiry must be a positive number of seconds")
        self.store = store
        self.codec = codec
        self.audit = audit
        self.expire_seconds = expire_seconds
        self.clock = clock

    def save_token(self, login_user: LoginUser) -> Token:
        """
        Log in `login_user`
        - Assign a new session id plus login/expire times (mutates login_user)
        - Persist the session record
        - Record a login audit event
        - Return a signed token referencing the session
        """
        now = self.clock()
        login_user.token = new_session_id()
        expires_at = self._stamp(login_user, now)

        record = SessionRecord(
            id=login_user.token,
            created_at=now,
            updated_at=now,
            expires_at=expires_at,
            val=login_user.model_dump_json(),
        )
        self.store.save(record)
        self.record_event(login_user.id, LOGIN, True)

        jwt_token = self.codec.encode(login_user.token)
        return Token(token=jwt_token, login_time=login_user.login_time)

    def refresh(self, login_user: LoginUser) -> None:
        """Push the session expiry to now + ttl and rewrite its payload.

        Raises SessionNotFoundError when the session was deleted or has
        already expired; no new session is created in that case.
        """
        session_id = login_user.token
        record = self.store.get_by_id(session_id) if session_id else None
        if record is None:
            raise SessionNotFoundError(session_id)

        now = self.clock()
        record.updated_at = now
        record.expires_at = self._stamp(login_user, now)
        record.val = login_user.model_dump_json()
        self.store.update(record)
        logger.debug("Refreshed session for user_id=%s", login_user.id)

    def get_login_user(self, jwt_token: Optional[str]) -> Optional[LoginUser]:
        session_id = self.codec.decode(jwt_token)
        if session_id is None:
            return None
        return self._to_login_user(self.store.get_by_id(session_id))

    def delete_token(self, jwt_token: Optional[str]) -> bool:
        """Log out; True only when a live session was removed."""
        session_id = self.codec.decode(jwt_token)
        if session_id is None:
            return False

        login_user = self._to_login_user(self.store.get_by_id(session_id))
        if login_user is None:
            return False

        # A concurrent logout may have removed the record since the lookup
        if not self.store.delete(session_id):
            return False
        self.record_event(login_user.id, LOGOUT, True)
        return True

    def needs_refresh(self, login_user: LoginUser, window_seconds: int) -> bool:
        """True when fewer than `window_seconds` remain on the session."""
        if login_user.expire_time is None:
            return True
        remaining = login_user.expire_time - to_millis(self.clock())
        return remaining <= window_seconds * 1000

    def _stamp(self, login_user: LoginUser, now: datetime) -> datetime:
        expires_at = now + timedelta(seconds=self.expire_seconds)
        login_user.login_time = to_millis(now)
        login_user.expire_time = to_millis(expires_at)
        return expires_at

    def record_event(self, user_id: Optional[int], action: str, success: bool, detail: Optional[str] = None) -> None:
        # Audit is best effort; the login/logout has already taken effect
        try:
            self.audit.record(user_id, action, success, detail)
        except Exception:
            logger.error("Failed to record %s audit event for user_id=%s", action, user_id, exc_info=True)

    @staticmethod
    def _to_login_user(record: Optional[SessionRecord]) -> Optional[LoginUser]:
        if record is None:
            return None
        return LoginUser.model_validate_json(record.val)
