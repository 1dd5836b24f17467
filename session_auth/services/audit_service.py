from typing import Optional, Protocol
import logging

from sqlalchemy.orm import Session

from session_auth.models.audit import SysLog

logger = logging.getLogger(__name__)

LOGIN = "login"
LOGOUT = "logout"


class AuditSink(Protocol):
    def record(self, user_id: Optional[int], action: str, success: bool, detail: Optional[str] = None) -> None:
        ...


class AuditService:
    """Writes login/logout events to the `sys_logs` table."""

    def __init__(self, db: Session):
        self.db = db

    def record(self, user_id: Optional[int], action: str, success: bool, detail: Optional[str] = None) -> None:
        entry = SysLog(user_id=user_id, action=action, success=success, remark=detail)
        try:
            self.db.add(entry)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info("audit user_id=%s action=%s success=%s", user_id, action, success)
