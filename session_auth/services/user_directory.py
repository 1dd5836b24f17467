from sqlalchemy.orm import Session
from functools import lru_cache
from typing import List, Optional
import logging

from session_auth.core.security import hash_password, verify_password
from session_auth.models.user import Permission, SysRole, SysUser, UserStatusEnum
from session_auth.schemas.auth import LoginUser, PermissionView
from session_auth.utils.errors import (
    AccountDisabledError, AccountLockedError, InvalidCredentialsError, UserNotFoundError
)

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("dummy-password-for-unknown-users")


class UserDirectory:
    """Resolves usernames to accounts and their granted permissions."""

    def __init__(self, db: Session):
        self.db = db

    def lookup(self, username: str) -> Optional[SysUser]:
        return self.db.query(SysUser).filter(SysUser.username == username).first()

    def list_permissions(self, user_id: int) -> List[Permission]:
        return (
            self.db.query(Permission)
            .join(Permission.roles)
            .join(SysRole.users)
            .filter(SysUser.id == user_id)
            .distinct()
            .order_by(Permission.sort, Permission.id)
            .all()
        )

    def load_login_user(self, username: str) -> LoginUser:
        """
        Build the session identity for `username`
        - Unknown users, LOCKED and DISABLED accounts are rejected
        - Permissions are collected through the user's roles
        """
        user = self.lookup(username)
        if user is None:
            raise UserNotFoundError("Username does not exist")
        return self._to_login_user(user)

    def authenticate(self, username: str, password: str) -> LoginUser:
        """Verify credentials and return the identity to log in."""
        user = self.lookup(username)
        if user is None:
            # Same argon2 cost as a real check, so unknown usernames are not faster
            verify_password(password, _dummy_hash())
            raise InvalidCredentialsError()
        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()
        return self.load_login_user(username)

    def create_user(
        self,
        username: str,
        password: str,
        nickname: Optional[str] = None,
        email: Optional[str] = None,
        status: UserStatusEnum = UserStatusEnum.ACTIVE,
        roles: Optional[List[SysRole]] = None,
    ) -> SysUser:
        user = SysUser(
            username=username,
            password_hash=hash_password(password),
            nickname=nickname or username,
            email=email,
            status=status.value,
            roles=roles or [],
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info("Created user %s (status=%s)", username, user.status)
        return user

    def _to_login_user(self, user: SysUser) -> LoginUser:
        if user.status == UserStatusEnum.LOCKED.value:
            raise AccountLockedError()
        if user.status == UserStatusEnum.DISABLED.value:
            raise AccountDisabledError()

        login_user = LoginUser.model_validate(user)
        login_user.permissions = [
            PermissionView.model_validate(p) for p in self.list_permissions(user.id)
        ]
        return login_user
