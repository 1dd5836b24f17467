from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional, Set


class PermissionView(BaseModel):
    """Permission snapshot carried inside a session"""
    id: int
    parent_id: int = 0
    name: str
    href: Optional[str] = None
    type: int = 1
    permission: Optional[str] = None
    sort: int = 0

    model_config = ConfigDict(from_attributes=True)


class LoginUser(BaseModel):
    """Authenticated identity stored in the session record.

    `token` is the session id (not the JWT); `login_time` and `expire_time`
    are epoch milliseconds set by the token service.
    """
    id: int
    username: str
    nickname: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    head_img_url: Optional[str] = None
    status: str
    permissions: List[PermissionView] = Field(default_factory=list)

    token: Optional[str] = None
    login_time: Optional[int] = None
    expire_time: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def authorities(self) -> Set[str]:
        """Permission codes granted to this user."""
        return {p.permission for p in self.permissions if p.permission}


class Token(BaseModel):
    """Token response returned on login"""
    token: str
    login_time: int


class LoginRequest(BaseModel):
    """Username/password login request"""
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)


class LogoutResponse(BaseModel):
    success: bool
