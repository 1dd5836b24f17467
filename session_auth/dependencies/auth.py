from fastapi import Depends, Request
from sqlalchemy.orm import Session
from session_auth.core.config import settings
from session_auth.core.database import get_db
from session_auth.core.security import TokenCodec
from session_auth.schemas.auth import LoginUser
from session_auth.services.audit_service import AuditService
from session_auth.services.session_store import SqlSessionStore
from session_auth.services.token_service import TokenService
from session_auth.utils.errors import Unauthorized
from session_auth.utils.helpers import get_request_token


def get_token_codec(request: Request) -> TokenCodec:
    """Codec built once by the app factory around the warmed signing key."""
    return request.app.state.token_codec


def get_token_service(
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
) -> TokenService:
    return TokenService(
        store=SqlSessionStore(db),
        codec=codec,
        audit=AuditService(db),
        expire_seconds=settings.TOKEN_EXPIRE_SECONDS,
    )


async def get_current_user(
    request: Request,
    token_service: TokenService = Depends(get_token_service),
) -> LoginUser:
    """
    Resolve the logged-in user from the request token.
    Sessions close to expiry are refreshed so active users stay logged in.
    """
    login_user = token_service.get_login_user(get_request_token(request))
    if login_user is None:
        raise Unauthorized("Not logged in or session expired")

    if token_service.needs_refresh(login_user, settings.TOKEN_REFRESH_WINDOW_SECONDS):
        token_service.refresh(login_user)

    return login_user
