from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
from session_auth.core.database import get_db
from session_auth.dependencies.auth import get_token_service
from session_auth.schemas.auth import LoginRequest, LogoutResponse, Token
from session_auth.services.audit_service import LOGIN
from session_auth.services.token_service import TokenService
from session_auth.services.user_directory import UserDirectory
from session_auth.utils.helpers import get_request_token
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/login", response_model=Token, status_code=200)
async def login(
    request: LoginRequest,
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
):
    """
    Username/password login
    - Verify credentials and account status
    - Create a session and return its token
    """
    directory = UserDirectory(db)
    try:
        login_user = directory.authenticate(request.username, request.password)
    except HTTPException as e:
        user = directory.lookup(request.username)
        token_service.record_event(user.id if user else None, LOGIN, False, str(e.detail))
        logger.info("Login rejected for %s: %s", request.username, e.detail)
        raise

    return token_service.save_token(login_user)


@router.post("/logout", response_model=LogoutResponse, status_code=200)
async def logout(
    http_request: Request,
    token_service: TokenService = Depends(get_token_service),
):
    """Logout (delete the session the token points to)"""
    success = token_service.delete_token(get_request_token(http_request))
    return {"success": success}
