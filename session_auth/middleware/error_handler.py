"""Global error handlers for the application."""
import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette import status

from session_auth.utils.errors import SessionNotFoundError, StoreUnavailableError, TokenServiceError

logger = logging.getLogger(__name__)


async def http_exception_handler(request: Request, exc):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def token_service_exception_handler(request: Request, exc: TokenServiceError):
    if isinstance(exc, SessionNotFoundError):
        code = status.HTTP_401_UNAUTHORIZED
    elif isinstance(exc, StoreUnavailableError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
        logger.error("Unhandled token service error on %s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=code, content={"detail": str(exc)})
