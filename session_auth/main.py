from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import HTTPException as FastAPIHTTPException

from session_auth.core.config import settings
from session_auth.core.database import init_db
from session_auth.core.logger import setup_logging
from session_auth.core.security import SigningKeyCache, TokenCodec
from session_auth.middleware.logging import RequestLoggerMiddleware
from session_auth.middleware import error_handler
from session_auth.utils.errors import TokenServiceError

# Routers
from session_auth.routers import auth as auth_router
from session_auth.routers import users as users_router
from session_auth.routers import health as health_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app(key_cache: Optional[SigningKeyCache] = None) -> FastAPI:
    """Create and configure the FastAPI application instance.

    The signing key is derived here, before the first request, so a bad
    TOKEN_JWT_SECRET stops startup with a ConfigurationError.
    """
    setup_logging()
    settings.validate()

    key_cache = key_cache or SigningKeyCache(settings.TOKEN_JWT_SECRET)
    key_cache.warm()

    openapi_tags = [
        {"name": "authentication", "description": "Login and logout with session tokens."},
        {"name": "users", "description": "Identity of the logged-in user."},
        {"name": "health", "description": "Health checks and service status endpoints."},
    ]

    app = FastAPI(
        title="Session Auth API",
        version="0.1.0",
        description="Issues, validates, refreshes and revokes session tokens.",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.token_codec = TokenCodec(key_cache)

    # Middleware
    app.add_middleware(RequestLoggerMiddleware)

    # Exception handlers
    app.add_exception_handler(FastAPIHTTPException, error_handler.http_exception_handler)
    app.add_exception_handler(TokenServiceError, error_handler.token_service_exception_handler)

    # Include routers
    app.include_router(health_router.router)
    app.include_router(auth_router.router)
    app.include_router(users_router.router)

    return app
