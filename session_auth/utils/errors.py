"""Error definitions for the token service and the API layer."""
from fastapi import HTTPException
from starlette import status


class TokenServiceError(Exception):
    """Base class for errors raised by the token/session core."""


class ConfigurationError(TokenServiceError):
    """Token settings are missing or unusable (bad secret, bad TTL)."""


class InvalidTokenError(TokenServiceError):
    """Token signature or structure could not be verified."""


class ExpiredTokenError(InvalidTokenError):
    """Token carries an `exp` claim that has passed."""


class SessionNotFoundError(TokenServiceError):
    def __init__(self, session_id: str | None = None):
        self.session_id = session_id
        super().__init__("Session not found or expired, please log in again")


class StoreUnavailableError(TokenServiceError):
    """The session store could not complete a read or write."""


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class InvalidCredentialsError(HTTPException):
    def __init__(self, detail: str = "Invalid username or password"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class UserNotFoundError(HTTPException):
    def __init__(self, detail: str = "User not found"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class AccountLockedError(HTTPException):
    def __init__(self, detail: str = "Account is locked, contact an administrator"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class AccountDisabledError(HTTPException):
    def __init__(self, detail: str = "Account is disabled"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
