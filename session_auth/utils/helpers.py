"""Helper utilities (clock, epoch conversions, request helpers)."""
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import Request

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Naive UTC now, matching how timestamps are stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_millis(value: datetime) -> int:
    """Epoch milliseconds for a naive UTC datetime."""
    return int(value.replace(tzinfo=timezone.utc).timestamp() * 1000)


def get_request_token(request: Request) -> Optional[str]:
    """Return the session token sent with a request.

    Checks the `token` header first, then the `token` query parameter,
    then an `Authorization: Bearer` header.
    """
    token = request.headers.get("token")
    if token:
        return token

    token = request.query_params.get("token")
    if token:
        return token

    scheme, _, credentials = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials

    return None
