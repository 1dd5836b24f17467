"""Service layer package."""

__all__ = [
    "token_service",
    "session_store",
    "audit_service",
    "user_directory",
]
