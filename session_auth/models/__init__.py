"""Models package placeholder."""

__all__ = [
    "user",
    "session",
    "audit",
]
