"""Models package placeholder."""

__all__ = [
    "base",
    "user",
    "personal_access_token",
]
