"""Domain errors for eventboard.

Repositories and auth components raise these; the API layer maps each one to
its ``status_code`` and a ``{"success": false, "error": ...}`` body.
"""

from typing import Optional


class EventBoardError(Exception):
    """Base class for errors reported to API callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(EventBoardError):
    """Missing or malformed input."""

    status_code = 400


class ConflictError(EventBoardError):
    """A unique key (normalized email) is already taken."""

    status_code = 400


class AuthError(EventBoardError):
    """Missing, invalid or expired token, or bad credentials.

    ``reason`` is one of ``missing``, ``invalid``, ``expired``,
    ``unknown_identity`` or ``bad_secret``. It is kept for logging and tests;
    callers only see ``message``.
    """

    status_code = 401

    def __init__(self, reason: str, message: Optional[str] = None):
        super().__init__(message or _AUTH_MESSAGES.get(reason, "Not authenticated"))
        self.reason = reason


class ForbiddenError(EventBoardError):
    """Authenticated, but not the owner of the entity."""

    status_code = 403


class NotFoundError(EventBoardError):
    """Referenced entity does not exist."""

    status_code = 404


_AUTH_MESSAGES = {
    "missing": "Not authenticated",
    "invalid": "Invalid token",
    "expired": "Token has expired",
    "unknown_identity": "Invalid email or password",
    "bad_secret": "Invalid email or password",
}
