"""Domain error taxonomy shared by services and the HTTP layer.

Services raise these exceptions; the handlers registered in
:mod:`heartline.main` render them as ``{"detail": ..., "code": ...}``.
"""

from __future__ import annotations

from fastapi import status


class AppError(Exception):
    """Base class for failures reported to clients with a stable code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "SERVER_ERROR"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_payload(self) -> dict[str, str]:
        """Return the client-facing error body."""
        return {"detail": self.message, "code": self.code}


class ValidationFailedError(AppError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"


class AuthenticationError(AppError):
    """Missing, invalid or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AUTHENTICATION_FAILED"


class ForbiddenError(AppError):
    """Caller is authenticated but not allowed to perform the action."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"


class NotFoundError(AppError):
    """Unknown account or resource."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class ConflictError(AppError):
    """Unique identity already taken."""

    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


__all__ = [
    "AppError",
    "AuthenticationError",
    "ConflictError",
    "ForbiddenError",
    "NotFoundError",
    "ValidationFailedError",
]
