"""
Domain errors raised by the service layer.

Each error is an HTTPException so routes can let it propagate unchanged;
the status code carries the error category.
"""
from fastapi import HTTPException, status


class ChatException(HTTPException):
    """Base class for all domain errors."""

    status_code_default: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str, headers: dict | None = None):
        super().__init__(
            status_code=self.status_code_default,
            detail=detail,
            headers=headers,
        )


class UnauthenticatedError(ChatException):
    """No acting identity could be established for the request."""

    status_code_default = status.HTTP_401_UNAUTHORIZED

    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(ChatException):
    """Identity present but not allowed: not admin, not member, not author, blocked."""

    status_code_default = status.HTTP_403_FORBIDDEN


class NotFoundError(ChatException):
    """Referenced entity is absent or does not match the caller."""

    status_code_default = status.HTTP_404_NOT_FOUND


class InvalidArgumentError(ChatException):
    """Malformed input."""

    status_code_default = status.HTTP_400_BAD_REQUEST


class ConflictError(ChatException):
    """Duplicate membership or relationship."""

    status_code_default = status.HTTP_409_CONFLICT
