"""
Domain error taxonomy.

Services raise these instead of building HTTP responses themselves; the
handlers registered in ``artisan_admin.main`` map each one to its status code
and a sanitized ``{"error": message}`` body.
"""
from fastapi import status


class AppError(Exception):
    """Base class for errors that carry an HTTP status and a client-safe message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Malformed or missing input (also used for invalid arguments)."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(AppError):
    """Missing, invalid or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    """Authenticated, but not allowed to perform the action."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    """Unique-constraint or state conflict."""

    status_code = status.HTTP_409_CONFLICT


class ConfigurationError(AppError):
    """Server misconfiguration, e.g. JWT_SECRET not set."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
