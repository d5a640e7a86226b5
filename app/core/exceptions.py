"""
Application error taxonomy.

Every error that may reach a client derives from AppError and carries the
HTTP status it maps to. The handlers registered in main.py render them as
{"success": false, "message": ...}.

CacheMiss is internal to the cache layer and is never rendered.
"""

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class CacheMiss(KeyError):
    """Raised by CacheStore.get when the key is absent."""


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class StoreError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Persistent store failure"


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class InvalidationEventError(ValidationError):
    """A mutation event that cannot be mapped to a complete purge set."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Malformed invalidation event"


class InsufficientStockError(ValidationError):
    default_message = "Not enough stock"


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "You are not logged in"


class ForbiddenError(AuthError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not an admin"
