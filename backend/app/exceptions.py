"""Application error taxonomy.

Every error raised by the services and routers derives from ``AppError`` and
carries the HTTP status it maps to. The handlers in
``app.exception_handlers`` turn them into the standard response envelope.
"""
from fastapi import status


class AppError(Exception):
    """Base class for all application errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An internal error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailedError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class UnauthenticatedError(AppError):
    """Missing, malformed, expired or unresolvable credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action"


class InactiveAccountError(ForbiddenError):
    default_message = "Account is inactive"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"

    def __init__(self, resource: str | None = None):
        super().__init__(f"{resource} not found" if resource else None)


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class LimitReachedError(ConflictError):
    """Raised when a tenant has used up its plan quota."""

    def __init__(self, kind: str, limit: int):
        self.kind = kind
        self.limit = limit
        super().__init__(
            f"{kind.capitalize()} limit reached. Maximum {limit} {kind}s allowed "
            "for your subscription plan"
        )
