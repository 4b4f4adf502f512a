"""Exceptions raised by the number allocation service.

Store failures are not wrapped: any ``sqlalchemy.exc.SQLAlchemyError`` that
is not a uniqueness conflict reaches the caller unchanged.
"""

from __future__ import annotations

from fastapi import status


class NumberServiceError(Exception):
    """Base class for errors surfaced to API callers.

    Attributes:
        message: Human-readable description returned in the error envelope.
        status_code: HTTP status used by the API layer.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NumberConflictError(NumberServiceError):
    """Raised by the repository when an insert violates the unique constraint.

    Only the allocator's retry loop handles this error.
    """

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, number: int) -> None:
        super().__init__(f"Number {number} already exists")
        self.number = number


class AllocationExhaustedError(NumberServiceError):
    """Raised when every allocation attempt collided with an existing number."""

    def __init__(self, attempts: int) -> None:
        super().__init__("Failed to generate unique number")
        self.attempts = attempts


class InvalidArgumentError(NumberServiceError):
    """Raised for out-of-range or malformed input, before any store access."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(NumberServiceError):
    """Raised when a delete targets a number that is not stored."""

    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(NumberServiceError):
    """Raised when a destructive call lacks the confirmation token."""

    status_code = status.HTTP_403_FORBIDDEN
