"""Typed errors raised by the service layer.

Every error carries the HTTP status the API layer should answer with.
Services raise these; they never build HTTP responses themselves.
"""
from typing import Optional


class NeedledropError(Exception):
    """Base class for all domain errors."""

    status_code = 500

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message()
        super().__init__(self.message)

    @classmethod
    def default_message(cls) -> str:
        return cls.__doc__.strip().splitlines()[0] if cls.__doc__ else cls.__name__


class ValidationError(NeedledropError):
    """Invalid input."""

    status_code = 400


class RatingOutOfRangeError(ValidationError):
    """Rating must be an integer between 1 and 5."""


class EmptyReviewError(ValidationError):
    """Review content cannot be empty or contain only whitespace."""


class ReviewTooLongError(ValidationError):
    """Review content is too long."""


class SelfFollowError(ValidationError):
    """Cannot follow yourself."""


class AuthenticationError(NeedledropError):
    """Invalid or expired token."""

    status_code = 401


class ConflictError(NeedledropError):
    """Request conflicts with current state."""

    status_code = 409


class AlreadyFollowingError(ConflictError):
    """User is already following this user."""


class NotFollowingError(ConflictError):
    """User is not following this user."""


class NotFoundError(NeedledropError):
    """Resource not found."""

    status_code = 404


class ReferentialIntegrityError(NotFoundError):
    """Referenced record does not exist."""


class PermissionDeniedError(NeedledropError):
    """Not allowed to modify this resource."""

    status_code = 403


class PersistenceValidationFailed(NeedledropError):
    """Data persistence validation failed."""


class CatalogError(NeedledropError):
    """Catalog provider request failed."""

    status_code = 502
