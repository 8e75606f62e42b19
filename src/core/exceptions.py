"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"

    # Not found errors (404)
    HANDYMAN_NOT_FOUND = "HANDYMAN_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Conflict errors (409)
    HANDYMAN_EXISTS = "HANDYMAN_EXISTS"
    INVALID_TRANSITION = "INVALID_TRANSITION"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed or no current user is available."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(
            error_code=ErrorCode.UNAUTHORIZED,
            message=message,
            status_code=401,
        )


class HandymanProfileNotFoundError(AppException):
    """No handyman profile exists for the user."""

    def __init__(self, user_id: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.HANDYMAN_NOT_FOUND,
            message="No handyman profile found",
            status_code=404,
            details={"user_id": user_id} if user_id else None,
        )


class ProfileValidationError(AppException):
    """Draft is missing required fields or holds out-of-range values."""

    def __init__(
        self,
        message: str = "Please fill in all required fields",
        fields: list[str] | None = None,
    ) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"fields": fields} if fields else None,
        )


class PersistenceError(AppException):
    """The document store rejected a read or write."""

    def __init__(self, message: str = "Error updating your profile") -> None:
        super().__init__(
            error_code=ErrorCode.DATABASE_ERROR,
            message=message,
            status_code=500,
        )


class InvalidProfileTransitionError(AppException):
    """Editing state change not allowed from the current state."""

    def __init__(self, message: str = "Profile cannot enter editing from this state") -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_TRANSITION,
            message=message,
            status_code=409,
        )


class HandymanProfileExistsError(AppException):
    """User already has a handyman profile."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.HANDYMAN_EXISTS,
            message="You already have a handyman profile",
            status_code=409,
            details={"user_id": user_id},
        )
