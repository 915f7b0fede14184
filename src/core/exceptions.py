"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    PROFILE_REQUIRED = "PROFILE_REQUIRED"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    NOTIFICATION_NOT_FOUND = "NOTIFICATION_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    SELF_LIKE = "SELF_LIKE"
    INVALID_PHONE_NUMBER = "INVALID_PHONE_NUMBER"

    # Precondition errors (412)
    PHONE_REQUIRED = "PHONE_REQUIRED"

    # Conflict errors (409)
    CONFLICT = "CONFLICT"
    USERNAME_TAKEN = "USERNAME_TAKEN"
    PHONE_TAKEN = "PHONE_TAKEN"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500/503)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


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
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class ProfileRequiredError(AppException):
    """The caller is authenticated but has not completed registration."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_REQUIRED,
            message="Complete your profile before using this feature",
            status_code=403,
        )


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, profile_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {profile_id}",
            status_code=404,
            details={"profile_id": profile_id},
        )


class NotificationNotFoundError(AppException):
    """Notification not found for this recipient."""

    def __init__(self, notification_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOTIFICATION_NOT_FOUND,
            message=f"Notification not found: {notification_id}",
            status_code=404,
            details={"notification_id": notification_id},
        )


class SelfLikeError(AppException):
    """A user tried to like themselves."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.SELF_LIKE,
            message="You cannot like your own profile",
            status_code=400,
        )


class InvalidPhoneNumberError(AppException):
    """Phone number could not be normalized."""

    def __init__(self, phone: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_PHONE_NUMBER,
            message="Phone number is not valid",
            status_code=400,
            details={"phone": phone},
        )


class PhoneRequiredError(AppException):
    """The caller has no phone number on file."""

    def __init__(self, profile_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PHONE_REQUIRED,
            message="Add a phone number to your profile to like contacts who are not on doggo",
            status_code=412,
            details={"profile_id": profile_id},
        )


class ConflictError(AppException):
    """A store-level unique constraint rejected a write."""

    def __init__(self, message: str = "The record was modified concurrently") -> None:
        super().__init__(
            error_code=ErrorCode.CONFLICT,
            message=message,
            status_code=409,
        )


class UsernameTakenError(AppException):
    """Username is already taken (case-insensitive)."""

    def __init__(self, username: str) -> None:
        super().__init__(
            error_code=ErrorCode.USERNAME_TAKEN,
            message=f"Username already taken: {username}",
            status_code=409,
            details={"username": username},
        )


class PhoneTakenError(AppException):
    """Phone number already belongs to another profile."""

    def __init__(self, phone: str) -> None:
        super().__init__(
            error_code=ErrorCode.PHONE_TAKEN,
            message="Phone number is already used by another profile",
            status_code=409,
            details={"phone": phone},
        )


class StoreUnavailableError(AppException):
    """The relational store could not be reached or failed the request."""

    def __init__(self, message: str = "Data store is unavailable") -> None:
        super().__init__(
            error_code=ErrorCode.STORE_UNAVAILABLE,
            message=message,
            status_code=503,
        )
