from abc import ABC
from enum import StrEnum


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class ConflictError(UserError):
    """Raised when a resource collides with an existing one (duplicate id or email)."""


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class SessionInvalidReason(StrEnum):
    """Why an outward session token was rejected."""

    ABSENT = "absent"
    MALFORMED = "malformed"
    NOT_FOUND = "not_found"
    MISMATCHED = "mismatched"
    EXPIRED = "expired"


class SessionValidationError(AuthenticationError):
    """Raised when a session token fails validation.

    Clients always see the same message; ``reason`` is kept for logging.
    """

    def __init__(self, reason: SessionInvalidReason) -> None:
        super().__init__("Invalid or expired session")
        self.reason = reason


class AccessDeniedError(UserError):
    """Raised when a user tries to access a resource they do not have permission for."""


class ValidationError(UserError):
    """Raised when user input fails validation."""


class MalformedError(ValidationError):
    """Raised when input cannot be parsed into the expected structure."""


class IdSpaceExhaustedError(Exception):
    """Raised when no free id could be found within the attempt budget."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"No unique id found after {attempts} attempts")
        self.attempts = attempts
