"""Custom exception classes for the user service.

Every exception carries a stable ``ErrorKind`` discriminator alongside its
HTTP status code, so callers branch on the kind and never on message text.
"""

from __future__ import annotations

from enum import Enum
from typing import Any
from typing import Optional


class ErrorKind(str, Enum):
    """Stable error-kind tags."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    TRANSPORT = "transport"
    SERIALIZATION = "serialization"
    INVALID_CURSOR = "invalid_cursor"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


class AppError(Exception):
    """Base exception for application errors.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code (default 500).
        detail: Optional additional context, such as the underlying
            AWS error message.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        detail: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response body."""
        result: dict[str, Any] = {"error": self.message}
        if self.detail:
            result["detail"] = self.detail
        return result


class ValidationError(AppError):
    """Raised when a request or user record is malformed or incomplete."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, status_code=400)
        self.field = field


class InvalidCursorError(ValidationError):
    """Raised when a pagination cursor cannot be used."""

    kind = ErrorKind.INVALID_CURSOR

    def __init__(self, detail: Optional[str] = None):
        super().__init__(
            "invalid last evaluated key for pagination",
            field="lastEvaluatedKey",
        )
        self.detail = detail


class NotFoundError(AppError):
    """Raised when the user addressed by a write or delete is absent."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "user does not exist"):
        super().__init__(message, status_code=404)


class AlreadyExistsError(AppError):
    """Raised when creating a user whose email is already stored.

    Surfaced as 400 like any other create failure.
    """

    kind = ErrorKind.ALREADY_EXISTS

    def __init__(self, message: str = "user already exists"):
        super().__init__(message, status_code=400)


class TransportError(AppError):
    """Raised when DynamoDB is unreachable, throttling, or denies access."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message, status_code=400, detail=detail)


class FetchError(TransportError):
    """Raised when reading one or more records fails."""


class WriteError(TransportError):
    """Raised when putting a record fails."""


class DeleteError(TransportError):
    """Raised when deleting a record fails."""


class SerializationError(AppError):
    """Raised when a response body cannot be encoded as JSON."""

    kind = ErrorKind.SERIALIZATION

    def __init__(self, detail: Optional[str] = None):
        super().__init__(
            "Failed to marshal response body",
            status_code=500,
            detail=detail,
        )


class ConfigurationError(AppError):
    """Raised when required configuration is missing.

    Use when environment variables are not properly configured.
    """

    kind = ErrorKind.CONFIGURATION

    def __init__(self, config_name: str):
        super().__init__(
            f"Missing required configuration: {config_name}",
            status_code=500,
        )
        self.config_name = config_name
