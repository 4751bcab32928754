"""
Base exception classes for application-wide error handling.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Input validation failures
    └── NotFoundError - Resource not found

Domain apps derive their own errors from these classes so that every error
raised by the core carries a machine-readable ``error_code``. Views and the
WebSocket consumer translate them to HTTP statuses and ``error`` frames.

Usage:
    from core.exceptions import NotFoundError

    raise NotFoundError("Stylist not found", error_code="PARTY_NOT_FOUND")

    try:
        ...
    except BaseApplicationError as e:
        await self.send_json(responses.error(e.message, e.error_code))

Note:
    These exceptions are for domain/business logic errors.
    DRF handles API-layer exceptions (serialization, authentication, etc.).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, metadata, etc.)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {
                "error": "Stylist not found",
                "error_code": "PARTY_NOT_FOUND",
                "details": {"stylist_id": 3}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails outside of a DRF serializer.

    Example:
        raise ValidationError(
            "chatId must be a positive integer",
            details={"chatId": ["Invalid value"]},
        )
    """

    default_error_code: str = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Example:
        raise NotFoundError(
            f"User with ID {user_id} not found",
            error_code="PARTY_NOT_FOUND",
            details={"user_id": user_id},
        )
    """

    default_error_code: str = "NOT_FOUND"
