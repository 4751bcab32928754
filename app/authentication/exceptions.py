"""
Identity resolution errors.

Exception Hierarchy:
    BaseApplicationError
    ├── InvalidCredentialError - Token missing, malformed, expired or tampered
    └── NotFoundError
        └── PartyNotFoundError - Token is valid but the party no longer exists
"""

from core.exceptions import BaseApplicationError, NotFoundError


class InvalidCredentialError(BaseApplicationError):
    """Raised when a bearer token cannot be verified or is unusable."""

    default_error_code: str = "INVALID_CREDENTIAL"


class PartyNotFoundError(NotFoundError):
    """Raised when a verified token points at a user or stylist that does not exist."""

    default_error_code: str = "PARTY_NOT_FOUND"
