"""Custom exceptions for the identity verifier."""

from typing import Any


class IdentityVerifierError(Exception):
    """Base exception for application-level errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigError(IdentityVerifierError):
    """Raised when a configured base URL is missing or malformed."""


class VerificationError(IdentityVerifierError):
    """Base exception for a failed call to the verification service."""


class TransportError(VerificationError):
    """Raised when no response was received from the service."""


class HttpError(VerificationError):
    """Raised when the service answered with a non-success status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class SchemaViolation(VerificationError):
    """Raised when a success response does not satisfy the result contract."""

    def __init__(
        self,
        message: str = "Verification failed: the service returned an invalid result",
        payload: Any = None,
        errors: list[Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.payload = payload
        self.errors = errors or []
