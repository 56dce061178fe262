from __future__ import annotations

from .enums import GeoErrorCode


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when staff credentials do not match (remote or cached roster)."""


class InvalidTransitionError(DomainError):
    """Raised when a terminal action is not allowed in the current state."""


class GeolocationError(DomainError):
    """Raised by position providers when no usable position is available."""

    def __init__(self, code: GeoErrorCode, message: str | None = None):
        super().__init__(message or code.value)
        self.code = code


class RemoteStoreError(DomainError):
    """Raised when the remote table store cannot be reached or rejects a write."""
