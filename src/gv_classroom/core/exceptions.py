from __future__ import annotations

from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 500


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules.

    ``details`` carries field-level problems as ``{"path", "message"}`` dicts.
    """

    status_code = 400

    def __init__(self, message: str, details: Optional[Sequence[dict]] = None):
        super().__init__(message)
        self.details = list(details or [])


class AuthenticationError(DomainError):
    """Raised when a request carries no usable credential."""

    status_code = 401


class InvalidCredentials(AuthenticationError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class AccountDisabled(AuthorizationError):
    """Raised when an inactive account tries to log in."""


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    status_code = 409


class AuditWriteError(DomainError):
    """The primary write succeeded but its audit record could not be stored."""

    status_code = 500
