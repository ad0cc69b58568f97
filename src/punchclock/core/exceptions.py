from __future__ import annotations

from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""

    def __init__(self, message: str, errors: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a record is absent or not owned by the caller."""


class AuthenticationError(DomainError):
    """Raised when credentials or the session token are missing or invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
