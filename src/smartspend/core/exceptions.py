"""Custom exceptions for SmartSpend."""

from __future__ import annotations


class SmartSpendError(Exception):
    """Base exception for all SmartSpend errors."""


class DatabaseError(SmartSpendError):
    """Database connection or query error."""


class ConfigError(SmartSpendError):
    """Configuration error."""


class ValidationError(SmartSpendError):
    """Data validation error.

    ``errors`` maps field names to messages so callers can surface them
    next to the offending input.
    """

    def __init__(self, message: str, errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or {}


class NotFoundError(SmartSpendError):
    """Entity not found (or not owned by the requesting user)."""


class DuplicateError(SmartSpendError):
    """Duplicate entity."""


class AuthError(SmartSpendError):
    """Authentication failure."""
