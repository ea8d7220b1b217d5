"""Field checks shared by the resource services."""

from __future__ import annotations

import math
from datetime import date
from typing import Any

from smartspend.core.exceptions import ValidationError
from smartspend.models.category import Choice

# Largest amount accepted, in dollars; keeps cents inside a SQLite INTEGER
MAX_AMOUNT = 10**12
MAX_AMOUNT_CENTS = MAX_AMOUNT * 100


def clean_text(value: str | None) -> str | None:
    """Trim optional text; empty or blank strings become ``None``."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def require_text(field: str, value: str | None, label: str) -> str:
    cleaned = clean_text(value)
    if not cleaned:
        raise ValidationError(f"{label} is required.", {field: f"{label} is required"})
    return cleaned


def require_date(field: str, value: Any, label: str) -> str:
    """Return the value as an ISO date string or raise a field error."""
    if isinstance(value, date):
        return value.isoformat()
    if not value:
        raise ValidationError(f"{label} is required.", {field: f"{label} is required"})
    try:
        return date.fromisoformat(str(value)[:10]).isoformat()
    except ValueError:
        raise ValidationError(
            f"Invalid {label.lower()} format.", {field: f"{label} must be a YYYY-MM-DD date"}
        ) from None


def optional_date(field: str, value: Any, label: str) -> str | None:
    if value is None or value == "":
        return None
    return require_date(field, value, label)


def require_amount(field: str, cents: int | None, label: str = "Amount") -> int:
    if cents is None:
        raise ValidationError(f"{label} is required.", {field: f"{label} is required"})
    if cents < 0:
        raise ValidationError(f"{label} cannot be negative.", {field: f"{label} cannot be negative"})
    if cents > MAX_AMOUNT_CENTS:
        raise ValidationError(f"{label} is too large.", {field: f"{label} must be at most {MAX_AMOUNT:,}"})
    return cents


def require_flag(field: str, value: Any, label: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{label} must be true or false.", {field: f"{label} must be true or false"})
    return value


def require_choice(field: str, value: Any, choices: type[Choice], label: str) -> str:
    """Validate ``value`` against an enumerated type and return its canonical label."""
    if isinstance(value, choices):
        return value.value
    if not value:
        raise ValidationError(f"{label} is required.", {field: f"{label} is required"})
    try:
        return choices.parse(str(value)).value
    except ValueError:
        raise ValidationError(
            f"Invalid {label.lower()}: {value}",
            {field: f"{label} must be one of: {', '.join(choices.values())}"},
        ) from None


def to_cents(amount: float | None, field: str = "amount", label: str = "Amount") -> int | None:
    """Convert a dollar amount to whole cents, rejecting infinities, NaN and huge values."""
    if amount is None:
        return None
    if not math.isfinite(amount) or abs(amount) > MAX_AMOUNT:
        raise ValidationError(f"Invalid {label.lower()}.", {field: f"{label} must be a number up to {MAX_AMOUNT:,}"})
    return int(round(amount * 100))
