"""Derived status labels for bills and warranties.

Everything here is pure: results depend only on the arguments, with
``today`` passed in explicitly so callers (and tests) control the clock.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import NamedTuple

PAID = "Paid"
OVERDUE = "Overdue"
DUE_SOON = "Due Soon"
UPCOMING = "Upcoming"
INVALID_DATE = "Invalid Date"

EXPIRED = "Expired"
EXPIRING_SOON = "Expiring Soon"
ACTIVE = "Active"

DUE_SOON_DAYS = 3
EXPIRING_SOON_DAYS = 30


class BillStatus(NamedTuple):
    label: str
    priority: int


def parse_date(value: str | date | datetime | None) -> date | None:
    """Parse an ISO date (or datetime) string; ``None`` when it can't be read."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value[:10])
    except (ValueError, TypeError):
        return None


def classify_bill(
    due_date: str | date | None,
    is_paid: bool,
    today: date,
    due_soon_days: int = DUE_SOON_DAYS,
) -> BillStatus:
    """Classify a bill as Paid, Overdue, Due Soon, Upcoming or Invalid Date.

    Priority drives "sort by status": Invalid Date 0, Overdue 1, Due Soon 2,
    Upcoming 3, Paid 4. A bill due today is Due Soon, not Overdue.
    """
    if is_paid:
        return BillStatus(PAID, 4)
    due = parse_date(due_date)
    if due is None:
        return BillStatus(INVALID_DATE, 0)
    if due < today:
        return BillStatus(OVERDUE, 1)
    if due - timedelta(days=due_soon_days) < today:
        return BillStatus(DUE_SOON, 2)
    return BillStatus(UPCOMING, 3)


def days_until_expiry(expiration_date: str | date, today: date) -> int:
    """Whole calendar days from ``today`` to the expiration date (negative once past)."""
    expires = parse_date(expiration_date)
    if expires is None:
        raise ValueError(f"Invalid expiration date: {expiration_date!r}")
    return (expires - today).days


def classify_warranty(
    expiration_date: str | date,
    today: date,
    soon_days: int = EXPIRING_SOON_DAYS,
) -> str:
    days = days_until_expiry(expiration_date, today)
    if days <= 0:
        return EXPIRED
    if days <= soon_days:
        return EXPIRING_SOON
    return ACTIVE
