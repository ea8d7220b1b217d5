"""Bill model and repository."""

from __future__ import annotations

from typing import Any, ClassVar

from smartspend.models.base import BaseRepository, SmartSpendModel, cents_to_amount
from smartspend.models.category import BillCategory


class Bill(SmartSpendModel):
    """A one-off or recurring payment obligation owned by one user."""

    user_id: str
    name: str
    amount_cents: int = 0
    due_date: str
    category: str = BillCategory.OTHER_UTILITIES.value
    is_paid: bool = False
    is_recurring: bool = False
    recurring_period: str | None = None  # Weekly, Monthly, Quarterly, Annually
    reminder_date: str | None = None
    notes: str | None = None

    @property
    def amount_dollars(self) -> float:
        return self.amount_cents / 100

    def to_row(self) -> dict[str, Any]:
        data = self.model_dump()
        data["is_paid"] = int(data["is_paid"])
        data["is_recurring"] = int(data["is_recurring"])
        return data

    @classmethod
    def from_row(cls, row: Any) -> "Bill":
        d = {k: row[k] for k in row.keys()}
        d["is_paid"] = bool(d.get("is_paid", 0))
        d["is_recurring"] = bool(d.get("is_recurring", 0))
        return cls(**d)

    def to_api(self) -> dict[str, Any]:
        data = super().to_api()
        data["amount"] = cents_to_amount(data.pop("amountCents"))
        data["user"] = data.pop("userId")
        return data


class BillRepository(BaseRepository):
    table: ClassVar[str] = "bills"
    model_class: ClassVar[type[SmartSpendModel]] = Bill  # type: ignore[assignment]

    def find_by_name(self, user_id: str, name: str) -> list[Bill]:
        """Search a user's bills by name (case-insensitive partial match)."""
        return self.list_owned(  # type: ignore[return-value]
            user_id,
            where="LOWER(name) LIKE ?",
            params=(f"%{name.lower()}%",),
            order_by="due_date",
        )

    def get_due_between(self, user_id: str, start: str, end: str) -> list[Bill]:
        """Unpaid bills with start <= due_date <= end, soonest first."""
        return self.list_owned(  # type: ignore[return-value]
            user_id,
            where="is_paid = 0 AND due_date >= ? AND due_date <= ?",
            params=(start, end),
            order_by="due_date",
        )
