"""Expense model and repository."""

from __future__ import annotations

from typing import Any, ClassVar

from smartspend.models.base import BaseRepository, SmartSpendModel, cents_to_amount
from smartspend.models.category import PaymentMethod


class Expense(SmartSpendModel):
    """A single spend recorded by a user."""

    user_id: str
    amount_cents: int
    description: str
    category: str
    date: str
    payment_method: str = PaymentMethod.OTHER.value
    receipt: str | None = None
    notes: str | None = None

    @property
    def amount_dollars(self) -> float:
        return self.amount_cents / 100

    def to_api(self) -> dict[str, Any]:
        data = super().to_api()
        data["amount"] = cents_to_amount(data.pop("amountCents"))
        data["user"] = data.pop("userId")
        return data


class ExpenseRepository(BaseRepository):
    table: ClassVar[str] = "expenses"
    model_class: ClassVar[type[SmartSpendModel]] = Expense  # type: ignore[assignment]

    def totals_by_month(self, user_id: str, year: int) -> dict[int, int]:
        """Sum of amount_cents per calendar month of ``year``."""
        rows = self.db.fetchall(
            "SELECT CAST(substr(date, 6, 2) AS INTEGER) AS month, SUM(amount_cents) AS total "
            "FROM expenses WHERE user_id = ? AND substr(date, 1, 4) = ? GROUP BY month",
            (user_id, f"{year:04d}"),
        )
        return {r["month"]: r["total"] for r in rows}

    def totals_by_category(
        self, user_id: str, start: str | None = None, end: str | None = None
    ) -> list[tuple[str, int]]:
        """(category, total cents) pairs, largest first."""
        sql = "SELECT category, SUM(amount_cents) AS total FROM expenses WHERE user_id = ?"
        params: list[Any] = [user_id]
        if start:
            sql += " AND date >= ?"
            params.append(start)
        if end:
            sql += " AND date <= ?"
            params.append(end)
        sql += " GROUP BY category ORDER BY total DESC, category"
        rows = self.db.fetchall(sql, tuple(params))
        return [(r["category"], r["total"]) for r in rows]
