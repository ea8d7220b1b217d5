"""Cross-resource summary for the dashboard."""

from __future__ import annotations

from datetime import date
from typing import Any

from smartspend.core.database import DatabaseConnection
from smartspend.services.bill_service import BillService
from smartspend.services.expense_service import ExpenseService
from smartspend.services.status import DUE_SOON_DAYS
from smartspend.services.warranty_service import WarrantyService


class SummaryService:
    """Aggregates a user's expenses, bills and warranties for the dashboard."""

    def __init__(self, db: DatabaseConnection, due_soon_days: int = DUE_SOON_DAYS) -> None:
        self.bills = BillService(db, due_soon_days=due_soon_days)
        self.expenses = ExpenseService(db)
        self.warranties = WarrantyService(db)

    def get_dashboard(
        self,
        user_id: str,
        today: date | None = None,
        bill_days: int = 7,
        warranty_days: int = 30,
    ) -> dict[str, Any]:
        today = today or date.today()
        monthly = self.expenses.monthly_summary(user_id, today.year)
        year_start = date(today.year, 1, 1).isoformat()

        return {
            "year": today.year,
            "total_expenses_cents": sum(m["total_cents"] for m in monthly),
            "monthly_expenses": monthly,
            "expense_categories": self.expenses.category_summary(user_id, start_date=year_start),
            "bills": self.bills.get_summary(user_id, today=today),
            "upcoming_bills": self.bills.get_reminders(user_id, today=today, within_days=bill_days),
            "expiring_warranties": self.warranties.get_expiring_soon(
                user_id, today=today, within_days=warranty_days
            ),
        }
