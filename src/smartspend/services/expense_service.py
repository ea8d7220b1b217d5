"""Expense management business logic."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from smartspend.core.database import DatabaseConnection
from smartspend.core.exceptions import ValidationError
from smartspend.models.category import ExpenseCategory, PaymentMethod
from smartspend.models.expense import Expense, ExpenseRepository
from smartspend.services.bill_service import clamp_page
from smartspend.services.validators import (
    clean_text,
    optional_date,
    require_amount,
    require_choice,
    require_date,
    require_text,
)

logger = logging.getLogger(__name__)

_UPDATABLE = {"amount_cents", "description", "category", "date", "payment_method", "receipt", "notes"}


class ExpenseService:
    """Business logic for expense operations."""

    def __init__(self, db: DatabaseConnection) -> None:
        self.db = db
        self.expenses = ExpenseRepository(db)

    def add_expense(
        self,
        user_id: str,
        amount_cents: int | None,
        description: str,
        category: str | ExpenseCategory | None,
        expense_date: str | date | None = None,
        payment_method: str | PaymentMethod | None = None,
        receipt: str | None = None,
        notes: str | None = None,
    ) -> Expense:
        expense = Expense(
            user_id=user_id,
            amount_cents=require_amount("amount", amount_cents),
            description=require_text("description", description, "Description"),
            category=require_choice("category", category, ExpenseCategory, "Category"),
            date=require_date("date", expense_date or date.today(), "Date"),
            payment_method=require_choice(
                "paymentMethod", payment_method or PaymentMethod.OTHER, PaymentMethod, "Payment method"
            ),
            receipt=clean_text(receipt),
            notes=clean_text(notes),
        )
        self.expenses.insert(expense)
        logger.info("Created expense %s for user %s", expense.id, user_id)
        return expense

    def get_expense(self, user_id: str, expense_id: str) -> Expense:
        return self.expenses.get_owned(user_id, expense_id)  # type: ignore[return-value]

    def list_expenses(
        self,
        user_id: str,
        category: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        limit: int | None = None,
        page: int | None = None,
    ) -> tuple[list[Expense], int, int, int]:
        """Return (expenses, total, page, limit), newest first."""
        limit, page = clamp_page(limit, page)
        clauses: list[str] = []
        params: list[Any] = []
        if category:
            clauses.append("category = ?")
            params.append(require_choice("category", category, ExpenseCategory, "Category"))
        start = optional_date("startDate", start_date, "Start date")
        if start:
            clauses.append("date >= ?")
            params.append(start)
        end = optional_date("endDate", end_date, "End date")
        if end:
            clauses.append("date <= ?")
            params.append(end)

        where = " AND ".join(clauses)
        total = self.expenses.count_owned(user_id, where, tuple(params))
        items = self.expenses.list_owned(
            user_id,
            where=where,
            params=tuple(params),
            order_by="date DESC, created_at DESC",
            limit=limit,
            offset=(page - 1) * limit,
        )
        return items, total, page, limit  # type: ignore[return-value]

    def update_expense(self, user_id: str, expense_id: str, **updates: Any) -> Expense:
        unknown = set(updates) - _UPDATABLE
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        clean: dict[str, Any] = {}
        for key, value in updates.items():
            if key == "amount_cents":
                clean[key] = require_amount("amount", value)
            elif key == "description":
                clean[key] = require_text("description", value, "Description")
            elif key == "category":
                clean[key] = require_choice("category", value, ExpenseCategory, "Category")
            elif key == "date":
                clean[key] = require_date("date", value, "Date")
            elif key == "payment_method":
                clean[key] = require_choice("paymentMethod", value, PaymentMethod, "Payment method")
            else:
                clean[key] = clean_text(value)

        if not clean:
            return self.get_expense(user_id, expense_id)
        return self.expenses.update_owned(user_id, expense_id, **clean)  # type: ignore[return-value]

    def delete_expense(self, user_id: str, expense_id: str) -> None:
        self.expenses.delete_owned(user_id, expense_id)

    def monthly_summary(self, user_id: str, year: int | None = None) -> list[dict[str, Any]]:
        """Twelve ``{month, total}`` entries for the given (default current) year."""
        year = year or date.today().year
        totals = self.expenses.totals_by_month(user_id, year)
        return [{"month": m, "total_cents": totals.get(m, 0)} for m in range(1, 13)]

    def category_summary(
        self, user_id: str, start_date: str | None = None, end_date: str | None = None
    ) -> list[dict[str, Any]]:
        start = optional_date("startDate", start_date, "Start date")
        end = optional_date("endDate", end_date, "End date")
        return [
            {"category": cat, "total_cents": total}
            for cat, total in self.expenses.totals_by_category(user_id, start, end)
        ]

    def total_for_year(self, user_id: str, year: int | None = None) -> int:
        return sum(m["total_cents"] for m in self.monthly_summary(user_id, year))
