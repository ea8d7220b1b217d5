"""Bill management business logic, including the pay/rollover cycle."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any

from dateutil.relativedelta import relativedelta

from smartspend.core.database import DatabaseConnection
from smartspend.core.exceptions import ValidationError
from smartspend.models.bill import Bill, BillRepository
from smartspend.models.category import BillCategory, RecurringPeriod
from smartspend.services.bill_projection import BillFilter, BillProjection, BillSort, project_bills
from smartspend.services.status import DUE_SOON, DUE_SOON_DAYS, OVERDUE, classify_bill
from smartspend.services.validators import (
    clean_text,
    optional_date,
    require_amount,
    require_choice,
    require_date,
    require_flag,
    require_text,
)

logger = logging.getLogger(__name__)

REMINDER_LEAD_DAYS = 3
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200
MAX_PAGE = 1_000_000

_PERIOD_STEPS: dict[str, relativedelta] = {
    RecurringPeriod.WEEKLY.value: relativedelta(days=7),
    RecurringPeriod.MONTHLY.value: relativedelta(months=1),
    RecurringPeriod.QUARTERLY.value: relativedelta(months=3),
    RecurringPeriod.ANNUALLY.value: relativedelta(years=1),
}

_UPDATABLE = {
    "name", "amount_cents", "due_date", "category", "is_paid",
    "is_recurring", "recurring_period", "reminder_date", "notes",
}


def advance_due_date(due: date, period: str | None) -> date:
    """Next occurrence of a recurring bill.

    Month and year steps keep the day of month; a day the target month
    lacks rolls over into the following month (Jan 31 -> Mar 2 in 2024,
    Feb 29 -> Mar 1 of the next year). An unknown or missing period
    advances one month.
    """
    step = _PERIOD_STEPS.get(period or "", relativedelta(months=1))
    stepped = due + step
    if step.days == 0 and stepped.day < due.day:
        # relativedelta clamped to the month end; carry the missing days over
        stepped += timedelta(days=due.day - stepped.day)
    return stepped


@dataclass
class PayResult:
    bill: Bill
    next_bill: Bill | None = None


@dataclass
class BillPage:
    bills: list[Bill]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def clamp_page(limit: int | None, page: int | None) -> tuple[int, int]:
    """Normalize pagination input to (limit, page)."""
    limit = DEFAULT_PAGE_SIZE if limit is None else max(1, min(int(limit), MAX_PAGE_SIZE))
    page = 1 if page is None else max(1, min(int(page), MAX_PAGE))
    return limit, page


class BillService:
    """Business logic for bill operations. Every call is scoped to one owner."""

    def __init__(self, db: DatabaseConnection, due_soon_days: int = DUE_SOON_DAYS) -> None:
        self.db = db
        self.bills = BillRepository(db)
        self.due_soon_days = due_soon_days

    def add_bill(
        self,
        user_id: str,
        name: str,
        amount_cents: int | None,
        due_date: str | date | None,
        category: str | BillCategory | None,
        is_recurring: bool = False,
        recurring_period: str | RecurringPeriod | None = None,
        reminder_date: str | date | None = None,
        notes: str | None = None,
        is_paid: bool = False,
    ) -> Bill:
        """Add a new bill."""
        period = None
        if recurring_period:
            period = require_choice("recurringPeriod", recurring_period, RecurringPeriod, "Recurring period")

        bill = Bill(
            user_id=user_id,
            name=require_text("name", name, "Bill name"),
            amount_cents=require_amount("amount", amount_cents),
            due_date=require_date("dueDate", due_date, "Due date"),
            category=require_choice("category", category, BillCategory, "Category"),
            is_paid=bool(is_paid),
            is_recurring=bool(is_recurring),
            recurring_period=period,
            reminder_date=optional_date("reminderDate", reminder_date, "Reminder date"),
            notes=clean_text(notes),
        )
        self.bills.insert(bill)
        logger.info("Created bill %s for user %s", bill.id, user_id)
        return bill

    def get_bill(self, user_id: str, bill_id: str) -> Bill:
        return self.bills.get_owned(user_id, bill_id)  # type: ignore[return-value]

    def list_all(self, user_id: str) -> list[Bill]:
        """Every bill the user owns, soonest due first."""
        return self.bills.list_owned(user_id, order_by="due_date")  # type: ignore[return-value]

    def list_bills(
        self,
        user_id: str,
        is_paid: bool | None = None,
        upcoming: bool = False,
        limit: int | None = None,
        page: int | None = None,
        today: date | None = None,
    ) -> BillPage:
        """Paginated bills. ``upcoming`` means unpaid and due today or later."""
        limit, page = clamp_page(limit, page)
        clauses: list[str] = []
        params: list[Any] = []
        if is_paid is not None:
            clauses.append("is_paid = ?")
            params.append(int(is_paid))
        if upcoming:
            clauses.append("is_paid = 0 AND due_date >= ?")
            params.append((today or date.today()).isoformat())

        where = " AND ".join(clauses)
        total = self.bills.count_owned(user_id, where, tuple(params))
        rows = self.bills.list_owned(
            user_id,
            where=where,
            params=tuple(params),
            order_by="due_date, created_at",
            limit=limit,
            offset=(page - 1) * limit,
        )
        return BillPage(bills=rows, total=total, page=page, limit=limit)  # type: ignore[arg-type]

    def search_bills(self, user_id: str, query: str) -> list[Bill]:
        return self.bills.find_by_name(user_id, query)

    def update_bill(self, user_id: str, bill_id: str, **updates: Any) -> Bill:
        """Partially update a bill. Only known fields are accepted."""
        unknown = set(updates) - _UPDATABLE
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        clean: dict[str, Any] = {}
        for key, value in updates.items():
            if key == "name":
                clean[key] = require_text("name", value, "Bill name")
            elif key == "amount_cents":
                clean[key] = require_amount("amount", value)
            elif key == "due_date":
                clean[key] = require_date("dueDate", value, "Due date")
            elif key == "category":
                clean[key] = require_choice("category", value, BillCategory, "Category")
            elif key == "recurring_period":
                clean[key] = (
                    require_choice("recurringPeriod", value, RecurringPeriod, "Recurring period")
                    if value else None
                )
            elif key == "reminder_date":
                clean[key] = optional_date("reminderDate", value, "Reminder date")
            elif key == "notes":
                clean[key] = clean_text(value)
            elif key == "is_paid":
                clean[key] = int(require_flag("isPaid", value, "Paid flag"))
            else:
                clean[key] = int(require_flag("isRecurring", value, "Recurring flag"))

        if not clean:
            return self.get_bill(user_id, bill_id)
        return self.bills.update_owned(user_id, bill_id, **clean)  # type: ignore[return-value]

    def delete_bill(self, user_id: str, bill_id: str) -> None:
        self.bills.delete_owned(user_id, bill_id)
        logger.info("Deleted bill %s for user %s", bill_id, user_id)

    def pay_bill(self, user_id: str, bill_id: str) -> PayResult:
        """Mark a bill paid; a recurring bill also gets its next occurrence.

        Both writes share one transaction, so a failed insert of the next
        bill leaves the original unpaid. Paying an already-paid bill is not
        rejected and rolls it forward again.
        """
        bill = self.get_bill(user_id, bill_id)

        with self.db.transaction():
            paid = self.bills.update(bill.id, is_paid=1)
            successor = None
            if bill.is_recurring:
                successor = self._next_occurrence(bill)
                self.bills.insert(successor)

        if successor is not None:
            logger.info(
                "Paid recurring bill %s; next occurrence %s due %s",
                bill.id, successor.id, successor.due_date,
            )
        else:
            logger.info("Paid bill %s", bill.id)
        return PayResult(bill=paid, next_bill=successor)  # type: ignore[arg-type]

    def _next_occurrence(self, bill: Bill) -> Bill:
        next_due = advance_due_date(date.fromisoformat(bill.due_date[:10]), bill.recurring_period)
        return Bill(
            user_id=bill.user_id,
            name=bill.name,
            amount_cents=bill.amount_cents,
            due_date=next_due.isoformat(),
            category=bill.category,
            is_paid=False,
            is_recurring=bill.is_recurring,
            recurring_period=bill.recurring_period,
            reminder_date=(next_due - timedelta(days=REMINDER_LEAD_DAYS)).isoformat(),
            notes=bill.notes,
        )

    def get_reminders(self, user_id: str, today: date | None = None, within_days: int = 7) -> list[Bill]:
        """Unpaid bills due between today and ``within_days`` from now."""
        today = today or date.today()
        end = today + timedelta(days=within_days)
        return self.bills.get_due_between(user_id, today.isoformat(), end.isoformat())

    def view(
        self,
        user_id: str,
        bill_filter: BillFilter | None = None,
        sort: BillSort | None = None,
        today: date | None = None,
    ) -> BillProjection:
        """Filtered, sorted view over all of a user's bills with totals."""
        return project_bills(
            self.list_all(user_id), bill_filter, sort, today or date.today(), due_soon_days=self.due_soon_days
        )

    def get_summary(self, user_id: str, today: date | None = None) -> dict[str, Any]:
        """Counts and totals across a user's bills."""
        today = today or date.today()
        bills = self.list_all(user_id)
        unpaid = [b for b in bills if not b.is_paid]
        labels = [classify_bill(b.due_date, False, today, self.due_soon_days).label for b in unpaid]
        overdue = [b for b, label in zip(unpaid, labels) if label == OVERDUE]
        return {
            "total_bills": len(bills),
            "unpaid_count": len(unpaid),
            "unpaid_total_cents": sum(b.amount_cents for b in unpaid),
            "overdue_count": len(overdue),
            "overdue_total_cents": sum(b.amount_cents for b in overdue),
            "recurring_count": sum(1 for b in bills if b.is_recurring),
            "due_soon": labels.count(DUE_SOON),
        }
