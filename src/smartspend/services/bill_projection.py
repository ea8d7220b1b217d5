"""Filter, sort and aggregate a user's bills for list views."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Iterable

from smartspend.models.bill import Bill
from smartspend.services.status import DUE_SOON, DUE_SOON_DAYS, OVERDUE, UPCOMING, classify_bill, parse_date

STATUS_FILTERS = ("all", "paid", "unpaid", "overdue", "upcoming")
SORT_KEYS = ("due_date", "amount", "status", "name")
SORT_ORDERS = ("asc", "desc")


@dataclass
class BillFilter:
    status: str = "all"
    search: str = ""

    def __post_init__(self) -> None:
        if self.status not in STATUS_FILTERS:
            raise ValueError(f"status must be one of {', '.join(STATUS_FILTERS)}")


@dataclass
class BillSort:
    key: str = "due_date"
    order: str = "asc"

    def __post_init__(self) -> None:
        if self.key not in SORT_KEYS:
            raise ValueError(f"sort key must be one of {', '.join(SORT_KEYS)}")
        if self.order not in SORT_ORDERS:
            raise ValueError("sort order must be 'asc' or 'desc'")


@dataclass
class BillProjection:
    visible: list[Bill] = field(default_factory=list)
    total_amount_cents: int = 0
    overdue_count: int = 0
    due_soon_days: int = DUE_SOON_DAYS

    def to_api(self, today: date) -> dict[str, Any]:
        bills = []
        for b in self.visible:
            status = classify_bill(b.due_date, b.is_paid, today, self.due_soon_days)
            bills.append({**b.to_api(), "status": status.label, "statusPriority": status.priority})
        return {
            "bills": bills,
            "totalAmount": self.total_amount_cents / 100,
            "overdueCount": self.overdue_count,
        }


def _matches(bill: Bill, bill_filter: BillFilter, today: date, due_soon_days: int) -> bool:
    needle = bill_filter.search.strip().lower()
    if needle and needle not in bill.name.lower() and needle not in bill.category.lower():
        return False

    status = bill_filter.status
    if status == "paid":
        return bill.is_paid
    if status == "unpaid":
        return not bill.is_paid
    if status == "overdue":
        return classify_bill(bill.due_date, bill.is_paid, today).label == OVERDUE
    if status == "upcoming":
        return classify_bill(bill.due_date, bill.is_paid, today, due_soon_days).label in (UPCOMING, DUE_SOON)
    return True


def _sort_key(key: str, today: date, due_soon_days: int) -> Callable[[Bill], Any]:
    if key == "amount":
        return lambda b: b.amount_cents
    if key == "status":
        return lambda b: classify_bill(b.due_date, b.is_paid, today, due_soon_days).priority
    if key == "name":
        return lambda b: b.name.lower()
    # Unparseable due dates sort first
    return lambda b: parse_date(b.due_date) or date.min


def project_bills(
    bills: Iterable[Bill],
    bill_filter: BillFilter | None = None,
    sort: BillSort | None = None,
    today: date | None = None,
    due_soon_days: int = DUE_SOON_DAYS,
) -> BillProjection:
    """Return the visible, ordered subset of ``bills`` plus its totals.

    The sort is stable in both directions: bills with equal keys keep the
    order they arrived in.
    """
    bill_filter = bill_filter or BillFilter()
    sort = sort or BillSort()
    today = today or date.today()

    visible = [b for b in bills if _matches(b, bill_filter, today, due_soon_days)]
    visible = sorted(visible, key=_sort_key(sort.key, today, due_soon_days), reverse=sort.order == "desc")

    overdue = sum(
        1 for b in visible
        if not b.is_paid and classify_bill(b.due_date, b.is_paid, today).label == OVERDUE
    )
    return BillProjection(
        visible=visible,
        total_amount_cents=sum(b.amount_cents for b in visible),
        overdue_count=overdue,
        due_soon_days=due_soon_days,
    )
