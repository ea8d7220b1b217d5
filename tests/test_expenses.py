"""Tests for expense service."""

import tempfile
from datetime import date
from pathlib import Path

import pytest

from smartspend.core.database import DatabaseConnection
from smartspend.core.exceptions import NotFoundError, ValidationError
from smartspend.core.migrations import initialize_database
from smartspend.services.expense_service import ExpenseService


@pytest.fixture
def db():
    with tempfile.TemporaryDirectory() as d:
        conn = DatabaseConnection(db_path=Path(d) / "test.db")
        conn.connect()
        initialize_database(conn)
        yield conn
        conn.close()


@pytest.fixture
def svc(db):
    return ExpenseService(db)


def _add(svc, user="u1", **kwargs):
    defaults = {"amount_cents": 1250, "description": "Lunch", "category": "Dining Out", "expense_date": "2024-03-05"}
    defaults.update(kwargs)
    return svc.add_expense(user, **defaults)


class TestExpenseService:
    def test_add_defaults(self, svc):
        expense = svc.add_expense("u1", amount_cents=500, description=" Coffee ", category="dining out")
        assert expense.description == "Coffee"
        assert expense.category == "Dining Out"
        assert expense.payment_method == "Other"
        assert expense.date == date.today().isoformat()

    def test_add_validation(self, svc):
        with pytest.raises(ValidationError) as exc:
            _add(svc, description="")
        assert "description" in exc.value.errors
        with pytest.raises(ValidationError) as exc:
            _add(svc, payment_method="Bitcoin")
        assert "paymentMethod" in exc.value.errors
        with pytest.raises(ValidationError):
            _add(svc, amount_cents=None)

    def test_blank_optional_text_is_none(self, svc):
        expense = _add(svc, receipt="  ", notes="")
        assert expense.receipt is None
        assert expense.notes is None

    def test_list_filters_newest_first(self, svc):
        _add(svc, description="Jan", expense_date="2024-01-10", category="Fuel")
        _add(svc, description="Feb", expense_date="2024-02-10")
        _add(svc, description="Mar", expense_date="2024-03-10")
        _add(svc, user="u2", description="Theirs")

        items, total, page, limit = svc.list_expenses("u1")
        assert [e.description for e in items] == ["Mar", "Feb", "Jan"]
        assert (total, page, limit) == (3, 1, 50)

        items, total, _, _ = svc.list_expenses("u1", category="fuel")
        assert [e.description for e in items] == ["Jan"]

        items, _, _, _ = svc.list_expenses("u1", start_date="2024-02-01", end_date="2024-02-29")
        assert [e.description for e in items] == ["Feb"]

    def test_list_rejects_bad_date(self, svc):
        with pytest.raises(ValidationError):
            svc.list_expenses("u1", start_date="yesterday")

    def test_update_and_delete_owner_scoped(self, svc):
        expense = _add(svc)
        updated = svc.update_expense("u1", expense.id, amount_cents=2000, payment_method="cash")
        assert updated.amount_cents == 2000
        assert updated.payment_method == "Cash"

        with pytest.raises(NotFoundError):
            svc.update_expense("u2", expense.id, amount_cents=1)
        with pytest.raises(NotFoundError):
            svc.delete_expense("u2", expense.id)
        svc.delete_expense("u1", expense.id)
        with pytest.raises(NotFoundError):
            svc.get_expense("u1", expense.id)

    def test_monthly_summary_has_twelve_months(self, svc):
        _add(svc, amount_cents=1000, expense_date="2024-01-05")
        _add(svc, amount_cents=500, expense_date="2024-01-25")
        _add(svc, amount_cents=700, expense_date="2024-12-31")
        _add(svc, amount_cents=9999, expense_date="2023-06-01")

        months = svc.monthly_summary("u1", 2024)
        assert [m["month"] for m in months] == list(range(1, 13))
        assert months[0]["total_cents"] == 1500
        assert months[11]["total_cents"] == 700
        assert sum(m["total_cents"] for m in months) == 2200
        assert svc.total_for_year("u1", 2023) == 9999

    def test_category_summary_sorted_by_total(self, svc):
        _add(svc, amount_cents=100, category="Fuel")
        _add(svc, amount_cents=900, category="Travel")
        _add(svc, amount_cents=300, category="Fuel")
        rows = svc.category_summary("u1")
        assert rows == [
            {"category": "Travel", "total_cents": 900},
            {"category": "Fuel", "total_cents": 400},
        ]
