"""Tests for warranty service."""

import tempfile
from datetime import date
from pathlib import Path

import pytest

from smartspend.core.database import DatabaseConnection
from smartspend.core.exceptions import NotFoundError, ValidationError
from smartspend.core.migrations import initialize_database
from smartspend.services.warranty_service import WarrantyService, warranty_to_api

TODAY = date(2024, 3, 10)


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
    return WarrantyService(db)


def _add(svc, user="u1", **kwargs):
    defaults = {"product_name": "Laptop", "expiration_date": "2025-03-10", "category": "Office Equipment"}
    defaults.update(kwargs)
    return svc.add_warranty(user, **defaults)


class TestWarrantyService:
    def test_add(self, svc):
        w = _add(
            svc,
            purchase_date="2024-03-10",
            retailer="  ",
            purchase_price_cents=129900,
            currency="eur",
            document_urls=["https://docs/a.pdf", " ", ""],
        )
        assert w.retailer is None
        assert w.currency == "EUR"
        assert w.document_urls == ["https://docs/a.pdf"]

    def test_expiration_before_purchase(self, svc):
        with pytest.raises(ValidationError) as exc:
            _add(svc, purchase_date="2024-05-01", expiration_date="2024-04-01")
        assert "expirationDate" in exc.value.errors

    def test_requires_product_and_category(self, svc):
        with pytest.raises(ValidationError):
            _add(svc, product_name="")
        with pytest.raises(ValidationError):
            _add(svc, category="Electronics")

    def test_list_expired_filter(self, svc):
        _add(svc, product_name="Old", expiration_date="2024-01-01")
        _add(svc, product_name="Today", expiration_date="2024-03-10")
        _add(svc, product_name="New", expiration_date="2026-01-01")

        items, total, _, _ = svc.list_warranties("u1", expired=True, today=TODAY)
        assert [w.product_name for w in items] == ["Old"]
        items, total, _, _ = svc.list_warranties("u1", expired=False, today=TODAY)
        assert [w.product_name for w in items] == ["Today", "New"]
        _, total, _, _ = svc.list_warranties("u1", today=TODAY)
        assert total == 3

    def test_list_by_category(self, svc):
        _add(svc, product_name="Desk", category="Furniture")
        _add(svc, product_name="Printer")
        items, _, _, _ = svc.list_warranties("u1", category="furniture")
        assert [w.product_name for w in items] == ["Desk"]

    def test_expiring_soon(self, svc):
        _add(svc, product_name="Soon", expiration_date="2024-03-25")
        _add(svc, product_name="Later", expiration_date="2024-06-01")
        _add(svc, product_name="Gone", expiration_date="2024-03-01")
        soon = svc.get_expiring_soon("u1", today=TODAY)
        assert [w.product_name for w in soon] == ["Soon"]

    def test_update(self, svc):
        w = _add(svc, purchase_date="2024-01-01")
        updated = svc.update_warranty("u1", w.id, document_urls=["https://a", "https://b"], notes="Keep box")
        assert updated.document_urls == ["https://a", "https://b"]
        assert updated.notes == "Keep box"
        with pytest.raises(ValidationError):
            svc.update_warranty("u1", w.id, expiration_date="2023-12-31")

    def test_owner_scoped(self, svc):
        w = _add(svc)
        with pytest.raises(NotFoundError):
            svc.get_warranty("u2", w.id)
        with pytest.raises(NotFoundError):
            svc.delete_warranty("u2", w.id)
        svc.delete_warranty("u1", w.id)
        with pytest.raises(NotFoundError):
            svc.get_warranty("u1", w.id)


def test_warranty_to_api(svc):
    w = _add(svc, expiration_date="2024-03-20", purchase_price_cents=5000)
    data = warranty_to_api(w, TODAY)
    assert data["status"] == "Expiring Soon"
    assert data["daysUntilExpiry"] == 10
    assert data["purchasePrice"] == 50.0
    assert data["productName"] == "Laptop"
