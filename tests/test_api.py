"""Tests for the JSON API using Flask's test client."""

import io
import logging
import tempfile
from datetime import date, timedelta
from pathlib import Path
from unittest.mock import patch

import pytest

from smartspend.api import create_app


@pytest.fixture
def app(monkeypatch):
    with tempfile.TemporaryDirectory() as d:
        tmp = Path(d)
        monkeypatch.setenv("SMARTSPEND_CONFIG_DIR", str(tmp / "config"))
        app = create_app({
            "TESTING": True,
            "JWT_SECRET_KEY": "test-secret-key-with-enough-length-for-hs256",
            "SMARTSPEND_DB_PATH": str(tmp / "api.db"),
            "SMARTSPEND_UPLOAD_DIR": str(tmp / "uploads"),
            "GOOGLE_CLIENT_ID": "client-123",
        })
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


def _register(client, email="ann@example.com", name="Ann"):
    resp = client.post("/api/auth/register", json={"name": name, "email": email, "password": "secret1"})
    assert resp.status_code == 201
    return resp.get_json()


@pytest.fixture
def auth(client):
    token = _register(client)["token"]
    return {"Authorization": f"Bearer {token}"}


def _bill_body(**overrides):
    body = {"name": "Electric", "amount": 89.5, "dueDate": "2024-03-15", "category": "Electricity"}
    body.update(overrides)
    return body


class TestHealthAndAuth:
    def test_health(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert "running" in resp.get_json()["message"]

    def test_register_returns_token_and_user(self, client):
        data = _register(client)
        assert data["token"]
        assert data["user"]["email"] == "ann@example.com"
        assert data["user"]["_id"] == data["user"]["id"]
        assert "passwordHash" not in data["user"]

    def test_register_duplicate(self, client):
        _register(client)
        resp = client.post("/api/auth/register", json={"name": "A", "email": "ann@example.com", "password": "secret1"})
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "User already exists"

    def test_register_validation(self, client):
        resp = client.post("/api/auth/register", json={"name": "A", "email": "ann@example.com", "password": "1"})
        assert resp.status_code == 400
        assert "password" in resp.get_json()["errors"]

    def test_login(self, client):
        _register(client)
        ok = client.post("/api/auth/login", json={"email": "ann@example.com", "password": "secret1"})
        assert ok.status_code == 200
        assert ok.get_json()["token"]
        bad = client.post("/api/auth/login", json={"email": "ann@example.com", "password": "nope"})
        assert bad.status_code == 400
        assert bad.get_json()["message"] == "Invalid credentials"

    def test_google(self, client):
        payload = {"sub": "g-1", "email": "g@example.com", "name": "Gee"}
        with patch("smartspend.services.auth_service.verify_google_token", return_value=payload) as verify:
            resp = client.post("/api/auth/google", json={"token": "id-token"})
        assert resp.status_code == 200
        assert resp.get_json()["user"]["email"] == "g@example.com"
        verify.assert_called_once_with("id-token", "client-123")

    def test_google_invalid_token(self, client):
        with patch("smartspend.core.security.requests.get") as get:
            get.return_value.status_code = 400
            resp = client.post("/api/auth/google", json={"token": "bad"})
        assert resp.status_code == 401

    def test_me_requires_token(self, client):
        assert client.get("/api/auth/me").status_code == 401
        resp = client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
        assert resp.status_code == 401

    def test_me(self, client, auth):
        resp = client.get("/api/auth/me", headers=auth)
        assert resp.get_json()["name"] == "Ann"

    def test_profile_json_and_currency(self, client, auth):
        resp = client.put("/api/auth/profile", headers=auth, json={"name": "Ann B", "preferences": {"theme": "dark"}})
        user = resp.get_json()["user"]
        assert user["name"] == "Ann B"
        assert user["preferences"]["theme"] == "dark"

        resp = client.put("/api/auth/currency", headers=auth, json={"currency": "gbp"})
        assert resp.get_json()["user"]["preferences"]["currency"] == "GBP"

    def test_profile_avatar_upload_and_delete(self, client, auth, app):
        resp = client.put(
            "/api/auth/profile",
            headers=auth,
            data={"name": "Ann", "avatar": (io.BytesIO(b"fake-png"), "me.png")},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 200
        avatar = resp.get_json()["user"]["avatar"]
        assert avatar.startswith("/uploads/avatars/")

        served = client.get(avatar)
        assert served.status_code == 200
        assert served.data == b"fake-png"

        resp = client.delete("/api/auth/profile/avatar", headers=auth)
        assert resp.get_json()["user"]["avatar"] is None

    def test_avatar_rejects_text_file(self, client, auth):
        resp = client.put(
            "/api/auth/profile",
            headers=auth,
            data={"avatar": (io.BytesIO(b"hello"), "notes.txt")},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400

    def test_delete_account(self, client, auth):
        client.post("/api/bills", headers=auth, json=_bill_body())
        resp = client.delete("/api/auth/profile", headers=auth)
        assert resp.status_code == 200
        assert client.get("/api/auth/me", headers=auth).status_code == 404


class TestBillsApi:
    def test_create_and_get(self, client, auth):
        resp = client.post("/api/bills", headers=auth, json=_bill_body(notes="  "))
        assert resp.status_code == 201
        bill = resp.get_json()
        assert bill["amount"] == 89.5
        assert bill["dueDate"] == "2024-03-15"
        assert bill["isPaid"] is False
        assert bill["notes"] is None

        fetched = client.get(f"/api/bills/{bill['_id']}", headers=auth).get_json()
        assert fetched["name"] == "Electric"

    def test_create_validation(self, client, auth):
        resp = client.post("/api/bills", headers=auth, json=_bill_body(category="Snacks"))
        assert resp.status_code == 400
        assert "category" in resp.get_json()["errors"]

        resp = client.post("/api/bills", headers=auth, json={"name": "X"})
        assert resp.status_code == 400
        errors = resp.get_json()["errors"]
        assert "amount" in errors and "dueDate" in errors

    def test_list_with_pagination(self, client, auth):
        for i in range(3):
            client.post("/api/bills", headers=auth, json=_bill_body(name=f"B{i}", dueDate=f"2024-03-1{i}"))
        resp = client.get("/api/bills?limit=2&page=1", headers=auth)
        data = resp.get_json()
        assert [b["name"] for b in data["bills"]] == ["B0", "B1"]
        assert data["pagination"] == {"total": 3, "page": 1, "limit": 2, "pages": 2}

    def test_bad_query_param(self, client, auth):
        assert client.get("/api/bills?isPaid=maybe", headers=auth).status_code == 400

    def test_update_and_delete(self, client, auth):
        bill = client.post("/api/bills", headers=auth, json=_bill_body()).get_json()
        resp = client.put(f"/api/bills/{bill['_id']}", headers=auth, json={"amount": 100})
        assert resp.get_json()["amount"] == 100.0
        assert resp.get_json()["name"] == "Electric"

        assert client.delete(f"/api/bills/{bill['_id']}", headers=auth).status_code == 200
        assert client.get(f"/api/bills/{bill['_id']}", headers=auth).status_code == 404

    def test_other_users_bill_is_not_found(self, client, auth):
        bill = client.post("/api/bills", headers=auth, json=_bill_body()).get_json()
        other = _register(client, email="bob@example.com", name="Bob")["token"]
        headers = {"Authorization": f"Bearer {other}"}
        assert client.get(f"/api/bills/{bill['_id']}", headers=headers).status_code == 404
        assert client.put(f"/api/bills/{bill['_id']}/pay", headers=headers).status_code == 404
        assert client.delete(f"/api/bills/{bill['_id']}", headers=headers).status_code == 404

    def test_pay_recurring(self, client, auth):
        bill = client.post(
            "/api/bills",
            headers=auth,
            json=_bill_body(dueDate="2024-01-15", isRecurring=True, recurringPeriod="Monthly"),
        ).get_json()
        resp = client.put(f"/api/bills/{bill['_id']}/pay", headers=auth)
        data = resp.get_json()
        assert data["isPaid"] is True
        assert data["nextBill"]["dueDate"] == "2024-02-15"
        assert data["nextBill"]["reminderDate"] == "2024-02-12"
        assert data["nextBill"]["isPaid"] is False

    def test_pay_one_off(self, client, auth):
        bill = client.post("/api/bills", headers=auth, json=_bill_body()).get_json()
        data = client.put(f"/api/bills/{bill['_id']}/pay", headers=auth).get_json()
        assert data["isPaid"] is True
        assert "nextBill" not in data

    def test_view(self, client, auth):
        today = date.today()
        client.post("/api/bills", headers=auth, json=_bill_body(name="Late", amount=10, dueDate=(today - timedelta(days=5)).isoformat()))
        client.post("/api/bills", headers=auth, json=_bill_body(name="Later", amount=20, dueDate=(today + timedelta(days=20)).isoformat()))
        resp = client.get("/api/bills/view?status=unpaid&sortBy=amount&sortOrder=desc", headers=auth)
        data = resp.get_json()
        assert [b["name"] for b in data["bills"]] == ["Later", "Late"]
        assert data["totalAmount"] == 30.0
        assert data["overdueCount"] == 1
        assert data["bills"][1]["status"] == "Overdue"

    def test_view_rejects_bad_sort(self, client, auth):
        assert client.get("/api/bills/view?sortBy=colour", headers=auth).status_code == 400

    def test_reminders(self, client, auth):
        today = date.today()
        client.post("/api/bills", headers=auth, json=_bill_body(name="Soon", dueDate=(today + timedelta(days=2)).isoformat()))
        client.post("/api/bills", headers=auth, json=_bill_body(name="Far", dueDate=(today + timedelta(days=30)).isoformat()))
        data = client.get("/api/bills/upcoming/reminders", headers=auth).get_json()
        assert [b["name"] for b in data] == ["Soon"]

    def test_non_finite_and_oversized_amounts(self, client, auth):
        raw = '{"name": "Electric", "amount": Infinity, "dueDate": "2024-03-15", "category": "Electricity"}'
        resp = client.post("/api/bills", headers=auth, data=raw, content_type="application/json")
        assert resp.status_code == 400
        assert "amount" in resp.get_json()["errors"]

        resp = client.post("/api/bills", headers=auth, json=_bill_body(amount=1e17))
        assert resp.status_code == 400
        assert "amount" in resp.get_json()["errors"]

        bill = client.post("/api/bills", headers=auth, json=_bill_body()).get_json()
        resp = client.put(f"/api/bills/{bill['_id']}", headers=auth, json={"amount": 1e17})
        assert resp.status_code == 400
        assert client.get(f"/api/bills/{bill['_id']}", headers=auth).get_json()["amount"] == 89.5

    def test_huge_page_number_is_an_empty_page(self, client, auth):
        client.post("/api/bills", headers=auth, json=_bill_body())
        resp = client.get("/api/bills?page=100000000000000000000", headers=auth)
        assert resp.status_code == 200
        assert resp.get_json()["bills"] == []

    @pytest.mark.parametrize("flag", ["isPaid", "isRecurring"])
    def test_null_flag_update_is_rejected(self, client, auth, flag):
        bill = client.post(
            "/api/bills", headers=auth, json=_bill_body(isPaid=True, isRecurring=True, recurringPeriod="Monthly")
        ).get_json()
        resp = client.put(f"/api/bills/{bill['_id']}", headers=auth, json={flag: None})
        assert resp.status_code == 400
        assert flag in resp.get_json()["errors"]
        assert client.get(f"/api/bills/{bill['_id']}", headers=auth).get_json()[flag] is True


class TestExpensesApi:
    def test_crud_and_summaries(self, client, auth):
        year = date.today().year
        body = {"amount": 12.5, "description": "Lunch", "category": "Dining Out", "date": f"{year}-01-05"}
        created = client.post("/api/expenses", headers=auth, json=body)
        assert created.status_code == 201
        expense = created.get_json()
        assert expense["paymentMethod"] == "Other"

        client.post("/api/expenses", headers=auth, json={**body, "amount": 50, "category": "Fuel"})
        listed = client.get("/api/expenses?category=Fuel", headers=auth).get_json()
        assert len(listed["expenses"]) == 1

        monthly = client.get(f"/api/expenses/summary/monthly?year={year}", headers=auth).get_json()
        assert len(monthly) == 12
        assert monthly[0] == {"month": 1, "total": 62.5}

        by_cat = client.get("/api/expenses/summary/category", headers=auth).get_json()
        assert by_cat[0] == {"category": "Fuel", "total": 50.0}

        updated = client.put(f"/api/expenses/{expense['_id']}", headers=auth, json={"paymentMethod": "Cash"})
        assert updated.get_json()["paymentMethod"] == "Cash"

        assert client.delete(f"/api/expenses/{expense['_id']}", headers=auth).status_code == 200
        assert client.get(f"/api/expenses/{expense['_id']}", headers=auth).status_code == 404

    def test_validation(self, client, auth):
        resp = client.post("/api/expenses", headers=auth, json={"amount": -1, "description": "x", "category": "Fuel"})
        assert resp.status_code == 400

    def test_nan_amount_and_bad_year(self, client, auth):
        raw = '{"amount": NaN, "description": "Lunch", "category": "Dining Out"}'
        resp = client.post("/api/expenses", headers=auth, data=raw, content_type="application/json")
        assert resp.status_code == 400
        assert "amount" in resp.get_json()["errors"]

        resp = client.get("/api/expenses/summary/monthly?year=100000000000000000000", headers=auth)
        assert resp.status_code == 400
        assert "year" in resp.get_json()["errors"]


class TestWarrantiesApi:
    def test_crud_with_status(self, client, auth):
        soon = (date.today() + timedelta(days=10)).isoformat()
        resp = client.post(
            "/api/warranties",
            headers=auth,
            json={"productName": "Drill", "expirationDate": soon, "category": "Power Tools", "purchasePrice": 99.99},
        )
        assert resp.status_code == 201
        w = resp.get_json()
        assert w["status"] == "Expiring Soon"
        assert w["daysUntilExpiry"] == 10
        assert w["purchasePrice"] == 99.99

        expiring = client.get("/api/warranties/expiring/soon", headers=auth).get_json()
        assert [x["productName"] for x in expiring] == ["Drill"]

        listed = client.get("/api/warranties?expired=false", headers=auth).get_json()
        assert listed["pagination"]["total"] == 1

        updated = client.put(f"/api/warranties/{w['_id']}", headers=auth, json={"retailer": "Hardware Co"})
        assert updated.get_json()["retailer"] == "Hardware Co"

        assert client.delete(f"/api/warranties/{w['_id']}", headers=auth).status_code == 200

    def test_expiration_before_purchase(self, client, auth):
        resp = client.post(
            "/api/warranties",
            headers=auth,
            json={"productName": "TV", "purchaseDate": "2024-05-01", "expirationDate": "2024-01-01", "category": "Furniture"},
        )
        assert resp.status_code == 400
        assert "expirationDate" in resp.get_json()["errors"]

    def test_oversized_purchase_price(self, client, auth):
        resp = client.post(
            "/api/warranties",
            headers=auth,
            json={"productName": "TV", "expirationDate": "2030-01-01", "category": "Furniture", "purchasePrice": 1e17},
        )
        assert resp.status_code == 400
        assert "purchasePrice" in resp.get_json()["errors"]


class TestDashboardApi:
    def test_dashboard(self, client, auth):
        today = date.today()
        client.post("/api/bills", headers=auth, json=_bill_body(name="Late", dueDate=(today - timedelta(days=3)).isoformat()))
        client.post("/api/expenses", headers=auth, json={"amount": 20, "description": "Taxi", "category": "Transportation"})
        data = client.get("/api/dashboard", headers=auth).get_json()
        assert data["year"] == today.year
        assert data["totalExpenses"] == 20.0
        assert data["overdueCount"] == 1
        assert data["bills"]["unpaid"] == 1
        assert data["expensesByCategory"] == [{"category": "Transportation", "total": 20.0}]
        assert len(data["monthlyExpenses"]) == 12


def test_unknown_route_is_json(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert "message" in resp.get_json()


class TestAppWiring:
    def test_due_soon_window_from_config_file(self, monkeypatch):
        from smartspend.core.config import update_config

        with tempfile.TemporaryDirectory() as d:
            tmp = Path(d)
            monkeypatch.setenv("SMARTSPEND_CONFIG_DIR", str(tmp / "config"))
            update_config(reminders={"due_soon_days": 10})
            app = create_app({
                "TESTING": True,
                "JWT_SECRET_KEY": "test-secret-key-with-enough-length-for-hs256",
                "SMARTSPEND_DB_PATH": str(tmp / "api.db"),
                "SMARTSPEND_UPLOAD_DIR": str(tmp / "uploads"),
            })
            assert app.config["SMARTSPEND_DUE_SOON_DAYS"] == 10

            client = app.test_client()
            headers = {"Authorization": f"Bearer {_register(client)['token']}"}
            due = (date.today() + timedelta(days=6)).isoformat()
            client.post("/api/bills", headers=headers, json=_bill_body(dueDate=due))

            view = client.get("/api/bills/view", headers=headers).get_json()
            assert view["bills"][0]["status"] == "Due Soon"
            assert client.get("/api/dashboard", headers=headers).get_json()["bills"]["dueSoon"] == 1

    def test_requests_are_logged(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="smartspend.access"):
            client.get("/")
            client.get("/api/bills")
        lines = [r.getMessage() for r in caplog.records if r.name == "smartspend.access"]
        assert lines[0].startswith("GET / 200 ")
        assert lines[1].startswith("GET /api/bills 401 ")
