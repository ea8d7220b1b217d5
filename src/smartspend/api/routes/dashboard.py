"""Dashboard summary route."""

from __future__ import annotations

from datetime import date

from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import jwt_required

from smartspend.api.context import current_user_id, get_db
from smartspend.services.summary_service import SummaryService
from smartspend.services.warranty_service import warranty_to_api

bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@bp.get("")
@jwt_required()
def dashboard():
    today = date.today()
    svc = SummaryService(get_db(), due_soon_days=current_app.config["SMARTSPEND_DUE_SOON_DAYS"])
    data = svc.get_dashboard(
        current_user_id(),
        today=today,
        bill_days=current_app.config["SMARTSPEND_REMINDER_DAYS"],
        warranty_days=current_app.config["SMARTSPEND_WARRANTY_DAYS"],
    )
    bills = data["bills"]
    return jsonify(
        year=data["year"],
        totalExpenses=data["total_expenses_cents"] / 100,
        monthlyExpenses=[{"month": m["month"], "total": m["total_cents"] / 100} for m in data["monthly_expenses"]],
        expensesByCategory=[
            {"category": c["category"], "total": c["total_cents"] / 100} for c in data["expense_categories"]
        ],
        bills={
            "total": bills["total_bills"],
            "unpaid": bills["unpaid_count"],
            "unpaidAmount": bills["unpaid_total_cents"] / 100,
            "overdue": bills["overdue_count"],
            "overdueAmount": bills["overdue_total_cents"] / 100,
            "recurring": bills["recurring_count"],
            "dueSoon": bills["due_soon"],
        },
        overdueCount=bills["overdue_count"],
        upcomingBills=[b.to_api() for b in data["upcoming_bills"]],
        expiringWarranties=[warranty_to_api(w, today) for w in data["expiring_warranties"]],
    )
