"""Expense routes and spending summaries."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from smartspend.api.context import arg_int, current_user_id, get_db, json_body, pagination
from smartspend.api.schemas import ExpenseCreate, ExpenseUpdate
from smartspend.services.expense_service import ExpenseService

bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


def _kwargs(body: ExpenseCreate | ExpenseUpdate, partial: bool = False) -> dict:
    data = body.service_kwargs(partial=partial)
    if not partial:
        data["expense_date"] = data.pop("date")
    return data


@bp.get("")
@jwt_required()
def list_expenses():
    items, total, page, limit = ExpenseService(get_db()).list_expenses(
        current_user_id(),
        category=request.args.get("category"),
        start_date=request.args.get("startDate"),
        end_date=request.args.get("endDate"),
        limit=arg_int("limit"),
        page=arg_int("page"),
    )
    return jsonify(expenses=[e.to_api() for e in items], pagination=pagination(total, page, limit))


@bp.post("")
@jwt_required()
def create_expense():
    body = ExpenseCreate.model_validate(json_body())
    expense = ExpenseService(get_db()).add_expense(current_user_id(), **_kwargs(body))
    return jsonify(expense.to_api()), 201


@bp.get("/summary/monthly")
@jwt_required()
def monthly_summary():
    months = ExpenseService(get_db()).monthly_summary(current_user_id(), year=arg_int("year", 1, 9999))
    return jsonify([{"month": m["month"], "total": m["total_cents"] / 100} for m in months])


@bp.get("/summary/category")
@jwt_required()
def category_summary():
    rows = ExpenseService(get_db()).category_summary(
        current_user_id(),
        start_date=request.args.get("startDate"),
        end_date=request.args.get("endDate"),
    )
    return jsonify([{"category": r["category"], "total": r["total_cents"] / 100} for r in rows])


@bp.get("/<expense_id>")
@jwt_required()
def get_expense(expense_id: str):
    return jsonify(ExpenseService(get_db()).get_expense(current_user_id(), expense_id).to_api())


@bp.put("/<expense_id>")
@jwt_required()
def update_expense(expense_id: str):
    body = ExpenseUpdate.model_validate(json_body())
    expense = ExpenseService(get_db()).update_expense(
        current_user_id(), expense_id, **_kwargs(body, partial=True)
    )
    return jsonify(expense.to_api())


@bp.delete("/<expense_id>")
@jwt_required()
def delete_expense(expense_id: str):
    ExpenseService(get_db()).delete_expense(current_user_id(), expense_id)
    return jsonify(message="Expense removed")
