"""Bill routes, including the pay action and the filtered list view."""

from __future__ import annotations

from datetime import date

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from smartspend.api.context import arg_bool, arg_int, current_user_id, get_db, json_body, pagination
from smartspend.api.schemas import BillCreate, BillUpdate
from smartspend.core.exceptions import ValidationError
from smartspend.services.bill_projection import BillFilter, BillSort
from smartspend.services.bill_service import BillService

bp = Blueprint("bills", __name__, url_prefix="/api/bills")

# Query-string names for the view sort keys
_SORT_PARAMS = {"dueDate": "due_date", "due_date": "due_date", "amount": "amount", "status": "status", "name": "name"}


@bp.get("")
@jwt_required()
def list_bills():
    result = BillService(get_db()).list_bills(
        current_user_id(),
        is_paid=arg_bool("isPaid"),
        upcoming=bool(arg_bool("upcoming")),
        limit=arg_int("limit"),
        page=arg_int("page"),
    )
    return jsonify(
        bills=[b.to_api() for b in result.bills],
        pagination=pagination(result.total, result.page, result.limit),
    )


@bp.post("")
@jwt_required()
def create_bill():
    body = BillCreate.model_validate(json_body())
    bill = BillService(get_db()).add_bill(current_user_id(), **body.service_kwargs())
    return jsonify(bill.to_api()), 201


@bp.get("/view")
@jwt_required()
def view_bills():
    args = request.args
    sort_by = args.get("sortBy", "dueDate")
    try:
        bill_filter = BillFilter(status=args.get("status", "all"), search=args.get("search", ""))
        sort = BillSort(key=_SORT_PARAMS.get(sort_by, sort_by), order=args.get("sortOrder", "asc"))
    except ValueError as e:
        raise ValidationError(str(e)) from e

    today = date.today()
    svc = BillService(get_db(), due_soon_days=current_app.config["SMARTSPEND_DUE_SOON_DAYS"])
    projection = svc.view(current_user_id(), bill_filter, sort, today=today)
    return jsonify(projection.to_api(today))


@bp.get("/upcoming/reminders")
@jwt_required()
def reminders():
    days = current_app.config["SMARTSPEND_REMINDER_DAYS"]
    bills = BillService(get_db()).get_reminders(current_user_id(), within_days=days)
    return jsonify([b.to_api() for b in bills])


@bp.get("/<bill_id>")
@jwt_required()
def get_bill(bill_id: str):
    return jsonify(BillService(get_db()).get_bill(current_user_id(), bill_id).to_api())


@bp.put("/<bill_id>")
@jwt_required()
def update_bill(bill_id: str):
    body = BillUpdate.model_validate(json_body())
    bill = BillService(get_db()).update_bill(current_user_id(), bill_id, **body.service_kwargs(partial=True))
    return jsonify(bill.to_api())


@bp.delete("/<bill_id>")
@jwt_required()
def delete_bill(bill_id: str):
    BillService(get_db()).delete_bill(current_user_id(), bill_id)
    return jsonify(message="Bill removed")


@bp.put("/<bill_id>/pay")
@jwt_required()
def pay_bill(bill_id: str):
    result = BillService(get_db()).pay_bill(current_user_id(), bill_id)
    data = result.bill.to_api()
    if result.next_bill is not None:
        data["nextBill"] = result.next_bill.to_api()
    return jsonify(data)
