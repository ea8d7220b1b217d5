"""Warranty routes; every warranty is returned with its derived status."""

from __future__ import annotations

from datetime import date

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from smartspend.api.context import arg_bool, arg_int, current_user_id, get_db, json_body, pagination
from smartspend.api.schemas import WarrantyCreate, WarrantyUpdate
from smartspend.services.warranty_service import WarrantyService, warranty_to_api

bp = Blueprint("warranties", __name__, url_prefix="/api/warranties")


@bp.get("")
@jwt_required()
def list_warranties():
    today = date.today()
    items, total, page, limit = WarrantyService(get_db()).list_warranties(
        current_user_id(),
        category=request.args.get("category"),
        expired=arg_bool("expired"),
        limit=arg_int("limit"),
        page=arg_int("page"),
        today=today,
    )
    return jsonify(
        warranties=[warranty_to_api(w, today) for w in items],
        pagination=pagination(total, page, limit),
    )


@bp.post("")
@jwt_required()
def create_warranty():
    body = WarrantyCreate.model_validate(json_body())
    warranty = WarrantyService(get_db()).add_warranty(current_user_id(), **body.service_kwargs())
    return jsonify(warranty_to_api(warranty, date.today())), 201


@bp.get("/expiring/soon")
@jwt_required()
def expiring_soon():
    today = date.today()
    days = current_app.config["SMARTSPEND_WARRANTY_DAYS"]
    items = WarrantyService(get_db()).get_expiring_soon(current_user_id(), today=today, within_days=days)
    return jsonify([warranty_to_api(w, today) for w in items])


@bp.get("/<warranty_id>")
@jwt_required()
def get_warranty(warranty_id: str):
    warranty = WarrantyService(get_db()).get_warranty(current_user_id(), warranty_id)
    return jsonify(warranty_to_api(warranty, date.today()))


@bp.put("/<warranty_id>")
@jwt_required()
def update_warranty(warranty_id: str):
    body = WarrantyUpdate.model_validate(json_body())
    warranty = WarrantyService(get_db()).update_warranty(
        current_user_id(), warranty_id, **body.service_kwargs(partial=True)
    )
    return jsonify(warranty_to_api(warranty, date.today()))


@bp.delete("/<warranty_id>")
@jwt_required()
def delete_warranty(warranty_id: str):
    WarrantyService(get_db()).delete_warranty(current_user_id(), warranty_id)
    return jsonify(message="Warranty removed")
