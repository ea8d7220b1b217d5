"""Account routes: register, sign-in, profile and avatar."""

from __future__ import annotations

from pathlib import Path

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import create_access_token, jwt_required

from smartspend.api.context import current_user_id, get_db, json_body
from smartspend.api.schemas import CurrencyIn, GoogleIn, LoginIn, ProfileIn, RegisterIn
from smartspend.core.exceptions import AuthError
from smartspend.models.user import User
from smartspend.services.auth_service import AuthService

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _service() -> AuthService:
    return AuthService(
        get_db(),
        upload_dir=Path(current_app.config["SMARTSPEND_UPLOAD_DIR"]),
        google_client_id=current_app.config.get("GOOGLE_CLIENT_ID", ""),
    )


def _issue(user: User):
    token = create_access_token(identity=user.id, additional_claims={"email": user.email})
    return {"token": token, "user": user.to_api()}


@bp.post("/register")
def register():
    body = RegisterIn.model_validate(json_body())
    user = _service().register(body.name, body.email, body.password)
    return jsonify(_issue(user)), 201


@bp.post("/login")
def login():
    body = LoginIn.model_validate(json_body())
    try:
        user = _service().login(body.email, body.password)
    except AuthError as e:
        return jsonify(message=str(e)), 400
    return jsonify(_issue(user))


@bp.post("/google")
def google():
    body = GoogleIn.model_validate(json_body())
    user = _service().google_login(body.token)
    return jsonify(_issue(user))


@bp.get("/me")
@jwt_required()
def me():
    return jsonify(_service().get_user(current_user_id()).to_api())


@bp.put("/profile")
@jwt_required()
def update_profile():
    """Accepts JSON, or multipart form fields with an optional ``avatar`` file."""
    service = _service()
    user_id = current_user_id()

    if request.mimetype == "multipart/form-data":
        body = ProfileIn.model_validate(request.form.to_dict())
        upload = request.files.get("avatar")
        if upload is not None and upload.filename:
            service.set_avatar(user_id, upload.filename, upload.read())
    else:
        body = ProfileIn.model_validate(json_body())

    prefs = body.preferences.model_dump(exclude_none=True) if body.preferences else None
    user = service.update_profile(user_id, name=body.name, email=body.email, preferences=prefs)
    return jsonify(user=user.to_api())


@bp.delete("/profile/avatar")
@jwt_required()
def delete_avatar():
    user = _service().remove_avatar(current_user_id())
    return jsonify(user=user.to_api())


@bp.put("/currency")
@jwt_required()
def update_currency():
    body = CurrencyIn.model_validate(json_body())
    user = _service().update_currency(current_user_id(), body.currency)
    return jsonify(user=user.to_api())


@bp.delete("/profile")
@jwt_required()
def delete_account():
    _service().delete_user(current_user_id())
    return jsonify(message="Account deleted")
