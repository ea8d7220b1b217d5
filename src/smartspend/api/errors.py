"""Map exceptions to JSON error responses."""

from __future__ import annotations

import logging

import pydantic
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from smartspend.core.exceptions import AuthError, DuplicateError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _field_errors(exc: pydantic.ValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "body"
        errors.setdefault(field, err["msg"])
    return errors


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def validation_error(e: ValidationError):
        return jsonify(message=e.message, errors=e.errors), 400

    @app.errorhandler(DuplicateError)
    def duplicate(e: DuplicateError):
        return jsonify(message=str(e), errors={}), 400

    @app.errorhandler(pydantic.ValidationError)
    def invalid_body(e: pydantic.ValidationError):
        return jsonify(message="Validation failed", errors=_field_errors(e)), 400

    @app.errorhandler(AuthError)
    def unauthorized(e: AuthError):
        return jsonify(message=str(e)), 401

    @app.errorhandler(NotFoundError)
    def not_found(e: NotFoundError):
        return jsonify(message=str(e)), 404

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        return jsonify(message=e.description), e.code

    @app.errorhandler(Exception)
    def server_error(e: Exception):
        logger.exception("Unhandled error: %s", e)
        return jsonify(message="Server error"), 500
