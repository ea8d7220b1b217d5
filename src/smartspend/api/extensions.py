"""Flask extensions, created unbound and initialized in ``create_app``."""

from flask import jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager

jwt = JWTManager()
cors = CORS()


@jwt.unauthorized_loader
def _missing_token(reason: str):
    return jsonify(message="No token, authorization denied"), 401


@jwt.invalid_token_loader
def _invalid_token(reason: str):
    return jsonify(message="Token is not valid"), 401


@jwt.expired_token_loader
def _expired_token(jwt_header: dict, jwt_payload: dict):
    return jsonify(message="Token has expired"), 401
