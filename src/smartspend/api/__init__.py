"""Flask application factory for the SmartSpend JSON API."""

from __future__ import annotations

import logging
import secrets
import time
from datetime import timedelta
from pathlib import Path
from typing import Any

from flask import Flask, g, jsonify, request, send_from_directory

from smartspend.api.context import close_db
from smartspend.api.errors import register_error_handlers
from smartspend.api.extensions import cors, jwt
from smartspend.core.config import get_data_dir, get_upload_dir, load_config
from smartspend.core.database import DB_FILENAME, DatabaseConnection
from smartspend.core.log import configure_logging
from smartspend.core.migrations import initialize_database
from smartspend.services.status import DUE_SOON_DAYS

logger = logging.getLogger(__name__)
access_log = logging.getLogger("smartspend.access")


def create_app(config_overrides: dict[str, Any] | None = None) -> Flask:
    """Build the app from the TOML config; ``config_overrides`` win (used by tests)."""
    config = load_config()
    configure_logging(config["general"].get("log_level", "INFO"))

    app = Flask(__name__)
    auth = config["auth"]
    reminders = config["reminders"]

    secret = auth.get("jwt_secret") or ""
    if not secret:
        secret = secrets.token_hex(32)
        logger.warning("No JWT secret configured; tokens will not survive a restart")

    app.config.update(
        JWT_SECRET_KEY=secret,
        JWT_ACCESS_TOKEN_EXPIRES=timedelta(days=int(auth.get("token_expiry_days", 7))),
        GOOGLE_CLIENT_ID=auth.get("google_client_id", ""),
        SMARTSPEND_REMINDER_DAYS=int(reminders.get("bill_days", 7)),
        SMARTSPEND_WARRANTY_DAYS=int(reminders.get("warranty_days", 30)),
        SMARTSPEND_DUE_SOON_DAYS=int(reminders.get("due_soon_days", DUE_SOON_DAYS)),
        CORS_ORIGINS=config["server"].get("cors_origins", []),
        MAX_CONTENT_LENGTH=6 * 1024 * 1024,
    )
    if not config_overrides or "SMARTSPEND_DB_PATH" not in config_overrides:
        app.config["SMARTSPEND_DB_PATH"] = str(get_data_dir(config) / DB_FILENAME)
    if not config_overrides or "SMARTSPEND_UPLOAD_DIR" not in config_overrides:
        app.config["SMARTSPEND_UPLOAD_DIR"] = str(get_upload_dir(config))
    if config_overrides:
        app.config.update(config_overrides)

    db = DatabaseConnection(db_path=Path(app.config["SMARTSPEND_DB_PATH"]))
    db.connect()
    initialize_database(db)
    db.close()

    jwt.init_app(app)
    cors.init_app(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})
    register_error_handlers(app)
    app.teardown_appcontext(close_db)

    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_request(response):
        started = g.get("request_started")
        elapsed_ms = (time.perf_counter() - started) * 1000 if started is not None else 0.0
        access_log.info(
            "%s %s %s %.1fms %s",
            request.method, request.full_path.rstrip("?"), response.status_code, elapsed_ms, request.remote_addr,
        )
        return response

    from smartspend.api.routes import auth as auth_routes
    from smartspend.api.routes import bills, dashboard, expenses, warranties

    for module in (auth_routes, bills, expenses, warranties, dashboard):
        app.register_blueprint(module.bp)

    @app.get("/")
    def health():
        return jsonify(message="SmartSpend API is running")

    @app.get("/uploads/avatars/<path:filename>")
    def avatar(filename: str):
        return send_from_directory(app.config["SMARTSPEND_UPLOAD_DIR"], filename)

    logger.info("SmartSpend API ready (db=%s)", app.config["SMARTSPEND_DB_PATH"])
    return app
