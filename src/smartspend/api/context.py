"""Per-request helpers: database handle, current user, query-string parsing."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any

from flask import current_app, g, request
from flask_jwt_extended import get_jwt_identity

from smartspend.core.database import DatabaseConnection
from smartspend.core.exceptions import ValidationError

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def get_db() -> DatabaseConnection:
    """Open (once per request) and return the database connection."""
    if "db" not in g:
        g.db = DatabaseConnection(db_path=Path(current_app.config["SMARTSPEND_DB_PATH"]))
        g.db.connect()
    return g.db


def close_db(exc: BaseException | None = None) -> None:
    db = g.pop("db", None)
    if db is not None:
        db.close()


def current_user_id() -> str:
    """Identity of the bearer token; only call inside ``@jwt_required()`` views."""
    return str(get_jwt_identity())


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return data


def arg_bool(name: str) -> bool | None:
    """Read a true/false query parameter; absent means ``None``."""
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValidationError(f"Invalid value for {name}.", {name: "Must be true or false"})


def arg_int(name: str, minimum: int | None = None, maximum: int | None = None) -> int | None:
    """Read an integer query parameter; absent means ``None``."""
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"Invalid value for {name}.", {name: "Must be an integer"}) from None
    if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
        bounds = f"between {minimum} and {maximum}" if minimum is not None and maximum is not None else (
            f"at least {minimum}" if minimum is not None else f"at most {maximum}"
        )
        raise ValidationError(f"Invalid value for {name}.", {name: f"Must be {bounds}"})
    return value


def pagination(total: int, page: int, limit: int) -> dict[str, int]:
    return {"total": total, "page": page, "limit": limit, "pages": math.ceil(total / limit) if limit else 0}
