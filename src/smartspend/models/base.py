"""Base model and repository classes for SmartSpend."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, ClassVar

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from smartspend.core.database import DatabaseConnection
from smartspend.core.exceptions import NotFoundError


def new_id() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


def now_iso() -> str:
    """Return current UTC datetime as ISO string."""
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat()


def cents_to_amount(cents: int | None) -> float | None:
    return None if cents is None else cents / 100


class SmartSpendModel(BaseModel):
    """Base for all SmartSpend Pydantic models."""

    id: str = Field(default_factory=new_id)
    created_at: str = Field(default_factory=now_iso)
    updated_at: str = Field(default_factory=now_iso)

    def to_row(self) -> dict[str, Any]:
        """Convert model to a flat dict suitable for DB insertion."""
        return self.model_dump()

    @classmethod
    def from_row(cls, row: Any) -> "SmartSpendModel":
        """Create model from a sqlite3.Row or dict."""
        if hasattr(row, "keys"):
            return cls(**{k: row[k] for k in row.keys()})
        return cls(**row)

    def to_api(self) -> dict[str, Any]:
        """Serialize for the JSON API: camelCase keys plus a ``_id`` mirror."""
        data = {to_camel(k): v for k, v in self.model_dump().items()}
        data["_id"] = self.id
        return data


class BaseRepository:
    """Generic CRUD repository backed by SQLite.

    Every user-owned table has a ``user_id`` column; the ``*_owned`` helpers
    scope reads and writes to one owner and report a foreign record exactly
    like a missing one.
    """

    table: ClassVar[str] = ""
    model_class: ClassVar[type[SmartSpendModel]] = SmartSpendModel

    def __init__(self, db: DatabaseConnection) -> None:
        self.db = db

    @property
    def entity_name(self) -> str:
        return self.model_class.__name__

    def insert(self, model: SmartSpendModel) -> SmartSpendModel:
        """Insert a new record."""
        data = model.to_row()
        cols = ", ".join(data.keys())
        placeholders = ", ".join(f":{k}" for k in data.keys())
        self.db.execute(f"INSERT INTO {self.table} ({cols}) VALUES ({placeholders})", data)
        self.db.commit()
        return model

    def get(self, entity_id: str) -> SmartSpendModel:
        """Fetch a single record by ID."""
        row = self.db.fetchone(f"SELECT * FROM {self.table} WHERE id = ?", (entity_id,))
        if row is None:
            raise NotFoundError(f"{self.entity_name} not found")
        return self.model_class.from_row(row)

    def update(self, entity_id: str, **updates: Any) -> SmartSpendModel:
        """Update specific fields on a record."""
        updates["updated_at"] = now_iso()
        set_clause = ", ".join(f"{k} = :{k}" for k in updates.keys())
        updates["_id"] = entity_id
        self.db.execute(
            f"UPDATE {self.table} SET {set_clause} WHERE id = :_id",
            updates,
        )
        self.db.commit()
        return self.get(entity_id)

    def delete(self, entity_id: str) -> None:
        """Delete a record by ID (hard delete)."""
        self.db.execute(f"DELETE FROM {self.table} WHERE id = ?", (entity_id,))
        self.db.commit()

    def count(self, where: str = "", params: tuple = ()) -> int:
        """Count records with optional WHERE clause."""
        sql = f"SELECT COUNT(*) as cnt FROM {self.table}"
        if where:
            sql += f" WHERE {where}"
        row = self.db.fetchone(sql, params)
        return row["cnt"] if row else 0

    # ── Owner-scoped access ──────────────────────────────────────

    def get_owned(self, user_id: str, entity_id: str) -> SmartSpendModel:
        """Fetch a record only if it belongs to ``user_id``."""
        row = self.db.fetchone(
            f"SELECT * FROM {self.table} WHERE id = ? AND user_id = ?",
            (entity_id, user_id),
        )
        if row is None:
            raise NotFoundError(f"{self.entity_name} not found")
        return self.model_class.from_row(row)

    def list_owned(
        self,
        user_id: str,
        where: str = "",
        params: tuple = (),
        order_by: str = "created_at DESC",
        limit: int | None = None,
        offset: int = 0,
    ) -> list[SmartSpendModel]:
        """List a user's records with an optional extra WHERE fragment."""
        sql = f"SELECT * FROM {self.table} WHERE user_id = ?"
        if where:
            sql += f" AND {where}"
        sql += f" ORDER BY {order_by}"
        all_params: tuple = (user_id, *params)
        if limit is not None:
            sql += " LIMIT ? OFFSET ?"
            all_params = (*all_params, limit, offset)
        rows = self.db.fetchall(sql, all_params)
        return [self.model_class.from_row(r) for r in rows]

    def count_owned(self, user_id: str, where: str = "", params: tuple = ()) -> int:
        clause = "user_id = ?"
        if where:
            clause += f" AND {where}"
        return self.count(clause, (user_id, *params))

    def update_owned(self, user_id: str, entity_id: str, **updates: Any) -> SmartSpendModel:
        self.get_owned(user_id, entity_id)
        return self.update(entity_id, **updates)

    def delete_owned(self, user_id: str, entity_id: str) -> None:
        self.get_owned(user_id, entity_id)
        self.delete(entity_id)

    def delete_all_for_user(self, user_id: str) -> int:
        """Remove every record owned by a user. Returns the number removed."""
        cursor = self.db.execute(f"DELETE FROM {self.table} WHERE user_id = ?", (user_id,))
        self.db.commit()
        return cursor.rowcount
