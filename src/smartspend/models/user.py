"""User model and repository."""

from __future__ import annotations

import json
from typing import Any, ClassVar

from pydantic import BaseModel, Field

from smartspend.core.exceptions import NotFoundError
from smartspend.models.base import BaseRepository, SmartSpendModel


class Preferences(BaseModel):
    currency: str = "USD"
    reminder_days_before: int = 3
    theme: str = "light"


class User(SmartSpendModel):
    """An account that owns bills, expenses and warranties."""

    name: str
    email: str
    password_hash: str | None = None
    google_id: str | None = None
    avatar: str | None = None
    preferences: Preferences = Field(default_factory=Preferences)

    def to_row(self) -> dict[str, Any]:
        data = self.model_dump()
        data["preferences"] = json.dumps(data["preferences"])
        return data

    @classmethod
    def from_row(cls, row: Any) -> "User":
        d = {k: row[k] for k in row.keys()}
        d["preferences"] = json.loads(d.get("preferences") or "{}")
        return cls(**d)

    def to_api(self) -> dict[str, Any]:
        """Public view of the account; never includes the password hash."""
        return {
            "id": self.id,
            "_id": self.id,
            "name": self.name,
            "email": self.email,
            "avatar": self.avatar,
            "preferences": {
                "currency": self.preferences.currency,
                "reminderDaysBefore": self.preferences.reminder_days_before,
                "theme": self.preferences.theme,
            },
            "createdAt": self.created_at,
        }


class UserRepository(BaseRepository):
    table: ClassVar[str] = "users"
    model_class: ClassVar[type[SmartSpendModel]] = User  # type: ignore[assignment]

    def find_by_email(self, email: str) -> User | None:
        row = self.db.fetchone("SELECT * FROM users WHERE email = ?", (email.strip().lower(),))
        return User.from_row(row) if row else None

    def find_by_google_id(self, google_id: str) -> User | None:
        row = self.db.fetchone("SELECT * FROM users WHERE google_id = ?", (google_id,))
        return User.from_row(row) if row else None

    def get_by_email(self, email: str) -> User:
        user = self.find_by_email(email)
        if user is None:
            raise NotFoundError(f"User not found: {email}")
        return user

    def list_all(self) -> list[User]:
        rows = self.db.fetchall("SELECT * FROM users ORDER BY created_at")
        return [User.from_row(r) for r in rows]
