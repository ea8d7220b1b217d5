"""Accounts: registration, password and Google sign-in, profile upkeep."""

from __future__ import annotations

import json
import logging
import secrets
import time
from pathlib import Path
from typing import Any

from smartspend.core.database import DatabaseConnection
from smartspend.core.exceptions import AuthError, DuplicateError, NotFoundError, ValidationError
from smartspend.core.security import hash_password, verify_google_token, verify_password
from smartspend.models.bill import BillRepository
from smartspend.models.expense import ExpenseRepository
from smartspend.models.user import Preferences, User, UserRepository
from smartspend.models.warranty import WarrantyRepository
from smartspend.services.validators import require_text

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
AVATAR_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif"}
MAX_AVATAR_BYTES = 5 * 1024 * 1024
AVATAR_URL_PREFIX = "/uploads/avatars/"


def _normalize_email(email: str | None) -> str:
    email = (email or "").strip().lower()
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        raise ValidationError("A valid email is required.", {"email": "A valid email is required"})
    return email


class AuthService:
    """Account operations. Token issuing is left to the web layer."""

    def __init__(
        self,
        db: DatabaseConnection,
        upload_dir: Path | None = None,
        google_client_id: str = "",
    ) -> None:
        self.db = db
        self.users = UserRepository(db)
        self.upload_dir = upload_dir
        self.google_client_id = google_client_id

    def register(self, name: str, email: str, password: str) -> User:
        email = _normalize_email(email)
        name = require_text("name", name, "Name")
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                "Password is too short.",
                {"password": f"Password must be at least {MIN_PASSWORD_LENGTH} characters"},
            )
        if self.users.find_by_email(email) is not None:
            raise DuplicateError("User already exists")

        user = User(name=name, email=email, password_hash=hash_password(password))
        self.users.insert(user)
        logger.info("Registered user %s", user.id)
        return user

    def login(self, email: str, password: str) -> User:
        """Password sign-in. Unknown email and wrong password look the same."""
        user = self.users.find_by_email((email or "").strip().lower())
        if user is None or not verify_password(password or "", user.password_hash):
            raise AuthError("Invalid credentials")
        return user

    def google_login(self, id_token: str) -> User:
        """Sign in with a Google ID token, creating or linking the account."""
        payload = verify_google_token(id_token, self.google_client_id)
        google_id = payload["sub"]
        email = payload["email"].strip().lower()

        user = self.users.find_by_google_id(google_id) or self.users.find_by_email(email)
        if user is None:
            user = User(
                name=payload.get("name") or email.split("@")[0],
                email=email,
                google_id=google_id,
                avatar=payload.get("picture"),
            )
            self.users.insert(user)
            logger.info("Created user %s from Google sign-in", user.id)
            return user

        if not user.google_id:
            updates: dict[str, Any] = {"google_id": google_id}
            if payload.get("picture") and not user.avatar:
                updates["avatar"] = payload["picture"]
            user = self.users.update(user.id, **updates)  # type: ignore[assignment]
            logger.info("Linked Google account to user %s", user.id)
        return user

    def get_user(self, user_id: str) -> User:
        try:
            return self.users.get(user_id)  # type: ignore[return-value]
        except NotFoundError:
            raise NotFoundError("User not found") from None

    def update_profile(
        self,
        user_id: str,
        name: str | None = None,
        email: str | None = None,
        preferences: dict[str, Any] | None = None,
    ) -> User:
        """Update name/email and merge preference changes into the stored ones."""
        user = self.get_user(user_id)
        updates: dict[str, Any] = {}
        if name:
            updates["name"] = require_text("name", name, "Name")
        if email:
            email = _normalize_email(email)
            other = self.users.find_by_email(email)
            if other is not None and other.id != user.id:
                raise DuplicateError("Email is already in use")
            updates["email"] = email
        if preferences:
            merged = {**user.preferences.model_dump(), **preferences}
            try:
                prefs = Preferences(**merged)
            except ValueError as e:
                raise ValidationError("Invalid preferences.", {"preferences": str(e)}) from e
            updates["preferences"] = json.dumps(prefs.model_dump())
        if not updates:
            return user
        return self.users.update(user_id, **updates)  # type: ignore[return-value]

    def update_currency(self, user_id: str, currency: str) -> User:
        code = (currency or "").strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValidationError("Invalid currency.", {"currency": "Currency must be a 3-letter code"})
        return self.update_profile(user_id, preferences={"currency": code})

    def set_avatar(self, user_id: str, filename: str, data: bytes) -> User:
        """Store an uploaded avatar image, replacing (and deleting) the previous one."""
        if self.upload_dir is None:
            raise ValidationError("Avatar uploads are not configured.")
        ext = Path(filename or "").suffix.lower()
        if ext not in AVATAR_EXTENSIONS:
            raise ValidationError("Only image files are allowed!", {"avatar": "Only image files are allowed"})
        if len(data) > MAX_AVATAR_BYTES:
            raise ValidationError("File too large", {"avatar": "Avatar must be 5 MB or smaller"})

        user = self.get_user(user_id)
        stored = f"avatar-{int(time.time() * 1000)}-{secrets.token_hex(4)}{ext}"
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        (self.upload_dir / stored).write_bytes(data)
        self._remove_avatar_file(user.avatar)
        return self.users.update(user_id, avatar=AVATAR_URL_PREFIX + stored)  # type: ignore[return-value]

    def remove_avatar(self, user_id: str) -> User:
        user = self.get_user(user_id)
        self._remove_avatar_file(user.avatar)
        return self.users.update(user_id, avatar=None)  # type: ignore[return-value]

    def delete_user(self, user_id: str) -> None:
        """Delete the account together with everything it owns."""
        user = self.get_user(user_id)
        with self.db.transaction():
            for repo in (BillRepository(self.db), ExpenseRepository(self.db), WarrantyRepository(self.db)):
                repo.delete_all_for_user(user_id)
            self.users.delete(user_id)
        self._remove_avatar_file(user.avatar)
        logger.info("Deleted user %s and their records", user_id)

    def _remove_avatar_file(self, avatar: str | None) -> None:
        """Delete a locally stored avatar; remote (e.g. Google) URLs are left alone."""
        if not avatar or self.upload_dir is None or AVATAR_URL_PREFIX not in avatar:
            return
        name = Path(avatar.split(AVATAR_URL_PREFIX, 1)[1]).name
        path = self.upload_dir / name
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not delete avatar %s: %s", path, e)
