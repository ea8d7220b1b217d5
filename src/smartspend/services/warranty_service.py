"""Warranty management business logic."""

from __future__ import annotations

import json
import logging
from datetime import date, timedelta
from typing import Any

from smartspend.core.database import DatabaseConnection
from smartspend.core.exceptions import ValidationError
from smartspend.models.category import WarrantyCategory
from smartspend.models.warranty import Warranty, WarrantyRepository
from smartspend.services.bill_service import clamp_page
from smartspend.services.status import EXPIRING_SOON_DAYS, classify_warranty, days_until_expiry
from smartspend.services.validators import (
    clean_text,
    optional_date,
    require_amount,
    require_choice,
    require_date,
    require_text,
)

logger = logging.getLogger(__name__)

_UPDATABLE = {
    "product_name", "purchase_date", "expiration_date", "category", "retailer",
    "purchase_price_cents", "currency", "document_urls", "notes", "reminder_date",
}


def warranty_to_api(warranty: Warranty, today: date) -> dict[str, Any]:
    """API view of a warranty with its derived status."""
    return {
        **warranty.to_api(),
        "status": classify_warranty(warranty.expiration_date, today),
        "daysUntilExpiry": days_until_expiry(warranty.expiration_date, today),
    }


def _clean_urls(urls: list[str] | None) -> list[str]:
    return [u.strip() for u in (urls or []) if u and u.strip()]


class WarrantyService:
    """Business logic for warranty operations."""

    def __init__(self, db: DatabaseConnection) -> None:
        self.db = db
        self.warranties = WarrantyRepository(db)

    def add_warranty(
        self,
        user_id: str,
        product_name: str,
        expiration_date: str | date | None,
        category: str | WarrantyCategory | None,
        purchase_date: str | date | None = None,
        retailer: str | None = None,
        purchase_price_cents: int | None = None,
        currency: str | None = None,
        document_urls: list[str] | None = None,
        notes: str | None = None,
        reminder_date: str | date | None = None,
    ) -> Warranty:
        purchased = optional_date("purchaseDate", purchase_date, "Purchase date")
        expires = require_date("expirationDate", expiration_date, "Expiration date")
        if purchased and expires < purchased:
            raise ValidationError(
                "Expiration date cannot be before purchase date.",
                {"expirationDate": "Expiration date cannot be before purchase date"},
            )

        warranty = Warranty(
            user_id=user_id,
            product_name=require_text("productName", product_name, "Product name"),
            purchase_date=purchased,
            expiration_date=expires,
            category=require_choice("category", category, WarrantyCategory, "Category"),
            retailer=clean_text(retailer),
            purchase_price_cents=(
                None if purchase_price_cents is None
                else require_amount("purchasePrice", purchase_price_cents, "Purchase price")
            ),
            currency=(clean_text(currency) or "USD").upper(),
            document_urls=_clean_urls(document_urls),
            notes=clean_text(notes),
            reminder_date=optional_date("reminderDate", reminder_date, "Reminder date"),
        )
        self.warranties.insert(warranty)
        logger.info("Created warranty %s for user %s", warranty.id, user_id)
        return warranty

    def get_warranty(self, user_id: str, warranty_id: str) -> Warranty:
        return self.warranties.get_owned(user_id, warranty_id)  # type: ignore[return-value]

    def list_warranties(
        self,
        user_id: str,
        category: str | None = None,
        expired: bool | None = None,
        limit: int | None = None,
        page: int | None = None,
        today: date | None = None,
    ) -> tuple[list[Warranty], int, int, int]:
        """Return (warranties, total, page, limit), soonest expiring first."""
        limit, page = clamp_page(limit, page)
        today_iso = (today or date.today()).isoformat()
        clauses: list[str] = []
        params: list[Any] = []
        if category:
            clauses.append("category = ?")
            params.append(require_choice("category", category, WarrantyCategory, "Category"))
        if expired is True:
            clauses.append("expiration_date < ?")
            params.append(today_iso)
        elif expired is False:
            clauses.append("expiration_date >= ?")
            params.append(today_iso)

        where = " AND ".join(clauses)
        total = self.warranties.count_owned(user_id, where, tuple(params))
        items = self.warranties.list_owned(
            user_id,
            where=where,
            params=tuple(params),
            order_by="expiration_date, created_at",
            limit=limit,
            offset=(page - 1) * limit,
        )
        return items, total, page, limit  # type: ignore[return-value]

    def update_warranty(self, user_id: str, warranty_id: str, **updates: Any) -> Warranty:
        unknown = set(updates) - _UPDATABLE
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        current = self.get_warranty(user_id, warranty_id)
        clean: dict[str, Any] = {}
        for key, value in updates.items():
            if key == "product_name":
                clean[key] = require_text("productName", value, "Product name")
            elif key == "expiration_date":
                clean[key] = require_date("expirationDate", value, "Expiration date")
            elif key == "purchase_date":
                clean[key] = optional_date("purchaseDate", value, "Purchase date")
            elif key == "reminder_date":
                clean[key] = optional_date("reminderDate", value, "Reminder date")
            elif key == "category":
                clean[key] = require_choice("category", value, WarrantyCategory, "Category")
            elif key == "purchase_price_cents":
                clean[key] = None if value is None else require_amount("purchasePrice", value, "Purchase price")
            elif key == "currency":
                clean[key] = (clean_text(value) or "USD").upper()
            elif key == "document_urls":
                clean[key] = _clean_urls(value)
            else:
                clean[key] = clean_text(value)

        purchased = clean.get("purchase_date", current.purchase_date)
        expires = clean.get("expiration_date", current.expiration_date)
        if purchased and expires < purchased:
            raise ValidationError(
                "Expiration date cannot be before purchase date.",
                {"expirationDate": "Expiration date cannot be before purchase date"},
            )

        if "document_urls" in clean:
            clean["document_urls"] = json.dumps(clean["document_urls"])
        if not clean:
            return current
        return self.warranties.update_owned(user_id, warranty_id, **clean)  # type: ignore[return-value]

    def delete_warranty(self, user_id: str, warranty_id: str) -> None:
        self.warranties.delete_owned(user_id, warranty_id)

    def get_expiring_soon(
        self, user_id: str, today: date | None = None, within_days: int = EXPIRING_SOON_DAYS
    ) -> list[Warranty]:
        """Warranties expiring between today and ``within_days`` from now."""
        today = today or date.today()
        end = today + timedelta(days=within_days)
        return self.warranties.get_expiring_between(user_id, today.isoformat(), end.isoformat())
