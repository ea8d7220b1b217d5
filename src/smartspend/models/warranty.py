"""Warranty model and repository."""

from __future__ import annotations

import json
from typing import Any, ClassVar

from pydantic import Field

from smartspend.models.base import BaseRepository, SmartSpendModel, cents_to_amount


class Warranty(SmartSpendModel):
    """A product warranty with an expiration date."""

    user_id: str
    product_name: str
    purchase_date: str | None = None
    expiration_date: str
    category: str
    retailer: str | None = None
    purchase_price_cents: int | None = None
    currency: str = "USD"
    document_urls: list[str] = Field(default_factory=list)
    notes: str | None = None
    reminder_date: str | None = None

    def to_row(self) -> dict[str, Any]:
        data = self.model_dump()
        data["document_urls"] = json.dumps(data["document_urls"])
        return data

    @classmethod
    def from_row(cls, row: Any) -> "Warranty":
        d = {k: row[k] for k in row.keys()}
        d["document_urls"] = json.loads(d.get("document_urls") or "[]")
        return cls(**d)

    def to_api(self) -> dict[str, Any]:
        data = super().to_api()
        data["purchasePrice"] = cents_to_amount(data.pop("purchasePriceCents"))
        data["user"] = data.pop("userId")
        return data


class WarrantyRepository(BaseRepository):
    table: ClassVar[str] = "warranties"
    model_class: ClassVar[type[SmartSpendModel]] = Warranty  # type: ignore[assignment]

    def get_expiring_between(self, user_id: str, start: str, end: str) -> list[Warranty]:
        """Warranties with start <= expiration_date <= end, soonest first."""
        return self.list_owned(  # type: ignore[return-value]
            user_id,
            where="expiration_date >= ? AND expiration_date <= ?",
            params=(start, end),
            order_by="expiration_date",
        )
