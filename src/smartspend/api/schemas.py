"""Request bodies accepted by the JSON API.

Clients send camelCase keys; these models validate them and hand the
services snake_case keyword arguments with money converted to cents.
"""

from __future__ import annotations

import datetime
from datetime import date
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from smartspend.services.validators import MAX_AMOUNT, to_cents

# Dollars; finite and small enough to store as integer cents
Money = Annotated[float, Field(ge=0, le=MAX_AMOUNT, allow_inf_nan=False)]


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    def service_kwargs(self, partial: bool = False) -> dict[str, Any]:
        """Fields as service keyword arguments; ``partial`` keeps only those sent."""
        data = self.model_dump(exclude_unset=partial)
        if "amount" in data:
            data["amount_cents"] = to_cents(data.pop("amount"))
        if "purchase_price" in data:
            data["purchase_price_cents"] = to_cents(data.pop("purchase_price"), "purchasePrice", "Purchase price")
        return data


# ── Auth ─────────────────────────────────────────────────────────


class RegisterIn(ApiModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)


class LoginIn(ApiModel):
    email: str
    password: str


class GoogleIn(ApiModel):
    token: str = Field(min_length=1)


class PreferencesIn(ApiModel):
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    reminder_days_before: int | None = Field(default=None, ge=0, le=60)
    theme: str | None = None


class ProfileIn(ApiModel):
    name: str | None = None
    email: str | None = None
    preferences: PreferencesIn | None = None


class CurrencyIn(ApiModel):
    currency: str = Field(min_length=3, max_length=3)


# ── Bills ────────────────────────────────────────────────────────


class BillCreate(ApiModel):
    name: str = Field(min_length=1)
    amount: Money
    due_date: date
    category: str
    is_paid: bool = False
    is_recurring: bool = False
    recurring_period: str | None = None
    reminder_date: date | None = None
    notes: str | None = None


class BillUpdate(ApiModel):
    name: str | None = Field(default=None, min_length=1)
    amount: Money | None = None
    due_date: date | None = None
    category: str | None = None
    is_paid: bool | None = None
    is_recurring: bool | None = None
    recurring_period: str | None = None
    reminder_date: date | None = None
    notes: str | None = None


# ── Expenses ─────────────────────────────────────────────────────


class ExpenseCreate(ApiModel):
    amount: Money
    description: str = Field(min_length=1)
    category: str
    date: datetime.date | None = None
    payment_method: str | None = None
    receipt: str | None = None
    notes: str | None = None


class ExpenseUpdate(ApiModel):
    amount: Money | None = None
    description: str | None = Field(default=None, min_length=1)
    category: str | None = None
    date: datetime.date | None = None
    payment_method: str | None = None
    receipt: str | None = None
    notes: str | None = None


# ── Warranties ───────────────────────────────────────────────────


class WarrantyCreate(ApiModel):
    product_name: str = Field(min_length=1)
    purchase_date: date | None = None
    expiration_date: date
    category: str
    retailer: str | None = None
    purchase_price: Money | None = None
    currency: str | None = None
    document_urls: list[str] = Field(default_factory=list)
    notes: str | None = None
    reminder_date: date | None = None


class WarrantyUpdate(ApiModel):
    product_name: str | None = Field(default=None, min_length=1)
    purchase_date: date | None = None
    expiration_date: date | None = None
    category: str | None = None
    retailer: str | None = None
    purchase_price: Money | None = None
    currency: str | None = None
    document_urls: list[str] | None = None
    notes: str | None = None
    reminder_date: date | None = None
