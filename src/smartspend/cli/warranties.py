"""Warranty tracking CLI commands."""

from __future__ import annotations

from datetime import date

import click

from smartspend.cli.main import JsonGroup, SmartSpendContext, pass_context
from smartspend.output.formatter import dollars, format_date, styled_status
from smartspend.services.validators import to_cents


@click.group(cls=JsonGroup)
@pass_context
def warranties(ctx: SmartSpendContext) -> None:
    """Track product warranties (list, add, expiring, delete)."""
    pass


def _warranty_rows(items, today: date) -> list[list[str]]:
    from smartspend.services.status import classify_warranty, days_until_expiry

    return [
        [
            w.product_name,
            w.category,
            format_date(w.expiration_date),
            str(days_until_expiry(w.expiration_date, today)),
            styled_status(classify_warranty(w.expiration_date, today)),
            w.id[:8],
        ]
        for w in items
    ]


_COLUMNS = [
    ("Product", "bold"),
    ("Category", ""),
    ("Expires", "cyan"),
    ("Days left", "dim"),
    ("Status", ""),
    ("ID", "dim"),
]


@warranties.command("list")
@click.option("--category", default=None, help="Only this category.")
@click.option("--expired/--active", default=None, help="Only expired or only active warranties.")
@pass_context
def warranties_list(ctx: SmartSpendContext, category: str | None, expired: bool | None) -> None:
    """List warranties, soonest expiring first."""
    from smartspend.services.warranty_service import WarrantyService, warranty_to_api

    today = date.today()
    items, total, _, _ = WarrantyService(ctx.get_db()).list_warranties(
        ctx.get_user_id(), category=category, expired=expired, today=today
    )

    if not items and not ctx.json_mode:
        ctx.formatter.info("No warranties found. Use 'smartspend warranties add' to add one.")
        return

    ctx.formatter.table(
        title=f"Warranties ({total})",
        columns=_COLUMNS,
        rows=_warranty_rows(items, today),
        data_for_json=[warranty_to_api(w, today) for w in items],
    )


@warranties.command("add")
@click.option("--product", "product_name", prompt="Product name", help="Product name.")
@click.option("--expires", "expiration_date", prompt="Expiration date (YYYY-MM-DD)", help="Expiration date.")
@click.option("--category", prompt="Category", help="Category, e.g. Furniture, Automobiles.")
@click.option("--purchased", "purchase_date", default=None, help="Purchase date (YYYY-MM-DD).")
@click.option("--retailer", default=None, help="Where it was bought.")
@click.option("--price", type=float, default=None, help="Purchase price in dollars.")
@click.option("--notes", default=None, help="Notes.")
@pass_context
def warranties_add(
    ctx: SmartSpendContext,
    product_name: str,
    expiration_date: str,
    category: str,
    purchase_date: str | None,
    retailer: str | None,
    price: float | None,
    notes: str | None,
) -> None:
    """Add a warranty."""
    from smartspend.services.warranty_service import WarrantyService, warranty_to_api

    warranty = WarrantyService(ctx.get_db()).add_warranty(
        ctx.get_user_id(),
        product_name=product_name,
        expiration_date=expiration_date,
        category=category,
        purchase_date=purchase_date,
        retailer=retailer,
        purchase_price_cents=to_cents(price, "purchasePrice", "Purchase price"),
        notes=notes,
    )

    if ctx.json_mode:
        ctx.formatter.json(warranty_to_api(warranty, date.today()))
    else:
        price_note = f", {dollars(warranty.purchase_price_cents)}" if warranty.purchase_price_cents is not None else ""
        ctx.formatter.success(
            f"Added warranty: {warranty.product_name}{price_note}, expires {format_date(warranty.expiration_date)}"
        )


@warranties.command("expiring")
@click.option("--days", type=int, default=None, help="Look-ahead window (default from config).")
@pass_context
def warranties_expiring(ctx: SmartSpendContext, days: int | None) -> None:
    """Warranties that expire within the next few days."""
    from smartspend.services.warranty_service import WarrantyService, warranty_to_api

    if days is None:
        days = ctx.reminder_days("warranty_days", 30)
    today = date.today()
    items = WarrantyService(ctx.get_db()).get_expiring_soon(ctx.get_user_id(), today=today, within_days=days)

    if not items and not ctx.json_mode:
        ctx.formatter.info(f"No warranties expire in the next {days} days.")
        return

    ctx.formatter.table(
        title=f"Expiring in the next {days} days",
        columns=_COLUMNS,
        rows=_warranty_rows(items, today),
        data_for_json=[warranty_to_api(w, today) for w in items],
    )


@warranties.command("delete")
@click.argument("warranty_id")
@pass_context
def warranties_delete(ctx: SmartSpendContext, warranty_id: str) -> None:
    """Delete a warranty by ID."""
    from smartspend.services.warranty_service import WarrantyService

    WarrantyService(ctx.get_db()).delete_warranty(ctx.get_user_id(), warranty_id)
    if ctx.json_mode:
        ctx.formatter.json({"deleted": warranty_id})
    else:
        ctx.formatter.success("Deleted warranty.")
