"""Seed data command — a demo account with example records."""

from __future__ import annotations

from datetime import date, timedelta

import click

from smartspend.cli.main import SmartSpendContext, pass_context

DEMO_EMAIL = "demo@smartspend.local"
DEMO_PASSWORD = "demo1234"


@click.command("seed")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt.")
@pass_context
def seed_cmd(ctx: SmartSpendContext, yes: bool) -> None:
    """Create a demo user with bills, expenses and warranties."""
    db = ctx.get_db()

    if not yes and not ctx.json_mode:
        click.confirm(f"This will create the demo account {DEMO_EMAIL}. Continue?", abort=True)

    result = _seed_demo(db, date.today())

    if ctx.json_mode:
        ctx.formatter.json(result)
        return

    ctx.formatter.success(f"Seed complete. Sign in as {DEMO_EMAIL} / {DEMO_PASSWORD}")
    for entity, count in result["counts"].items():
        ctx.formatter.print(f"  {entity}: {count} records")


def _seed_demo(db, today: date) -> dict:
    """Insert the demo account and its records in one transaction."""
    from smartspend.core.exceptions import DuplicateError
    from smartspend.models.category import BillCategory, ExpenseCategory, WarrantyCategory
    from smartspend.services.auth_service import AuthService
    from smartspend.services.bill_service import BillService
    from smartspend.services.expense_service import ExpenseService
    from smartspend.services.warranty_service import WarrantyService

    with db.transaction():
        try:
            user = AuthService(db).register("Demo User", DEMO_EMAIL, DEMO_PASSWORD)
        except DuplicateError:
            raise DuplicateError(f"Demo account {DEMO_EMAIL} already exists") from None

        bill_svc = BillService(db)
        bills = [
            ("Rent", 145000, today + timedelta(days=12), BillCategory.RENT_MORTGAGE, "Monthly"),
            ("Electric", 8930, today + timedelta(days=2), BillCategory.ELECTRICITY, "Monthly"),
            ("Internet", 6000, today - timedelta(days=3), BillCategory.INTERNET, "Monthly"),
            ("Car insurance", 41200, today + timedelta(days=40), BillCategory.INSURANCE, "Quarterly"),
            ("Gym", 3500, today + timedelta(days=5), BillCategory.GYM, None),
        ]
        for name, cents, due, category, period in bills:
            bill_svc.add_bill(
                user.id,
                name=name,
                amount_cents=cents,
                due_date=due,
                category=category,
                is_recurring=period is not None,
                recurring_period=period,
            )

        expense_svc = ExpenseService(db)
        expenses = [
            (5420, "Groceries", ExpenseCategory.GROCERIES, "Debit Card", 1),
            (1850, "Lunch", ExpenseCategory.DINING_OUT, "Credit Card", 3),
            (4500, "Gas", ExpenseCategory.FUEL, "Credit Card", 6),
            (1299, "Streaming", ExpenseCategory.SUBSCRIPTIONS, "Credit Card", 10),
            (8900, "Pharmacy", ExpenseCategory.HEALTH_FITNESS, "Cash", 15),
        ]
        for cents, description, category, method, days_ago in expenses:
            expense_svc.add_expense(
                user.id,
                amount_cents=cents,
                description=description,
                category=category,
                expense_date=today - timedelta(days=days_ago),
                payment_method=method,
            )

        warranty_svc = WarrantyService(db)
        warranties = [
            ("Laptop", WarrantyCategory.ELECTRONICS, 129900, 700, 20),
            ("Washing machine", WarrantyCategory.HOME_APPLIANCES, 64900, 300, 400),
            ("Headphones", WarrantyCategory.ELECTRONICS, 19900, 400, -35),
        ]
        for product, category, cents, age_days, expires_in in warranties:
            warranty_svc.add_warranty(
                user.id,
                product_name=product,
                expiration_date=today + timedelta(days=expires_in),
                category=category,
                purchase_date=today - timedelta(days=age_days),
                purchase_price_cents=cents,
            )

    return {
        "user": user.email,
        "counts": {"bills": len(bills), "expenses": len(expenses), "warranties": len(warranties)},
    }
