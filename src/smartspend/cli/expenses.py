"""Expense tracking CLI commands."""

from __future__ import annotations

import calendar
from datetime import date

import click

from smartspend.cli.main import JsonGroup, SmartSpendContext, pass_context
from smartspend.output.formatter import dollars, format_date
from smartspend.services.validators import to_cents


@click.group(cls=JsonGroup)
@pass_context
def expenses(ctx: SmartSpendContext) -> None:
    """Track expenses (list, add, delete, summary)."""
    pass


@expenses.command("list")
@click.option("--category", default=None, help="Only this category.")
@click.option("--from", "start_date", default=None, help="Start date (YYYY-MM-DD).")
@click.option("--to", "end_date", default=None, help="End date (YYYY-MM-DD).")
@click.option("--limit", type=int, default=None, help="Page size (default 50).")
@click.option("--page", type=int, default=None, help="Page number.")
@pass_context
def expenses_list(
    ctx: SmartSpendContext,
    category: str | None,
    start_date: str | None,
    end_date: str | None,
    limit: int | None,
    page: int | None,
) -> None:
    """List expenses, newest first."""
    from smartspend.services.expense_service import ExpenseService

    items, total, page, limit = ExpenseService(ctx.get_db()).list_expenses(
        ctx.get_user_id(),
        category=category,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        page=page,
    )

    if ctx.json_mode:
        ctx.formatter.json({
            "expenses": [e.to_api() for e in items],
            "total": total,
            "page": page,
            "limit": limit,
        })
        return

    if not items:
        ctx.formatter.info("No expenses found. Use 'smartspend expenses add' to add one.")
        return

    ctx.formatter.table(
        title=f"Expenses ({len(items)} of {total})",
        columns=[
            ("Date", "cyan"),
            ("Description", "bold"),
            ("Category", ""),
            ("Method", "dim"),
            ("Amount", "green"),
            ("ID", "dim"),
        ],
        rows=[
            [format_date(e.date), e.description, e.category, e.payment_method, dollars(e.amount_cents), e.id[:8]]
            for e in items
        ],
    )


@expenses.command("add")
@click.option("--amount", type=float, prompt="Amount in dollars", help="Amount in dollars.")
@click.option("--description", prompt="Description", help="What the money was spent on.")
@click.option("--category", prompt="Category", help="Category, e.g. Groceries, Fuel.")
@click.option("--date", "expense_date", default=None, help="Date (YYYY-MM-DD, defaults to today).")
@click.option("--method", "payment_method", default=None, help="Payment method, e.g. Cash, Credit Card.")
@click.option("--notes", default=None, help="Notes.")
@pass_context
def expenses_add(
    ctx: SmartSpendContext,
    amount: float,
    description: str,
    category: str,
    expense_date: str | None,
    payment_method: str | None,
    notes: str | None,
) -> None:
    """Record an expense."""
    from smartspend.services.expense_service import ExpenseService

    expense = ExpenseService(ctx.get_db()).add_expense(
        ctx.get_user_id(),
        amount_cents=to_cents(amount),
        description=description,
        category=category,
        expense_date=expense_date,
        payment_method=payment_method,
        notes=notes,
    )

    if ctx.json_mode:
        ctx.formatter.json(expense.to_api())
    else:
        ctx.formatter.success(f"Added expense: {expense.description}, {dollars(expense.amount_cents)}")


@expenses.command("delete")
@click.argument("expense_id")
@pass_context
def expenses_delete(ctx: SmartSpendContext, expense_id: str) -> None:
    """Delete an expense by ID."""
    from smartspend.services.expense_service import ExpenseService

    ExpenseService(ctx.get_db()).delete_expense(ctx.get_user_id(), expense_id)
    if ctx.json_mode:
        ctx.formatter.json({"deleted": expense_id})
    else:
        ctx.formatter.success("Deleted expense.")


@expenses.command("summary")
@click.option("--year", type=int, default=None, help="Year (defaults to the current one).")
@pass_context
def expenses_summary(ctx: SmartSpendContext, year: int | None) -> None:
    """Spending per month and per category for a year."""
    from smartspend.services.expense_service import ExpenseService

    year = year or date.today().year
    svc = ExpenseService(ctx.get_db())
    user_id = ctx.get_user_id()
    monthly = svc.monthly_summary(user_id, year)
    by_category = svc.category_summary(user_id, f"{year}-01-01", f"{year}-12-31")

    if ctx.json_mode:
        ctx.formatter.json({"year": year, "monthly": monthly, "categories": by_category})
        return

    ctx.formatter.table(
        title=f"Spending by month, {year}",
        columns=[("Month", "cyan"), ("Total", "green")],
        rows=[[calendar.month_abbr[m["month"]], dollars(m["total_cents"])] for m in monthly],
    )
    if by_category:
        ctx.formatter.table(
            title=f"Spending by category, {year}",
            columns=[("Category", "bold"), ("Total", "green")],
            rows=[[c["category"], dollars(c["total_cents"])] for c in by_category],
        )
    ctx.formatter.print(f"  Year total: {dollars(sum(m['total_cents'] for m in monthly))}")
