"""Text dashboard: the year so far plus what needs attention."""

from __future__ import annotations

from datetime import date

import click

from smartspend.cli.main import SmartSpendContext, pass_context
from smartspend.output.formatter import dollars, format_date


@click.command()
@pass_context
def dashboard(ctx: SmartSpendContext) -> None:
    """Show spending, bill and warranty highlights."""
    from smartspend.services.summary_service import SummaryService

    today = date.today()
    data = SummaryService(ctx.get_db(), due_soon_days=ctx.due_soon_days).get_dashboard(
        ctx.get_user_id(),
        today=today,
        bill_days=ctx.reminder_days("bill_days", 7),
        warranty_days=ctx.reminder_days("warranty_days", 30),
    )

    if ctx.json_mode:
        ctx.formatter.json({
            **data,
            "upcoming_bills": [b.to_api() for b in data["upcoming_bills"]],
            "expiring_warranties": [w.to_api() for w in data["expiring_warranties"]],
        })
        return

    bills = data["bills"]
    lines = [
        f"Spent in {data['year']}: [green]{dollars(data['total_expenses_cents'])}[/green]",
        f"Unpaid bills: {bills['unpaid_count']} ({dollars(bills['unpaid_total_cents'])})",
        f"Overdue: [red]{bills['overdue_count']}[/red] ({dollars(bills['overdue_total_cents'])})",
        f"Recurring bills: {bills['recurring_count']}",
    ]
    ctx.formatter.panel("\n".join(lines), title="SmartSpend")

    if data["expense_categories"]:
        top = data["expense_categories"][:5]
        ctx.formatter.print("[bold]Top categories[/bold]")
        for c in top:
            ctx.formatter.print(f"  {c['category']}: {dollars(c['total_cents'])}")

    if data["upcoming_bills"]:
        ctx.formatter.print("[bold]Bills due soon[/bold]")
        for b in data["upcoming_bills"]:
            ctx.formatter.print(f"  {format_date(b.due_date)}  {b.name}  {dollars(b.amount_cents)}")

    if data["expiring_warranties"]:
        ctx.formatter.print("[bold]Warranties expiring[/bold]")
        for w in data["expiring_warranties"]:
            ctx.formatter.print(f"  {format_date(w.expiration_date)}  {w.product_name}")
