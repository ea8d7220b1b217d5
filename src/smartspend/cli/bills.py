"""Bill management CLI commands."""

from __future__ import annotations

from datetime import date

import click

from smartspend.cli.main import JsonGroup, SmartSpendContext, pass_context
from smartspend.core.exceptions import NotFoundError
from smartspend.output.formatter import EMPTY, dollars, format_date, styled_status
from smartspend.services.validators import to_cents


@click.group(cls=JsonGroup)
@pass_context
def bills(ctx: SmartSpendContext) -> None:
    """Manage bills (list, add, show, pay, edit, delete, reminders)."""
    pass


def _find_bill(svc, user_id: str, ref: str):
    """Look a bill up by ID, falling back to a name search."""
    try:
        return svc.get_bill(user_id, ref)
    except NotFoundError:
        results = svc.search_bills(user_id, ref)
        if results:
            return results[0]
        raise NotFoundError(f"Bill not found: {ref}") from None


@bills.command("list")
@click.option(
    "--status",
    type=click.Choice(["all", "paid", "unpaid", "overdue", "upcoming"]),
    default="all",
    help="Only show bills with this status.",
)
@click.option("--search", default="", help="Match against name or category.")
@click.option(
    "--sort",
    "sort_key",
    type=click.Choice(["due_date", "amount", "status", "name"]),
    default="due_date",
    help="Sort key.",
)
@click.option("--desc", is_flag=True, help="Sort descending.")
@pass_context
def bills_list(ctx: SmartSpendContext, status: str, search: str, sort_key: str, desc: bool) -> None:
    """List bills with their current status."""
    from smartspend.services.bill_projection import BillFilter, BillSort
    from smartspend.services.bill_service import BillService
    from smartspend.services.status import classify_bill

    today = date.today()
    svc = BillService(ctx.get_db(), due_soon_days=ctx.due_soon_days)
    view = svc.view(
        ctx.get_user_id(),
        BillFilter(status=status, search=search),
        BillSort(key=sort_key, order="desc" if desc else "asc"),
        today=today,
    )

    if ctx.json_mode:
        ctx.formatter.json(view.to_api(today))
        return

    if not view.visible:
        ctx.formatter.info("No bills found. Use 'smartspend bills add' to add one.")
        return

    rows = []
    for b in view.visible:
        label = classify_bill(b.due_date, b.is_paid, today, ctx.due_soon_days).label
        rows.append([
            b.name,
            b.category,
            dollars(b.amount_cents),
            format_date(b.due_date),
            b.recurring_period if b.is_recurring else EMPTY,
            styled_status(label),
            b.id[:8],
        ])

    ctx.formatter.table(
        title="Bills",
        columns=[
            ("Name", "bold"),
            ("Category", ""),
            ("Amount", "green"),
            ("Due", "cyan"),
            ("Repeats", "dim"),
            ("Status", ""),
            ("ID", "dim"),
        ],
        rows=rows,
    )
    ctx.formatter.print(
        f"  Total: {dollars(view.total_amount_cents)}   Overdue: {view.overdue_count}"
    )


@bills.command("add")
@click.option("--name", prompt="Bill name", help="Bill name.")
@click.option("--amount", type=float, prompt="Amount in dollars", help="Amount in dollars.")
@click.option("--due", "due_date", prompt="Due date (YYYY-MM-DD)", help="Due date.")
@click.option("--category", default="Other Utilities", help="Category, e.g. Electricity, Water, Internet.")
@click.option(
    "--repeat",
    "recurring_period",
    type=click.Choice(["Weekly", "Monthly", "Quarterly", "Annually"], case_sensitive=False),
    default=None,
    help="Make the bill recurring with this period.",
)
@click.option("--reminder", "reminder_date", default=None, help="Reminder date (YYYY-MM-DD).")
@click.option("--notes", default=None, help="Notes.")
@pass_context
def bills_add(
    ctx: SmartSpendContext,
    name: str,
    amount: float,
    due_date: str,
    category: str,
    recurring_period: str | None,
    reminder_date: str | None,
    notes: str | None,
) -> None:
    """Add a new bill."""
    from smartspend.services.bill_service import BillService

    bill = BillService(ctx.get_db()).add_bill(
        ctx.get_user_id(),
        name=name,
        amount_cents=to_cents(amount),
        due_date=due_date,
        category=category,
        is_recurring=recurring_period is not None,
        recurring_period=recurring_period,
        reminder_date=reminder_date,
        notes=notes,
    )

    if ctx.json_mode:
        ctx.formatter.json(bill.to_api())
    else:
        ctx.formatter.success(f"Added bill: {bill.name}, {dollars(bill.amount_cents)}, due {format_date(bill.due_date)}")


@bills.command("show")
@click.argument("bill_ref")
@pass_context
def bills_show(ctx: SmartSpendContext, bill_ref: str) -> None:
    """Show details for a bill (by ID or name)."""
    from smartspend.services.bill_service import BillService
    from smartspend.services.status import classify_bill

    svc = BillService(ctx.get_db())
    bill = _find_bill(svc, ctx.get_user_id(), bill_ref)
    status = classify_bill(bill.due_date, bill.is_paid, date.today(), ctx.due_soon_days)

    if ctx.json_mode:
        ctx.formatter.json({**bill.to_api(), "status": status.label})
        return

    ctx.formatter.print(f"\n[bold]{bill.name}[/bold]")
    ctx.formatter.print(f"  Category: {bill.category}")
    ctx.formatter.print(f"  Amount: {dollars(bill.amount_cents)}")
    ctx.formatter.print(f"  Due: {format_date(bill.due_date)}")
    ctx.formatter.print(f"  Status: {styled_status(status.label)}")
    ctx.formatter.print(f"  Repeats: {bill.recurring_period if bill.is_recurring else 'No'}")
    if bill.reminder_date:
        ctx.formatter.print(f"  Reminder: {format_date(bill.reminder_date)}")
    if bill.notes:
        ctx.formatter.print(f"  Notes: {bill.notes}")
    ctx.formatter.print(f"  ID: {bill.id}")


@bills.command("pay")
@click.argument("bill_ref")
@pass_context
def bills_pay(ctx: SmartSpendContext, bill_ref: str) -> None:
    """Mark a bill paid; recurring bills roll over to the next due date."""
    from smartspend.services.bill_service import BillService

    svc = BillService(ctx.get_db())
    user_id = ctx.get_user_id()
    bill = _find_bill(svc, user_id, bill_ref)
    result = svc.pay_bill(user_id, bill.id)

    if ctx.json_mode:
        data = result.bill.to_api()
        if result.next_bill is not None:
            data["nextBill"] = result.next_bill.to_api()
        ctx.formatter.json(data)
        return

    ctx.formatter.success(f"Paid {bill.name} ({dollars(bill.amount_cents)})")
    if result.next_bill is not None:
        ctx.formatter.info(f"Next {bill.name} due {format_date(result.next_bill.due_date)}")


@bills.command("edit")
@click.argument("bill_ref")
@click.option("--name", default=None)
@click.option("--amount", type=float, default=None)
@click.option("--due", "due_date", default=None)
@click.option("--category", default=None)
@click.option("--notes", default=None)
@pass_context
def bills_edit(ctx: SmartSpendContext, bill_ref: str, **kwargs: str | float | None) -> None:
    """Edit a bill."""
    from smartspend.services.bill_service import BillService

    svc = BillService(ctx.get_db())
    user_id = ctx.get_user_id()

    updates = {k: v for k, v in kwargs.items() if v is not None}
    if "amount" in updates:
        updates["amount_cents"] = to_cents(float(updates.pop("amount")))

    if not updates:
        ctx.formatter.warning("No updates specified.")
        return

    bill = svc.update_bill(user_id, _find_bill(svc, user_id, bill_ref).id, **updates)

    if ctx.json_mode:
        ctx.formatter.json(bill.to_api())
    else:
        ctx.formatter.success(f"Updated bill: {bill.name}")


@bills.command("delete")
@click.argument("bill_ref")
@click.option("--confirm", is_flag=True, help="Skip confirmation prompt.")
@pass_context
def bills_delete(ctx: SmartSpendContext, bill_ref: str, confirm: bool) -> None:
    """Delete a bill."""
    from smartspend.services.bill_service import BillService

    svc = BillService(ctx.get_db())
    user_id = ctx.get_user_id()
    bill = _find_bill(svc, user_id, bill_ref)

    if not confirm and not ctx.json_mode:
        if not click.confirm(f"Delete bill '{bill.name}'?"):
            ctx.formatter.info("Cancelled.")
            return

    svc.delete_bill(user_id, bill.id)

    if ctx.json_mode:
        ctx.formatter.json({"deleted": bill.id})
    else:
        ctx.formatter.success(f"Deleted bill: {bill.name}")


@bills.command("reminders")
@click.option("--days", type=int, default=None, help="Look-ahead window (default from config).")
@pass_context
def bills_reminders(ctx: SmartSpendContext, days: int | None) -> None:
    """Unpaid bills due within the next few days."""
    from smartspend.services.bill_service import BillService

    if days is None:
        days = ctx.reminder_days("bill_days", 7)
    due = BillService(ctx.get_db()).get_reminders(ctx.get_user_id(), within_days=days)

    if not due and not ctx.json_mode:
        ctx.formatter.info(f"Nothing due in the next {days} days.")
        return

    ctx.formatter.table(
        title=f"Due in the next {days} days",
        columns=[("Name", "bold"), ("Amount", "green"), ("Due", "cyan")],
        rows=[[b.name, dollars(b.amount_cents), format_date(b.due_date)] for b in due],
        data_for_json=[b.to_api() for b in due],
    )
