"""Account management CLI commands."""

from __future__ import annotations

import click

from smartspend.cli.main import JsonGroup, SmartSpendContext, pass_context
from smartspend.output.formatter import format_date


@click.group(cls=JsonGroup)
@pass_context
def users(ctx: SmartSpendContext) -> None:
    """Manage user accounts (add, list)."""
    pass


@users.command("add")
@click.option("--name", prompt="Name", help="Display name.")
@click.option("--email", prompt="Email", help="Sign-in email.")
@click.password_option("--password", help="Password (at least 6 characters).")
@pass_context
def users_add(ctx: SmartSpendContext, name: str, email: str, password: str) -> None:
    """Create an account that can sign in to the API."""
    from smartspend.services.auth_service import AuthService

    user = AuthService(ctx.get_db()).register(name, email, password)
    if ctx.json_mode:
        ctx.formatter.json(user.to_api())
    else:
        ctx.formatter.success(f"Created user {user.email}")


@users.command("list")
@pass_context
def users_list(ctx: SmartSpendContext) -> None:
    """List all accounts."""
    from smartspend.models.user import UserRepository

    everyone = UserRepository(ctx.get_db()).list_all()
    if not everyone and not ctx.json_mode:
        ctx.formatter.info("No users yet. Use 'smartspend users add' to create one.")
        return

    ctx.formatter.table(
        title="Users",
        columns=[("Name", "bold"), ("Email", ""), ("Sign-in", "dim"), ("Created", "dim")],
        rows=[
            [u.name, u.email, "google" if u.google_id else "password", format_date(u.created_at)]
            for u in everyone
        ],
        data_for_json=[u.to_api() for u in everyone],
    )
