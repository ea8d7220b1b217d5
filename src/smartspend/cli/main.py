"""Root CLI group — entry point for all SmartSpend commands."""

from __future__ import annotations

import sys
from typing import Any

import click

from smartspend import __version__
from smartspend.core.exceptions import SmartSpendError, ValidationError
from smartspend.output.formatter import OutputFormatter, configure_display


class SmartSpendContext:
    """Shared context passed through Click commands."""

    def __init__(self, json_mode: bool = False, user_email: str | None = None) -> None:
        self.json_mode = json_mode
        self.user_email = user_email
        self.formatter = OutputFormatter(json_mode=json_mode)
        self._db = None
        self._config: dict[str, Any] | None = None

    @property
    def config(self) -> dict[str, Any]:
        """The loaded TOML config (read once per invocation)."""
        if self._config is None:
            from smartspend.core.config import load_config

            self._config = load_config()
        return self._config

    def reminder_days(self, key: str, default: int) -> int:
        """A ``[reminders]`` window in days."""
        return int(self.config.get("reminders", {}).get(key, default))

    @property
    def due_soon_days(self) -> int:
        from smartspend.services.status import DUE_SOON_DAYS

        return self.reminder_days("due_soon_days", DUE_SOON_DAYS)

    def get_db(self):
        """Lazy-load and return the database connection (schema kept current)."""
        if self._db is None:
            from smartspend.core.database import DatabaseConnection
            from smartspend.core.migrations import initialize_database

            self._db = DatabaseConnection()
            self._db.connect()
            initialize_database(self._db)
        return self._db

    def get_user_id(self) -> str:
        """Resolve the acting user from ``--user``, or the only account if there is one."""
        from smartspend.models.user import UserRepository

        users = UserRepository(self.get_db())
        if self.user_email:
            return users.get_by_email(self.user_email).id
        everyone = users.list_all()
        if len(everyone) == 1:
            return everyone[0].id
        if not everyone:
            raise SmartSpendError("No users yet. Create one with 'smartspend users add'.")
        raise SmartSpendError("Several users exist; pass --user EMAIL.")

    def close(self) -> None:
        if self._db is not None:
            self._db.close()


pass_context = click.make_pass_decorator(SmartSpendContext, ensure=True)


class JsonGroup(click.Group):
    """Command group that reports SmartSpend errors cleanly and exits 1."""

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except SmartSpendError as e:
            obj = ctx.find_object(SmartSpendContext)
            formatter = obj.formatter if obj else OutputFormatter()
            errors = e.errors if isinstance(e, ValidationError) else None
            if formatter.json_mode:
                formatter.json_error(str(e), errors=errors)
            else:
                formatter.error(str(e))
                for field, msg in (errors or {}).items():
                    formatter.print(f"  {field}: {msg}")
            sys.exit(1)


@click.group(cls=JsonGroup)
@click.option("--json", "json_mode", is_flag=True, help="Output JSON instead of tables.")
@click.option("--user", "user_email", default=None, help="Act as the user with this email.")
@click.version_option(__version__, prog_name="SmartSpend")
@click.pass_context
def cli(ctx: click.Context, json_mode: bool, user_email: str | None) -> None:
    """SmartSpend — bills, expenses and warranties in one place."""
    ctx.obj = SmartSpendContext(json_mode=json_mode, user_email=user_email)
    configure_display(ctx.obj.config.get("display"))


# ── Register subcommands ──────────────────────────────────────────

from smartspend.cli.server import init_db_cmd, serve_cmd
cli.add_command(init_db_cmd, "init-db")
cli.add_command(serve_cmd, "serve")

from smartspend.cli.seed import seed_cmd
cli.add_command(seed_cmd, "seed")

from smartspend.cli.users import users
cli.add_command(users)

from smartspend.cli.bills import bills
cli.add_command(bills)

from smartspend.cli.expenses import expenses
cli.add_command(expenses)

from smartspend.cli.warranties import warranties
cli.add_command(warranties)

from smartspend.cli.dashboard import dashboard
cli.add_command(dashboard)

from smartspend.cli.config_cmd import config
cli.add_command(config)
