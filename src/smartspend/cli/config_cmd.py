"""View and change settings in the TOML config file."""

from __future__ import annotations

import click

from smartspend.cli.main import JsonGroup, SmartSpendContext, pass_context

_SECRET_KEYS = {("auth", "jwt_secret")}


def _masked(config: dict) -> dict:
    shown = {section: dict(values) if isinstance(values, dict) else values for section, values in config.items()}
    for section, key in _SECRET_KEYS:
        if shown.get(section, {}).get(key):
            shown[section][key] = "********"
    return shown


@click.group(cls=JsonGroup)
def config() -> None:
    """Show or change configuration."""


@config.command("show")
@pass_context
def config_show(ctx: SmartSpendContext) -> None:
    """Print the effective configuration (secrets masked)."""
    from smartspend.core.config import get_config_path

    shown = _masked(ctx.config)
    if ctx.json_mode:
        ctx.formatter.json({"path": str(get_config_path()), "config": shown})
        return

    rows = []
    for section, values in shown.items():
        for key, value in values.items():
            text = ", ".join(value) if isinstance(value, list) else str(value)
            rows.append([f"{section}.{key}", text])
    ctx.formatter.table(title=str(get_config_path()), columns=[("Key", "bold"), ("Value", "")], rows=rows)


@config.command("set")
@click.argument("key")
@click.argument("value")
@pass_context
def config_set(ctx: SmartSpendContext, key: str, value: str) -> None:
    """Set KEY (section.name) to VALUE, e.g. 'reminders.due_soon_days 5'."""
    from smartspend.core.config import set_value

    saved = set_value(key, value)
    if ctx.json_mode:
        ctx.formatter.json({"key": key, "value": saved})
    else:
        ctx.formatter.success(f"Set {key} = {saved}")
