"""Dual-mode output — Rich tables and panels for people, JSON envelopes for scripts."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Human output goes to stdout; in JSON mode, human messages go to stderr
_console = Console()
_err_console = Console(stderr=True)

STATUS_STYLES = {
    "Paid": "green",
    "Overdue": "bold red",
    "Due Soon": "yellow",
    "Upcoming": "cyan",
    "Invalid Date": "dim",
    "Expired": "red",
    "Expiring Soon": "yellow",
    "Active": "green",
}

# [display] settings from the config file; see configure_display()
_display: dict[str, str] = {"date_format": "%b %d, %Y", "currency_symbol": "$"}

EMPTY = "—"


def configure_display(settings: dict[str, Any] | None) -> None:
    """Apply the ``[display]`` config section to money and date formatting."""
    for key in _display:
        value = (settings or {}).get(key)
        if value:
            _display[key] = str(value)


class OutputFormatter:
    """Routes output to Rich (human) or JSON depending on mode."""

    def __init__(self, json_mode: bool = False) -> None:
        self.json_mode = json_mode

    @property
    def _human(self) -> Console:
        return _err_console if self.json_mode else _console

    # ── JSON output ──────────────────────────────────────────────

    def json(self, data: Any, status: str = "success") -> None:
        """Print ``{"status", "data"}`` to stdout."""
        print(json.dumps({"status": status, "data": data}, indent=2, default=str))

    def json_error(self, message: str, code: int = 1, errors: dict[str, str] | None = None) -> None:
        """Print an error envelope; ``errors`` maps field names to messages."""
        error: dict[str, Any] = {"message": message, "code": code}
        if errors:
            error["errors"] = errors
        print(json.dumps({"status": "error", "error": error}, indent=2))

    # ── Human output ─────────────────────────────────────────────

    def print(self, message: str = "", **kwargs: Any) -> None:
        self._human.print(message, **kwargs)

    def _notice(self, mark: str, message: str, always: bool) -> None:
        # success/info are chatter and vanish in JSON mode; warnings and errors go to stderr
        if self.json_mode and not always:
            return
        self._human.print(f"{mark} {message}")

    def success(self, message: str) -> None:
        self._notice("[green]✓[/green]", message, always=False)

    def info(self, message: str) -> None:
        self._notice("[dim]ℹ[/dim]", message, always=False)

    def warning(self, message: str) -> None:
        self._notice("[yellow]![/yellow]", message, always=True)

    def error(self, message: str) -> None:
        self._notice("[red]✗[/red]", message, always=True)

    def table(
        self,
        title: str,
        columns: list[tuple[str, str]],
        rows: list[list[str]],
        data_for_json: list[dict[str, Any]] | None = None,
    ) -> None:
        """Render rows under ``(header, style)`` columns, or emit JSON.

        In JSON mode ``data_for_json`` is the payload when given, otherwise each
        row is keyed by its column headers.
        """
        if self.json_mode:
            headers = [header for header, _ in columns]
            payload = data_for_json if data_for_json is not None else [dict(zip(headers, r)) for r in rows]
            self.json(payload)
            return

        table = Table(title=title, header_style="bold cyan")
        for header, style in columns:
            table.add_column(header, style=style)
        for row in rows:
            table.add_row(*row)
        _console.print(table)

    def panel(self, content: str, title: str = "", border_style: str = "blue") -> None:
        if not self.json_mode:
            _console.print(Panel(content, title=title, border_style=border_style))


def dollars(cents: int | None) -> str:
    """Format integer cents with the configured currency symbol."""
    if cents is None:
        return EMPTY
    sign = "-" if cents < 0 else ""
    whole, frac = divmod(abs(cents), 100)
    return f"{sign}{_display['currency_symbol']}{whole:,}.{frac:02d}"


def format_date(date_str: str | None) -> str:
    """Format an ISO date with the configured ``date_format``; unreadable input is shown as-is."""
    if not date_str:
        return EMPTY
    try:
        return datetime.fromisoformat(date_str).strftime(_display["date_format"])
    except (ValueError, TypeError):
        return date_str


def styled_status(label: str) -> str:
    """Wrap a status label in its Rich markup."""
    style = STATUS_STYLES.get(label, "")
    return f"[{style}]{label}[/{style}]" if style else label
