"""Tests for output formatting helpers and JSON envelopes."""

import json

import pytest

from smartspend.output.formatter import (
    EMPTY,
    OutputFormatter,
    configure_display,
    dollars,
    format_date,
    styled_status,
)


@pytest.fixture(autouse=True)
def default_display():
    configure_display({"date_format": "%b %d, %Y", "currency_symbol": "$"})
    yield
    configure_display({"date_format": "%b %d, %Y", "currency_symbol": "$"})


class TestDollars:
    @pytest.mark.parametrize("cents,expected", [
        (0, "$0.00"),
        (5, "$0.05"),
        (8900, "$89.00"),
        (123456789, "$1,234,567.89"),
        (-250, "-$2.50"),
    ])
    def test_formats_cents(self, cents, expected):
        assert dollars(cents) == expected

    def test_none(self):
        assert dollars(None) == EMPTY

    def test_configured_symbol(self):
        configure_display({"currency_symbol": "€"})
        assert dollars(4000) == "€40.00"


class TestFormatDate:
    def test_default_format(self):
        assert format_date("2024-03-05") == "Mar 05, 2024"

    def test_configured_format(self):
        configure_display({"date_format": "%d/%m/%Y"})
        assert format_date("2024-03-05") == "05/03/2024"

    def test_missing_and_unreadable(self):
        assert format_date(None) == EMPTY
        assert format_date("") == EMPTY
        assert format_date("next tuesday") == "next tuesday"

    def test_blank_settings_keep_current(self):
        configure_display({"date_format": "", "currency_symbol": None})
        assert format_date("2024-03-05") == "Mar 05, 2024"
        assert dollars(100) == "$1.00"
        configure_display(None)
        assert dollars(100) == "$1.00"


def test_styled_status():
    assert styled_status("Overdue") == "[bold red]Overdue[/bold red]"
    assert styled_status("Something else") == "Something else"


class TestJsonEnvelopes:
    def test_success(self, capsys):
        OutputFormatter(json_mode=True).json({"id": 1})
        assert json.loads(capsys.readouterr().out) == {"status": "success", "data": {"id": 1}}

    def test_error_with_field_errors(self, capsys):
        OutputFormatter(json_mode=True).json_error("Validation failed", errors={"amount": "Amount is required"})
        out = json.loads(capsys.readouterr().out)
        assert out == {
            "status": "error",
            "error": {"message": "Validation failed", "code": 1, "errors": {"amount": "Amount is required"}},
        }

    def test_table_rows_keyed_by_header(self, capsys):
        OutputFormatter(json_mode=True).table("Bills", [("Name", ""), ("Amount", "")], [["Rent", "$10.00"]])
        assert json.loads(capsys.readouterr().out)["data"] == [{"Name": "Rent", "Amount": "$10.00"}]

    def test_chatter_is_silent_in_json_mode(self, capsys):
        fmt = OutputFormatter(json_mode=True)
        fmt.success("done")
        fmt.info("fyi")
        fmt.panel("body")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "done" not in captured.err
