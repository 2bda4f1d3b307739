"""Tests for output formatting."""

import json
import re
from datetime import date, datetime
from io import StringIO

import pytest
from rich.console import Console

from gift_tracker.output_formatter import JSONEncoder, OutputFormatter


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text."""
    ansi_escape = re.compile(r"\x1b\[[0-9;]*m")
    return ansi_escape.sub("", text)


@pytest.fixture
def rich_formatter():
    """Rich-mode formatter writing to a buffer."""
    formatter = OutputFormatter(json_mode=False)
    formatter.console = Console(file=StringIO(), force_terminal=True, width=120)
    return formatter


def rendered(formatter) -> str:
    return strip_ansi(formatter.console.file.getvalue())


SAMPLE_ANALYTICS = {
    "year": 2024,
    "total_budget": 1000.0,
    "total_spent": 1022.99,
    "remaining_budget": -22.99,
    "recipients_breakdown": [
        {
            "recipient_id": 1,
            "recipient_name": "Alice",
            "allocated": 100.0,
            "spent": 22.99,
            "remaining": 77.01,
        },
        {
            "recipient_id": 2,
            "recipient_name": "Bob",
            "allocated": 50.0,
            "spent": 1000.0,
            "remaining": -950.0,
        },
    ],
}


class TestJSONEncoder:
    """Tests for JSONEncoder."""

    def test_encode_datetime(self):
        result = json.dumps({"time": datetime(2024, 1, 15, 10, 30)}, cls=JSONEncoder)
        assert "2024-01-15T10:30:00" in result

    def test_encode_date(self):
        result = json.dumps({"date": date(2024, 12, 1)}, cls=JSONEncoder)
        assert "2024-12-01" in result

    def test_encode_fallback(self):
        """Non-special types raise TypeError."""
        with pytest.raises(TypeError):
            json.dumps({"bad": object()}, cls=JSONEncoder)


class TestOutputFormatterJSON:
    """Tests for JSON output mode."""

    def test_json_mode_output(self, capsys):
        formatter = OutputFormatter(json_mode=True)
        formatter.output({"success": True, "data": {"analytics": SAMPLE_ANALYTICS}})

        data = json.loads(capsys.readouterr().out)
        assert data["data"]["analytics"]["remaining_budget"] == -22.99

    def test_json_error(self, capsys):
        formatter = OutputFormatter(json_mode=True)
        formatter.error("Recipient with ID '9' not found", error_code="NOT_FOUND")

        data = json.loads(capsys.readouterr().out)
        assert data["success"] is False
        assert data["error_code"] == "NOT_FOUND"

    def test_json_error_without_code(self, capsys):
        OutputFormatter(json_mode=True).error("boom")
        assert "error_code" not in json.loads(capsys.readouterr().out)

    def test_json_success(self, capsys):
        OutputFormatter(json_mode=True).success("Removed purchase 3", data={"id": 3})

        data = json.loads(capsys.readouterr().out)
        assert data == {"success": True, "message": "Removed purchase 3", "data": {"id": 3}}

    def test_json_warning(self, capsys):
        OutputFormatter(json_mode=True).warning("No budget found for analytics")
        assert json.loads(capsys.readouterr().out) == {"warning": "No budget found for analytics"}


class TestOutputFormatterRich:
    """Tests for Rich rendering."""

    def test_recipients_table(self, rich_formatter):
        rich_formatter.output(
            {
                "success": True,
                "data": {
                    "recipients": [
                        {"id": 1, "name": "Alice", "relationship": "Sister", "budget_allocation": 100}
                    ]
                },
            }
        )

        out = rendered(rich_formatter)
        assert "Alice" in out
        assert "Sister" in out
        assert "$100.00" in out
        assert "Total recipients: 1" in out

    def test_empty_recipients(self, rich_formatter):
        rich_formatter.output({"success": True, "data": {"recipients": []}})
        assert "No recipients yet" in rendered(rich_formatter)

    def test_gift_item_panel(self, rich_formatter):
        item = {
            "id": 4,
            "recipient_id": 1,
            "recipient_name": "Alice",
            "name": "Novel",
            "priority": 2,
            "status": "ready_to_buy",
            "target_price": 25.0,
            "current_best_price": None,
            "description": "Hardback",
            "notes": None,
        }
        rich_formatter.output({"success": True, "data": {"gift_item": item}}, "Added Novel")

        out = rendered(rich_formatter)
        assert "Added Novel" in out
        assert "Novel" in out
        assert "Target Price: $25.00" in out
        assert "Best Price" not in out
        assert "ready_to_buy" in out

    def test_purchases_table_totals(self, rich_formatter):
        purchases = [
            {
                "id": 1,
                "item_id": 4,
                "item_name": "Novel",
                "recipient_name": "Alice",
                "store_name": "Bookshop",
                "purchase_price": 22.99,
                "purchase_date": "2024-12-01",
                "was_on_sale": True,
            },
            {
                "id": 2,
                "item_id": 5,
                "item_name": "Mug",
                "recipient_name": "Bob",
                "store_name": None,
                "purchase_price": 7.01,
                "purchase_date": "2024-11-20",
                "was_on_sale": False,
            },
        ]
        rich_formatter.output({"success": True, "data": {"purchases": purchases}})

        out = rendered(rich_formatter)
        assert "(sale)" in out
        assert "Total spent: $30.00" in out

    def test_analytics_shows_overspend(self, rich_formatter):
        rich_formatter.output({"success": True, "data": {"analytics": SAMPLE_ANALYTICS}})

        out = rendered(rich_formatter)
        assert "Budget Analytics: 2024" in out
        assert "Remaining: -$22.99" in out
        assert "Alice" in out
        assert "-$950.00" in out

    def test_currency_symbol(self):
        formatter = OutputFormatter(json_mode=False, currency_symbol="€")
        formatter.console = Console(file=StringIO(), force_terminal=True, width=120)

        formatter.output(
            {"success": True, "data": {"budget": {"year": 2024, "total_budget": 500.0}}}
        )

        assert "€500.00" in rendered(formatter)

    def test_rich_error(self, rich_formatter):
        rich_formatter.error("Something broke")
        assert "Error: Something broke" in rendered(rich_formatter)
