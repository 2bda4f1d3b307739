"""Output formatting for CLI and programmatic use."""

import json
from datetime import date, datetime
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table


class JSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for output."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, date):
            return obj.isoformat()
        return super().default(obj)


STATUS_ICONS = {
    "needed": "[white]○[/white]",
    "researching": "[yellow]?[/yellow]",
    "ready_to_buy": "[cyan]●[/cyan]",
    "purchased": "[green]✓[/green]",
}


class OutputFormatter:
    """Formats output for both Rich terminal and JSON modes."""

    def __init__(self, json_mode: bool = False, currency_symbol: str = "$"):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
            currency_symbol: Prefix for amounts in Rich mode
        """
        self.json_mode = json_mode
        self.currency = currency_symbol
        self.console = Console()

    def output(self, data: dict[str, Any], message: str = "") -> None:
        """Output data in appropriate format.

        Args:
            data: Data to output
            message: Optional message for Rich mode
        """
        if self.json_mode:
            self._output_json(data)
        else:
            self._output_rich(data, message)

    def _output_json(self, data: dict[str, Any]) -> None:
        """Output as JSON to stdout."""
        print(json.dumps(data, cls=JSONEncoder, indent=2))

    def _output_rich(self, data: dict[str, Any], message: str) -> None:
        """Output with Rich formatting."""
        if message:
            self.console.print(f"[green]✓[/green] {message}")

        payload = data.get("data", {})
        if "recipients" in payload:
            self._render_recipients(data)
        elif "recipient" in payload:
            self._render_recipient(data)
        elif "gift_items" in payload:
            self._render_gift_items(data)
        elif "gift_item" in payload:
            self._render_gift_item(data)
        elif "purchases" in payload:
            self._render_purchases(data)
        elif "purchase" in payload:
            self._render_purchase(data)
        elif "analytics" in payload:
            self._render_analytics(data)
        elif "budget" in payload:
            self._render_budget(data)

    def _money(self, amount: float | None) -> str:
        if amount is None:
            return "-"
        sign = "-" if amount < 0 else ""
        return f"{sign}{self.currency}{abs(amount):.2f}"

    def _render_recipients(self, data: dict) -> None:
        """Render recipient table."""
        recipients = data["data"]["recipients"]

        if not recipients:
            self.console.print("[dim]No recipients yet[/dim]")
            return

        table = Table(title="Recipients", show_header=True, header_style="bold cyan")
        table.add_column("ID", justify="right")
        table.add_column("Name", style="cyan")
        table.add_column("Relationship", style="green")
        table.add_column("Allocation", justify="right")

        for recipient in recipients:
            table.add_row(
                str(recipient["id"]),
                recipient["name"],
                recipient.get("relationship") or "-",
                self._money(recipient.get("budget_allocation", 0)),
            )

        self.console.print(table)
        self.console.print(f"\nTotal recipients: {len(recipients)}")

    def _render_recipient(self, data: dict) -> None:
        """Render a single recipient."""
        recipient = data["data"]["recipient"]

        panel_content = f"""[bold]{recipient["name"]}[/bold]

ID: {recipient["id"]}
Relationship: {recipient.get("relationship") or "Not specified"}
Allocation: {self._money(recipient.get("budget_allocation", 0))}"""

        if recipient.get("notes"):
            panel_content += f"\nNotes: {recipient['notes']}"

        self.console.print(Panel(panel_content, title="Recipient", border_style="green"))

    def _render_gift_items(self, data: dict) -> None:
        """Render gift item table."""
        items = data["data"]["gift_items"]

        if not items:
            self.console.print("[dim]No gift ideas yet[/dim]")
            return

        table = Table(title="Gift Ideas", show_header=True, header_style="bold cyan")
        table.add_column("ID", justify="right")
        table.add_column("Gift", style="cyan", no_wrap=False)
        table.add_column("For", style="green")
        table.add_column("Priority", style="magenta", justify="right")
        table.add_column("Target", justify="right")
        table.add_column("Status", style="blue")

        for item in items:
            status = item.get("status", "needed")
            table.add_row(
                str(item["id"]),
                item["name"],
                item.get("recipient_name") or "-",
                str(item.get("priority", 1)),
                self._money(item.get("target_price")),
                f"{STATUS_ICONS.get(status, '○')} {status}",
            )

        self.console.print(table)
        self.console.print(f"\nTotal items: {len(items)}")

    def _render_gift_item(self, data: dict) -> None:
        """Render a single gift item."""
        item = data["data"]["gift_item"]

        panel_content = f"""[bold]{item["name"]}[/bold]

ID: {item["id"]}
For: {item.get("recipient_name") or item["recipient_id"]}
Priority: {item.get("priority", 1)}
Status: {item.get("status", "needed")}"""

        if item.get("description"):
            panel_content += f"\nDescription: {item['description']}"

        if item.get("target_price") is not None:
            panel_content += f"\nTarget Price: {self._money(item['target_price'])}"

        if item.get("current_best_price") is not None:
            panel_content += f"\nBest Price: {self._money(item['current_best_price'])}"

        if item.get("notes"):
            panel_content += f"\nNotes: {item['notes']}"

        self.console.print(Panel(panel_content, title="Gift Details", border_style="green"))

    def _render_purchases(self, data: dict) -> None:
        """Render purchase table."""
        purchases = data["data"]["purchases"]

        if not purchases:
            self.console.print("[dim]No purchases yet[/dim]")
            return

        table = Table(title="Purchases", show_header=True, header_style="bold cyan")
        table.add_column("ID", justify="right")
        table.add_column("Date")
        table.add_column("Gift", style="cyan")
        table.add_column("For", style="green")
        table.add_column("Store")
        table.add_column("Price", justify="right")

        total = 0.0
        for purchase in purchases:
            total += purchase["purchase_price"]
            price = self._money(purchase["purchase_price"])
            if purchase.get("was_on_sale"):
                price += " [green](sale)[/green]"
            table.add_row(
                str(purchase["id"]),
                str(purchase["purchase_date"]),
                purchase.get("item_name") or str(purchase["item_id"]),
                purchase.get("recipient_name") or "-",
                purchase.get("store_name") or "-",
                price,
            )

        self.console.print(table)
        self.console.print(f"\nTotal spent: {self._money(total)}")

    def _render_purchase(self, data: dict) -> None:
        """Render a single purchase."""
        purchase = data["data"]["purchase"]

        panel_content = f"""[bold]{purchase.get("item_name") or purchase["item_id"]}[/bold]

ID: {purchase["id"]}
For: {purchase.get("recipient_name") or "-"}
Price: {self._money(purchase["purchase_price"])}
Date: {purchase["purchase_date"]}
Store: {purchase.get("store_name") or "Not specified"}"""

        if purchase.get("payment_method"):
            panel_content += f"\nPayment: {purchase['payment_method']}"

        if purchase.get("was_on_sale"):
            panel_content += "\n[green]Bought on sale[/green]"

        if purchase.get("receipt_photo"):
            panel_content += f"\nReceipt: {purchase['receipt_photo']}"

        if purchase.get("notes"):
            panel_content += f"\nNotes: {purchase['notes']}"

        self.console.print(Panel(panel_content, title="Purchase", border_style="green"))

    def _render_budget(self, data: dict) -> None:
        """Render a yearly budget."""
        budget = data["data"]["budget"]
        self.console.print(
            f"\n[bold]Budget {budget['year']}[/bold]: {self._money(budget['total_budget'])}"
        )

    def _render_analytics(self, data: dict) -> None:
        """Render spend against budget and per-recipient allocations."""
        analytics = data["data"]["analytics"]

        total = analytics.get("total_budget", 0)
        spent = analytics.get("total_spent", 0)
        remaining = analytics.get("remaining_budget", total - spent)
        color = "green" if remaining >= 0 else "red"

        self.console.print(f"\n[bold]Budget Analytics: {analytics['year']}[/bold]")
        self.console.print(f"Budget: {self._money(total)}")
        self.console.print(f"Spent: {self._money(spent)}")
        self.console.print(f"Remaining: [{color}]{self._money(remaining)}[/{color}]")
        if total > 0:
            self.console.print(f"Used: {spent / total * 100:.1f}%")

        breakdown = analytics.get("recipients_breakdown", [])
        if breakdown:
            self.console.print("\n[dim]By recipient:[/dim]")
            table = Table(show_header=True, header_style="bold")
            table.add_column("Recipient")
            table.add_column("Allocated", justify="right")
            table.add_column("Spent", justify="right")
            table.add_column("Remaining", justify="right")

            for row in breakdown:
                row_remaining = row.get("remaining", row["allocated"] - row["spent"])
                row_color = "green" if row_remaining >= 0 else "red"
                table.add_row(
                    row["recipient_name"],
                    self._money(row["allocated"]),
                    self._money(row["spent"]),
                    f"[{row_color}]{self._money(row_remaining)}[/{row_color}]",
                )
            self.console.print(table)

    def error(self, message: str, error_code: str | None = None) -> None:
        """Output error message.

        Args:
            message: Error message
            error_code: Optional error code
        """
        if self.json_mode:
            output = {"success": False, "error": message}
            if error_code:
                output["error_code"] = error_code
            print(json.dumps(output))
        else:
            self.console.print(f"[red]✗ Error:[/red] {message}")

    def success(self, message: str, data: dict | None = None) -> None:
        """Output success message.

        Args:
            message: Success message
            data: Optional data to include
        """
        if self.json_mode:
            output: dict[str, Any] = {"success": True, "message": message}
            if data:
                output["data"] = data
            print(json.dumps(output, cls=JSONEncoder))
        else:
            self.console.print(f"[green]✓[/green] {message}")

    def warning(self, message: str) -> None:
        """Output warning message.

        Args:
            message: Warning message
        """
        if self.json_mode:
            print(json.dumps({"warning": message}))
        else:
            self.console.print(f"[yellow]⚠[/yellow] {message}")
