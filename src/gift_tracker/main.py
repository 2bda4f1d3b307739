"""CLI entry point for Gift Tracker."""

from datetime import date
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from pydantic import ValidationError

from .analytics import Analytics
from .budget_repository import BudgetRepository
from .config import ConfigManager
from .database import Database
from .errors import NotFoundError
from .gift_item_repository import GiftItemRepository
from .logging_setup import setup_logging
from .models import (
    BudgetCreate,
    GiftItemCreate,
    GiftItemUpdate,
    GiftStatus,
    PurchaseCreate,
    PurchaseUpdate,
    RecipientCreate,
    RecipientUpdate,
)
from .output_formatter import OutputFormatter
from .purchase_repository import PurchaseRepository
from .recipient_repository import RecipientRepository

app = typer.Typer(
    name="gift",
    help="Household gift planning: recipients, ideas, purchases and budget",
    no_args_is_help=True,
)

# Global state for formatter, config and database (set by callback)
formatter: OutputFormatter = OutputFormatter()
config: ConfigManager | None = None
database: Database | None = None


def get_config() -> ConfigManager:
    """Get or create ConfigManager instance."""
    global config
    if config is None:
        config = ConfigManager()
    return config


def get_database() -> Database:
    """Get or open the shared Database using config values."""
    global database
    if database is None:
        database = Database(get_config().data.db_path)
    return database


def validation_message(error: ValidationError) -> str:
    """Flatten pydantic errors into one line."""
    parts = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"])
        parts.append(f"{location}: {err['msg']}" if location else err["msg"])
    return "; ".join(parts)


def fail(error: Exception) -> NoReturn:
    """Report an exception and exit with status 1."""
    if isinstance(error, NotFoundError):
        formatter.error(str(error), error_code="NOT_FOUND")
    elif isinstance(error, ValidationError):
        formatter.error(validation_message(error), error_code="VALIDATION_ERROR")
    else:
        formatter.error(str(error))
    raise typer.Exit(code=1)


def only_set(**options) -> dict:
    """Keep the options that were actually given on the command line."""
    return {key: value for key, value in options.items() if value is not None}


@app.callback()
def main(
    ctx: typer.Context,
    json_output: Annotated[
        bool, typer.Option("--json", help="Output as JSON for programmatic use")
    ] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Gift Tracker CLI - Plan gifts and keep the holiday budget honest."""
    global formatter, config, database

    config = ConfigManager()
    setup_logging("DEBUG" if verbose else config.logging.level)
    formatter = OutputFormatter(json_mode=json_output, currency_symbol=config.budget.currency_symbol)

    # CLI --data-dir overrides config, which overrides default
    db_path = data_dir / config.data.db_name if data_dir else config.data.db_path
    database = Database(db_path)
    ctx.call_on_close(database.close)


# --- Recipients ---

recipient_app = typer.Typer(help="People you are shopping for")
app.add_typer(recipient_app, name="recipient")


@recipient_app.command("add")
def recipient_add(
    name: Annotated[str, typer.Argument(help="Recipient name")],
    relationship: Annotated[
        str | None, typer.Option("--relationship", "-r", help="e.g. Sister, Coworker")
    ] = None,
    allocation: Annotated[
        float, typer.Option("--allocation", "-a", help="Budget allocated to this person")
    ] = 0.0,
    notes: Annotated[str | None, typer.Option("--notes", "-n", help="Additional notes")] = None,
) -> None:
    """Add a recipient."""
    try:
        data = RecipientCreate(
            name=name, relationship=relationship, budget_allocation=allocation, notes=notes
        )
        recipient = RecipientRepository(get_database()).create(data)
        output_data = {
            "success": True,
            "message": f"Added recipient {recipient.name}",
            "data": {"recipient": recipient.model_dump(mode="json")},
        }
        formatter.output(output_data, output_data["message"])
    except Exception as e:
        fail(e)


@recipient_app.command("list")
def recipient_list() -> None:
    """List recipients by name."""
    try:
        recipients = RecipientRepository(get_database()).list_all()
        formatter.output(
            {
                "success": True,
                "data": {"recipients": [r.model_dump(mode="json") for r in recipients]},
            }
        )
    except Exception as e:
        fail(e)


@recipient_app.command("show")
def recipient_show(
    recipient_id: Annotated[int, typer.Argument(help="Recipient ID")],
) -> None:
    """Show one recipient."""
    try:
        recipient = RecipientRepository(get_database()).get(recipient_id)
        if recipient is None:
            raise NotFoundError("Recipient", recipient_id)
        formatter.output({"success": True, "data": {"recipient": recipient.model_dump(mode="json")}})
    except Exception as e:
        fail(e)


@recipient_app.command("update")
def recipient_update(
    recipient_id: Annotated[int, typer.Argument(help="Recipient ID")],
    name: Annotated[str | None, typer.Option("--name", help="New name")] = None,
    relationship: Annotated[
        str | None, typer.Option("--relationship", "-r", help="Relationship")
    ] = None,
    allocation: Annotated[
        float | None, typer.Option("--allocation", "-a", help="Budget allocation")
    ] = None,
    notes: Annotated[str | None, typer.Option("--notes", "-n", help="Notes")] = None,
) -> None:
    """Update fields of a recipient; omitted fields are kept."""
    try:
        changes = RecipientUpdate(
            **only_set(
                name=name, relationship=relationship, budget_allocation=allocation, notes=notes
            )
        )
        recipient = RecipientRepository(get_database()).update(recipient_id, changes)
        if recipient is None:
            raise NotFoundError("Recipient", recipient_id)
        output_data = {
            "success": True,
            "message": f"Updated recipient {recipient.name}",
            "data": {"recipient": recipient.model_dump(mode="json")},
        }
        formatter.output(output_data, output_data["message"])
    except Exception as e:
        fail(e)


@recipient_app.command("remove")
def recipient_remove(
    recipient_id: Annotated[int, typer.Argument(help="Recipient ID")],
) -> None:
    """Remove a recipient with all their gift ideas and purchases."""
    try:
        if not RecipientRepository(get_database()).delete(recipient_id):
            raise NotFoundError("Recipient", recipient_id)
        formatter.success(f"Removed recipient {recipient_id}")
    except Exception as e:
        fail(e)


# --- Gift items ---

gift_app = typer.Typer(help="Gift ideas and their status")
app.add_typer(gift_app, name="gift")


@gift_app.command("add")
def gift_add(
    recipient_id: Annotated[int, typer.Argument(help="Recipient ID")],
    name: Annotated[str, typer.Argument(help="Gift name")],
    description: Annotated[
        str | None, typer.Option("--description", "-d", help="Description")
    ] = None,
    priority: Annotated[
        int | None, typer.Option("--priority", "-p", min=1, max=5, help="Priority 1-5")
    ] = None,
    status: Annotated[GiftStatus | None, typer.Option("--status", help="Initial status")] = None,
    target: Annotated[float | None, typer.Option("--target", help="Target price")] = None,
    best: Annotated[float | None, typer.Option("--best", help="Best price seen")] = None,
    notes: Annotated[str | None, typer.Option("--notes", "-n", help="Notes")] = None,
) -> None:
    """Add a gift idea for a recipient."""
    try:
        cfg = get_config()
        data = GiftItemCreate(
            recipient_id=recipient_id,
            name=name,
            description=description,
            priority=priority if priority is not None else cfg.defaults.priority,
            status=status or cfg.defaults.status,
            target_price=target,
            current_best_price=best,
            notes=notes,
        )
        item = GiftItemRepository(get_database()).create(data)
        output_data = {
            "success": True,
            "message": f"Added {item.name} for {item.recipient_name}",
            "data": {"gift_item": item.model_dump(mode="json")},
        }
        formatter.output(output_data, output_data["message"])
    except Exception as e:
        fail(e)


@gift_app.command("list")
def gift_list(
    recipient_id: Annotated[
        int | None, typer.Option("--recipient-id", "-r", help="Only this recipient's ideas")
    ] = None,
) -> None:
    """List gift ideas, newest first or by priority for one recipient."""
    try:
        items = GiftItemRepository(get_database()).list_all(recipient_id=recipient_id)
        formatter.output(
            {"success": True, "data": {"gift_items": [i.model_dump(mode="json") for i in items]}}
        )
    except Exception as e:
        fail(e)


@gift_app.command("show")
def gift_show(
    item_id: Annotated[int, typer.Argument(help="Gift item ID")],
) -> None:
    """Show one gift idea."""
    try:
        item = GiftItemRepository(get_database()).get(item_id)
        if item is None:
            raise NotFoundError("Gift item", item_id)
        formatter.output({"success": True, "data": {"gift_item": item.model_dump(mode="json")}})
    except Exception as e:
        fail(e)


@gift_app.command("update")
def gift_update(
    item_id: Annotated[int, typer.Argument(help="Gift item ID")],
    recipient_id: Annotated[
        int | None, typer.Option("--recipient-id", "-r", help="Move to another recipient")
    ] = None,
    name: Annotated[str | None, typer.Option("--name", help="New name")] = None,
    description: Annotated[
        str | None, typer.Option("--description", "-d", help="Description")
    ] = None,
    priority: Annotated[
        int | None, typer.Option("--priority", "-p", min=1, max=5, help="Priority 1-5")
    ] = None,
    target: Annotated[float | None, typer.Option("--target", help="Target price")] = None,
    best: Annotated[float | None, typer.Option("--best", help="Best price seen")] = None,
    notes: Annotated[str | None, typer.Option("--notes", "-n", help="Notes")] = None,
) -> None:
    """Update fields of a gift idea; omitted fields are kept."""
    try:
        changes = GiftItemUpdate(
            **only_set(
                recipient_id=recipient_id,
                name=name,
                description=description,
                priority=priority,
                target_price=target,
                current_best_price=best,
                notes=notes,
            )
        )
        item = GiftItemRepository(get_database()).update(item_id, changes)
        if item is None:
            raise NotFoundError("Gift item", item_id)
        output_data = {
            "success": True,
            "message": f"Updated {item.name}",
            "data": {"gift_item": item.model_dump(mode="json")},
        }
        formatter.output(output_data, output_data["message"])
    except Exception as e:
        fail(e)


@gift_app.command("status")
def gift_status(
    item_id: Annotated[int, typer.Argument(help="Gift item ID")],
    status: Annotated[GiftStatus, typer.Argument(help="New status")],
) -> None:
    """Set a gift's status by hand, without touching purchases."""
    try:
        item = GiftItemRepository(get_database()).set_status(item_id, status)
        if item is None:
            raise NotFoundError("Gift item", item_id)
        output_data = {
            "success": True,
            "message": f"{item.name} is now {item.status.value}",
            "data": {"gift_item": item.model_dump(mode="json")},
        }
        formatter.output(output_data, output_data["message"])
    except Exception as e:
        fail(e)


@gift_app.command("remove")
def gift_remove(
    item_id: Annotated[int, typer.Argument(help="Gift item ID")],
) -> None:
    """Remove a gift idea and its purchase."""
    try:
        if not GiftItemRepository(get_database()).delete(item_id):
            raise NotFoundError("Gift item", item_id)
        formatter.success(f"Removed gift item {item_id}")
    except Exception as e:
        fail(e)


# --- Purchases ---

purchase_app = typer.Typer(help="Record what was bought")
app.add_typer(purchase_app, name="purchase")


@purchase_app.command("add")
def purchase_add(
    item_id: Annotated[int, typer.Argument(help="Gift item ID")],
    price: Annotated[float, typer.Argument(help="Price paid")],
    purchase_date: Annotated[
        str | None, typer.Option("--date", help="Purchase date (YYYY-MM-DD), default today")
    ] = None,
    store: Annotated[str | None, typer.Option("--store", "-s", help="Store name")] = None,
    payment: Annotated[str | None, typer.Option("--payment", help="Payment method")] = None,
    receipt: Annotated[str | None, typer.Option("--receipt", help="Receipt photo path")] = None,
    sale: Annotated[bool, typer.Option("--sale", help="Bought on sale")] = False,
    notes: Annotated[str | None, typer.Option("--notes", "-n", help="Notes")] = None,
) -> None:
    """Record a purchase; the gift is marked purchased."""
    try:
        data = PurchaseCreate(
            item_id=item_id,
            purchase_price=price,
            purchase_date=purchase_date or date.today(),
            store_name=store,
            payment_method=payment or get_config().defaults.payment_method,
            receipt_photo=receipt,
            was_on_sale=sale,
            notes=notes,
        )
        purchase = PurchaseRepository(get_database()).create(data)
        output_data = {
            "success": True,
            "message": f"Bought {purchase.item_name} for {purchase.purchase_price:.2f}",
            "data": {"purchase": purchase.model_dump(mode="json")},
        }
        formatter.output(output_data, output_data["message"])
    except Exception as e:
        fail(e)


@purchase_app.command("list")
def purchase_list() -> None:
    """List purchases, most recent first."""
    try:
        purchases = PurchaseRepository(get_database()).list_all()
        formatter.output(
            {
                "success": True,
                "data": {"purchases": [p.model_dump(mode="json") for p in purchases]},
            }
        )
    except Exception as e:
        fail(e)


@purchase_app.command("show")
def purchase_show(
    purchase_id: Annotated[int | None, typer.Argument(help="Purchase ID")] = None,
    item_id: Annotated[
        int | None, typer.Option("--item-id", help="Look up the purchase of a gift item")
    ] = None,
) -> None:
    """Show one purchase, by ID or by gift item."""
    try:
        repo = PurchaseRepository(get_database())
        if item_id is not None:
            purchase = repo.get_by_item(item_id)
            if purchase is None:
                raise NotFoundError("Purchase for gift item", item_id)
        elif purchase_id is not None:
            purchase = repo.get(purchase_id)
            if purchase is None:
                raise NotFoundError("Purchase", purchase_id)
        else:
            raise typer.BadParameter("Give a purchase ID or --item-id")
        formatter.output({"success": True, "data": {"purchase": purchase.model_dump(mode="json")}})
    except typer.BadParameter:
        raise
    except Exception as e:
        fail(e)


@purchase_app.command("update")
def purchase_update(
    purchase_id: Annotated[int, typer.Argument(help="Purchase ID")],
    price: Annotated[float | None, typer.Option("--price", "-p", help="Price paid")] = None,
    purchase_date: Annotated[
        str | None, typer.Option("--date", help="Purchase date (YYYY-MM-DD)")
    ] = None,
    store: Annotated[str | None, typer.Option("--store", "-s", help="Store name")] = None,
    payment: Annotated[str | None, typer.Option("--payment", help="Payment method")] = None,
    receipt: Annotated[str | None, typer.Option("--receipt", help="Receipt photo path")] = None,
    sale: Annotated[
        bool | None, typer.Option("--sale/--no-sale", help="Bought on sale")
    ] = None,
    notes: Annotated[str | None, typer.Option("--notes", "-n", help="Notes")] = None,
) -> None:
    """Update fields of a purchase; the gift status is not changed."""
    try:
        changes = PurchaseUpdate(
            **only_set(
                purchase_price=price,
                purchase_date=purchase_date,
                store_name=store,
                payment_method=payment,
                receipt_photo=receipt,
                was_on_sale=sale,
                notes=notes,
            )
        )
        purchase = PurchaseRepository(get_database()).update(purchase_id, changes)
        if purchase is None:
            raise NotFoundError("Purchase", purchase_id)
        output_data = {
            "success": True,
            "message": f"Updated purchase {purchase_id}",
            "data": {"purchase": purchase.model_dump(mode="json")},
        }
        formatter.output(output_data, output_data["message"])
    except Exception as e:
        fail(e)


@purchase_app.command("remove")
def purchase_remove(
    purchase_id: Annotated[int, typer.Argument(help="Purchase ID")],
) -> None:
    """Remove a purchase; the gift goes back to ready_to_buy."""
    try:
        if not PurchaseRepository(get_database()).delete(purchase_id):
            raise NotFoundError("Purchase", purchase_id)
        formatter.success(f"Removed purchase {purchase_id}")
    except Exception as e:
        fail(e)


# --- Budget ---

budget_app = typer.Typer(help="Yearly budget and spending analytics")
app.add_typer(budget_app, name="budget")


@budget_app.command("show")
def budget_show(
    year: Annotated[int | None, typer.Option("--year", "-y", help="Year, default current")] = None,
) -> None:
    """Show the budget for a year."""
    try:
        repo = BudgetRepository(get_database())
        budget = repo.get_by_year(year) if year is not None else repo.get_current()

        if budget is None:
            formatter.warning("No budget found for the specified year")
            return

        formatter.output({"success": True, "data": {"budget": budget.model_dump(mode="json")}})
    except Exception as e:
        fail(e)


@budget_app.command("set")
def budget_set(
    amount: Annotated[float, typer.Argument(help="Total budget for the year")],
    year: Annotated[int | None, typer.Option("--year", "-y", help="Year, default current")] = None,
) -> None:
    """Set the budget for a year, creating it if needed."""
    try:
        data = BudgetCreate(total_budget=amount, **only_set(year=year))
        budget = BudgetRepository(get_database()).update_or_create(data.year, data.total_budget)
        output_data = {
            "success": True,
            "message": f"Budget set: {budget.total_budget:.2f} for {budget.year}",
            "data": {"budget": budget.model_dump(mode="json")},
        }
        formatter.output(output_data, output_data["message"])
    except Exception as e:
        fail(e)


@budget_app.command("create")
def budget_create(
    amount: Annotated[float, typer.Argument(help="Total budget for the year")],
    year: Annotated[int | None, typer.Option("--year", "-y", help="Year, default current")] = None,
) -> None:
    """Add a new budget row for a year; it becomes the year's budget."""
    try:
        data = BudgetCreate(total_budget=amount, **only_set(year=year))
        budget = BudgetRepository(get_database()).create(data)
        output_data = {
            "success": True,
            "message": f"Budget created: {budget.total_budget:.2f} for {budget.year}",
            "data": {"budget": budget.model_dump(mode="json")},
        }
        formatter.output(output_data, output_data["message"])
    except Exception as e:
        fail(e)


@budget_app.command("analytics")
def budget_analytics(
    year: Annotated[int | None, typer.Option("--year", "-y", help="Year, default current")] = None,
) -> None:
    """Spending against the yearly budget and per-recipient allocations."""
    try:
        report = Analytics(get_database()).budget_analytics(year)

        if report is None:
            formatter.warning("No budget found for analytics")
            return

        formatter.output(
            {"success": True, "data": {"analytics": report.model_dump(mode="json")}},
            f"Analytics for {report.year}",
        )
    except Exception as e:
        fail(e)


if __name__ == "__main__":
    app()
