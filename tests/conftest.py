"""Shared test fixtures for Gift Tracker."""

from datetime import date

import pytest

from gift_tracker.analytics import Analytics
from gift_tracker.budget_repository import BudgetRepository
from gift_tracker.database import Database
from gift_tracker.gift_item_repository import GiftItemRepository
from gift_tracker.models import GiftItemCreate, PurchaseCreate, RecipientCreate
from gift_tracker.purchase_repository import PurchaseRepository
from gift_tracker.recipient_repository import RecipientRepository


@pytest.fixture
def temp_data_dir(tmp_path):
    """Create a temporary data directory."""
    data_dir = tmp_path / "test_data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def db(temp_data_dir):
    """Open a fresh database for each test."""
    database = Database(db_path=temp_data_dir / "gifts.db")
    yield database
    database.close()


@pytest.fixture
def recipients(db):
    return RecipientRepository(db)


@pytest.fixture
def gift_items(db):
    return GiftItemRepository(db)


@pytest.fixture
def purchases(db):
    return PurchaseRepository(db)


@pytest.fixture
def budgets(db):
    return BudgetRepository(db)


@pytest.fixture
def analytics(db):
    return Analytics(db)


@pytest.fixture
def alice(recipients):
    """Recipient with a 100.00 allocation."""
    return recipients.create(
        RecipientCreate(name="Alice", relationship="Sister", budget_allocation=100)
    )


@pytest.fixture
def novel(gift_items, alice):
    """Gift item for Alice with a 25.00 target price."""
    return gift_items.create(
        GiftItemCreate(recipient_id=alice.id, name="Novel", target_price=25)
    )


@pytest.fixture
def novel_purchase_data(novel):
    """Purchase input for the novel in December 2024."""
    return PurchaseCreate(
        item_id=novel.id,
        store_name="Bookshop",
        purchase_price=22.99,
        purchase_date=date(2024, 12, 1),
    )
