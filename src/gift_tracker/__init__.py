"""Gift Tracker - Household gift planning with a yearly budget."""

from .analytics import Analytics
from .budget_repository import BudgetRepository
from .config import ConfigManager
from .database import Database
from .errors import NotFoundError
from .gift_item_repository import GiftItemRepository
from .models import (
    Budget,
    BudgetAnalytics,
    BudgetCreate,
    GiftItem,
    GiftItemCreate,
    GiftItemUpdate,
    GiftStatus,
    PriceHistory,
    Purchase,
    PurchaseCreate,
    PurchaseUpdate,
    Recipient,
    RecipientBreakdown,
    RecipientCreate,
    RecipientUpdate,
)
from .output_formatter import OutputFormatter
from .purchase_repository import PurchaseRepository
from .recipient_repository import RecipientRepository

__version__ = "0.1.0"

__all__ = [
    "Analytics",
    "Budget",
    "BudgetAnalytics",
    "BudgetCreate",
    "BudgetRepository",
    "ConfigManager",
    "Database",
    "GiftItem",
    "GiftItemCreate",
    "GiftItemRepository",
    "GiftItemUpdate",
    "GiftStatus",
    "NotFoundError",
    "OutputFormatter",
    "PriceHistory",
    "Purchase",
    "PurchaseCreate",
    "PurchaseRepository",
    "PurchaseUpdate",
    "Recipient",
    "RecipientBreakdown",
    "RecipientCreate",
    "RecipientRepository",
    "RecipientUpdate",
]
