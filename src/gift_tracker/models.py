"""Core data models for Gift Tracker."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, ValidationInfo, computed_field, field_validator


class GiftStatus(str, Enum):
    """Lifecycle status of a gift idea."""

    NEEDED = "needed"
    RESEARCHING = "researching"
    READY_TO_BUY = "ready_to_buy"
    PURCHASED = "purchased"


# --- Stored entities ---


class Recipient(BaseModel):
    """A person being shopped for."""

    id: int
    name: str
    relationship: str | None = None
    budget_allocation: float = 0.0
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class GiftItem(BaseModel):
    """A candidate or planned gift for a recipient."""

    id: int
    recipient_id: int
    name: str
    description: str | None = None
    priority: int = Field(default=1, ge=1, le=5)
    status: GiftStatus = GiftStatus.NEEDED
    target_price: float | None = None
    current_best_price: float | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    recipient_name: str | None = None


class Purchase(BaseModel):
    """A completed buy linked to one gift item."""

    id: int
    item_id: int
    store_name: str | None = None
    purchase_price: float
    purchase_date: date
    payment_method: str | None = None
    receipt_photo: str | None = None
    was_on_sale: bool = False
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    item_name: str | None = None
    recipient_name: str | None = None


class Budget(BaseModel):
    """Total planned spend for a calendar year."""

    id: int
    total_budget: float
    year: int
    created_at: datetime
    updated_at: datetime


class PriceHistory(BaseModel):
    """A scraped price observation for a gift item.

    The table exists in the schema but nothing reads or writes it yet.
    """

    id: int
    item_id: int
    store_name: str
    price: float
    product_url: str | None = None
    scraped_at: datetime


# --- Input models ---
#
# Create models carry the defaults of a new row. Update models leave every
# field optional; only fields explicitly set on the instance are written
# (see ``model_dump(exclude_unset=True)`` in the repositories).


class RecipientCreate(BaseModel):
    """Validated input for a new recipient."""

    name: str = Field(min_length=1, max_length=100)
    relationship: str | None = Field(default=None, max_length=50)
    budget_allocation: float = Field(default=0.0, ge=0)
    notes: str | None = Field(default=None, max_length=500)


class RecipientUpdate(BaseModel):
    """Partial update for a recipient."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    relationship: str | None = Field(default=None, max_length=50)
    budget_allocation: float | None = Field(default=None, ge=0)
    notes: str | None = Field(default=None, max_length=500)

    @field_validator("name", "budget_allocation")
    @classmethod
    def reject_null(cls, value, info: ValidationInfo):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class GiftItemCreate(BaseModel):
    """Validated input for a new gift item."""

    recipient_id: int
    name: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=500)
    priority: int = Field(default=1, ge=1, le=5)
    status: GiftStatus = GiftStatus.NEEDED
    target_price: float | None = Field(default=None, ge=0)
    current_best_price: float | None = Field(default=None, ge=0)
    notes: str | None = Field(default=None, max_length=500)


class GiftItemUpdate(BaseModel):
    """Partial update for a gift item."""

    recipient_id: int | None = None
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=500)
    priority: int | None = Field(default=None, ge=1, le=5)
    status: GiftStatus | None = None
    target_price: float | None = Field(default=None, ge=0)
    current_best_price: float | None = Field(default=None, ge=0)
    notes: str | None = Field(default=None, max_length=500)

    @field_validator("recipient_id", "name", "priority", "status")
    @classmethod
    def reject_null(cls, value, info: ValidationInfo):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class PurchaseCreate(BaseModel):
    """Validated input for a new purchase."""

    item_id: int
    store_name: str | None = Field(default=None, max_length=100)
    purchase_price: float = Field(ge=0)
    purchase_date: date
    payment_method: str | None = Field(default=None, max_length=50)
    receipt_photo: str | None = Field(default=None, max_length=500)
    was_on_sale: bool = False
    notes: str | None = Field(default=None, max_length=500)


class PurchaseUpdate(BaseModel):
    """Partial update for a purchase.

    ``item_id`` is not updatable; moving a purchase to another item would
    bypass the status transition owned by create and delete.
    """

    store_name: str | None = Field(default=None, max_length=100)
    purchase_price: float | None = Field(default=None, ge=0)
    purchase_date: date | None = None
    payment_method: str | None = Field(default=None, max_length=50)
    receipt_photo: str | None = Field(default=None, max_length=500)
    was_on_sale: bool | None = None
    notes: str | None = Field(default=None, max_length=500)

    @field_validator("purchase_price", "purchase_date", "was_on_sale")
    @classmethod
    def reject_null(cls, value, info: ValidationInfo):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class BudgetCreate(BaseModel):
    """Validated input for a yearly budget."""

    total_budget: float = Field(ge=0)
    year: int = Field(default_factory=lambda: date.today().year)


# --- Analytics ---


class RecipientBreakdown(BaseModel):
    """Spend against allocation for one recipient."""

    recipient_id: int
    recipient_name: str
    allocated: float = 0.0
    spent: float = 0.0

    @computed_field
    @property
    def remaining(self) -> float:
        return round(self.allocated - self.spent, 2)

    @property
    def percentage_used(self) -> float:
        if self.allocated <= 0:
            return 0.0
        return round(self.spent / self.allocated * 100, 1)

    @property
    def is_over_budget(self) -> bool:
        return self.spent > self.allocated


class BudgetAnalytics(BaseModel):
    """Spend report for a budget year."""

    year: int
    total_budget: float
    total_spent: float = 0.0
    recipients_breakdown: list[RecipientBreakdown] = Field(default_factory=list)

    @computed_field
    @property
    def remaining_budget(self) -> float:
        return round(self.total_budget - self.total_spent, 2)

    @property
    def percentage_used(self) -> float:
        if self.total_budget <= 0:
            return 0.0
        return round(self.total_spent / self.total_budget * 100, 1)
