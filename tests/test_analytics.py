"""Tests for budget analytics."""

from datetime import date

import pytest

from gift_tracker.models import (
    BudgetCreate,
    GiftItemCreate,
    PurchaseCreate,
    RecipientCreate,
)


@pytest.fixture
def budget_2024(budgets):
    return budgets.create(BudgetCreate(total_budget=1000, year=2024))


def buy(gift_items, purchases, recipient_id, name, price, purchase_date):
    item = gift_items.create(GiftItemCreate(recipient_id=recipient_id, name=name))
    return purchases.create(
        PurchaseCreate(item_id=item.id, purchase_price=price, purchase_date=purchase_date)
    )


class TestBudgetAnalytics:
    """Tests for the spend report."""

    def test_no_budget_returns_none(self, analytics, alice):
        assert analytics.budget_analytics(2024) is None

    def test_defaults_to_current_year(self, analytics, budgets):
        budgets.create(BudgetCreate(total_budget=300))

        report = analytics.budget_analytics()

        assert report is not None
        assert report.year == date.today().year
        assert report.total_budget == 300

    def test_single_purchase_scenario(
        self, analytics, purchases, gift_items, budget_2024, novel, novel_purchase_data
    ):
        purchases.create(novel_purchase_data)

        report = analytics.budget_analytics(2024)

        assert report.total_budget == 1000
        assert report.total_spent == pytest.approx(22.99)
        assert report.remaining_budget == pytest.approx(977.01)
        assert len(report.recipients_breakdown) == 1
        row = report.recipients_breakdown[0]
        assert row.recipient_name == "Alice"
        assert row.allocated == 100
        assert row.spent == pytest.approx(22.99)
        assert row.remaining == pytest.approx(77.01)

    def test_deleting_purchase_returns_spend_to_zero(
        self, analytics, purchases, budget_2024, novel_purchase_data
    ):
        purchase = purchases.create(novel_purchase_data)
        purchases.delete(purchase.id)

        report = analytics.budget_analytics(2024)

        assert report.total_spent == 0
        assert report.remaining_budget == 1000
        assert report.recipients_breakdown[0].spent == 0

    def test_only_target_year_counts(
        self, analytics, budgets, purchases, gift_items, budget_2024, alice
    ):
        buy(gift_items, purchases, alice.id, "Last year", 40, date(2023, 12, 31))
        buy(gift_items, purchases, alice.id, "This year", 15, date(2024, 1, 1))
        buy(gift_items, purchases, alice.id, "Next year", 70, date(2025, 1, 1))

        report = analytics.budget_analytics(2024)

        assert report.total_spent == 15
        assert report.recipients_breakdown[0].spent == 15

    def test_recipient_without_items_appears_with_zero(
        self, analytics, recipients, budget_2024
    ):
        recipients.create(RecipientCreate(name="Zed"))

        report = analytics.budget_analytics(2024)

        [row] = report.recipients_breakdown
        assert row.recipient_name == "Zed"
        assert row.allocated == 0
        assert row.spent == 0
        assert row.remaining == 0

    def test_breakdown_ordered_by_name(self, analytics, recipients, budget_2024):
        for name in ["Mallory", "Bob", "Eve"]:
            recipients.create(RecipientCreate(name=name))

        names = [row.recipient_name for row in analytics.budget_analytics(2024).recipients_breakdown]
        assert names == ["Bob", "Eve", "Mallory"]

    def test_overspend_is_negative(self, analytics, budgets, purchases, gift_items, alice):
        budgets.create(BudgetCreate(total_budget=50, year=2024))
        buy(gift_items, purchases, alice.id, "Bike", 180, date(2024, 5, 5))

        report = analytics.budget_analytics(2024)

        assert report.remaining_budget == -130
        row = report.recipients_breakdown[0]
        assert row.remaining == -80
        assert row.is_over_budget is True
        assert row.percentage_used == 180.0

    def test_breakdown_sums_to_total(
        self, analytics, recipients, purchases, gift_items, budget_2024, alice
    ):
        bob = recipients.create(RecipientCreate(name="Bob", budget_allocation=60))
        buy(gift_items, purchases, alice.id, "Scarf", 30.5, date(2024, 12, 2))
        buy(gift_items, purchases, alice.id, "Book", 12.25, date(2024, 12, 3))
        buy(gift_items, purchases, bob.id, "Mug", 9.99, date(2024, 12, 4))

        report = analytics.budget_analytics(2024)

        assert sum(row.spent for row in report.recipients_breakdown) == pytest.approx(
            report.total_spent
        )
        assert report.remaining_budget == pytest.approx(
            report.total_budget - report.total_spent
        )

    def test_unpurchased_items_do_not_count(
        self, analytics, gift_items, budget_2024, alice
    ):
        gift_items.create(GiftItemCreate(recipient_id=alice.id, name="Idea", target_price=99))

        report = analytics.budget_analytics(2024)

        assert report.total_spent == 0
        assert report.recipients_breakdown[0].spent == 0

    def test_serialized_report_includes_remaining(
        self, analytics, purchases, budget_2024, novel_purchase_data
    ):
        purchases.create(novel_purchase_data)

        dumped = analytics.budget_analytics(2024).model_dump(mode="json")

        assert dumped["remaining_budget"] == pytest.approx(977.01)
        assert dumped["recipients_breakdown"][0]["remaining"] == pytest.approx(77.01)
        assert dumped["recipients_breakdown"][0]["recipient_id"] > 0

    def test_percentage_used(self, analytics, purchases, gift_items, budget_2024, alice):
        buy(gift_items, purchases, alice.id, "Lamp", 250, date(2024, 8, 8))

        report = analytics.budget_analytics(2024)

        assert report.percentage_used == 25.0
        assert report.recipients_breakdown[0].percentage_used == 250.0
