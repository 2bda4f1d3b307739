"""Budget analytics for Gift Tracker."""

import logging

from .budget_repository import BudgetRepository, current_year
from .database import Database
from .models import BudgetAnalytics, RecipientBreakdown

logger = logging.getLogger(__name__)


class Analytics:
    """Computes spend-vs-allocation reports on demand."""

    def __init__(self, db: Database):
        """Initialize analytics.

        Args:
            db: Shared database handle
        """
        self.db = db
        self.budgets = BudgetRepository(db)

    def budget_analytics(self, year: int | None = None) -> BudgetAnalytics | None:
        """Report spending for a budget year.

        Purchases count toward the year their ``purchase_date`` falls in.
        Every recipient appears in the breakdown, including those without
        any gift items or purchases. Remaining amounts are not clamped, so
        overspending shows as a negative figure.

        Args:
            year: Calendar year. Defaults to the current year.

        Returns:
            BudgetAnalytics, or None if no budget exists for the year
        """
        if year is None:
            year = current_year()

        budget = self.budgets.get_by_year(year)
        if budget is None:
            logger.debug("No budget for %s; skipping analytics", year)
            return None

        year_key = f"{year:04d}"

        total_row = self.db.execute(
            """
            SELECT COALESCE(SUM(p.purchase_price), 0) AS total_spent
            FROM purchases p
            WHERE strftime('%Y', p.purchase_date) = ?
            """,
            (year_key,),
        ).fetchone()

        breakdown_rows = self.db.execute(
            """
            SELECT
                r.id AS recipient_id,
                r.name AS recipient_name,
                r.budget_allocation AS allocated,
                COALESCE(SUM(p.purchase_price), 0) AS spent
            FROM recipients r
            LEFT JOIN gift_items gi ON r.id = gi.recipient_id
            LEFT JOIN purchases p
                ON gi.id = p.item_id AND strftime('%Y', p.purchase_date) = ?
            GROUP BY r.id, r.name, r.budget_allocation
            ORDER BY r.name ASC, r.id ASC
            """,
            (year_key,),
        ).fetchall()

        breakdown = [
            RecipientBreakdown(
                recipient_id=row["recipient_id"],
                recipient_name=row["recipient_name"],
                allocated=row["allocated"] or 0.0,
                spent=round(row["spent"] or 0.0, 2),
            )
            for row in breakdown_rows
        ]

        return BudgetAnalytics(
            year=year,
            total_budget=budget.total_budget,
            total_spent=round(total_row["total_spent"] or 0.0, 2),
            recipients_breakdown=breakdown,
        )
