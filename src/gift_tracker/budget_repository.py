"""Yearly budget persistence operations."""

import logging
import sqlite3
from datetime import date, datetime

from .database import Database, now
from .models import Budget, BudgetCreate

logger = logging.getLogger(__name__)


def current_year() -> int:
    return date.today().year


def row_to_budget(row: sqlite3.Row) -> Budget:
    """Build a Budget from a database row."""
    return Budget(
        id=row["id"],
        total_budget=row["total_budget"],
        year=row["year"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class BudgetRepository:
    """Manages yearly budget rows.

    Several rows may exist for one year; the most recently created one is
    authoritative.
    """

    def __init__(self, db: Database):
        self.db = db

    def get_current(self) -> Budget | None:
        """Get the authoritative budget for the current calendar year."""
        return self.get_by_year(current_year())

    def get_by_year(self, year: int) -> Budget | None:
        """Get the authoritative budget for a year.

        Args:
            year: Calendar year

        Returns:
            Budget or None
        """
        row = self.db.execute(
            """
            SELECT * FROM budget
            WHERE year = ?
            ORDER BY created_at DESC, id DESC
            LIMIT 1
            """,
            (year,),
        ).fetchone()
        if not row:
            return None
        return row_to_budget(row)

    def get(self, budget_id: int) -> Budget | None:
        row = self.db.execute("SELECT * FROM budget WHERE id = ?", (budget_id,)).fetchone()
        if not row:
            return None
        return row_to_budget(row)

    def create(self, data: BudgetCreate) -> Budget:
        """Insert a budget row for ``data.year``."""
        timestamp = now()
        with self.db.transaction() as conn:
            cursor = conn.execute(
                """
                INSERT INTO budget (total_budget, year, created_at, updated_at)
                VALUES (?, ?, ?, ?)
                """,
                (data.total_budget, data.year, timestamp, timestamp),
            )
            budget_id = cursor.lastrowid

        logger.debug("Created budget %s for %s: %.2f", budget_id, data.year, data.total_budget)
        return self.get(budget_id)

    def update_or_create(self, year: int, total_budget: float) -> Budget:
        """Set the total for a year, creating the year's budget if needed.

        Args:
            year: Calendar year
            total_budget: New total

        Returns:
            The year's authoritative Budget
        """
        existing = self.get_by_year(year)
        if existing is None:
            return self.create(BudgetCreate(total_budget=total_budget, year=year))

        with self.db.transaction() as conn:
            conn.execute(
                "UPDATE budget SET total_budget = ?, updated_at = ? WHERE id = ?",
                (total_budget, now(), existing.id),
            )

        logger.debug("Updated budget %s for %s: %.2f", existing.id, year, total_budget)
        return self.get(existing.id)
