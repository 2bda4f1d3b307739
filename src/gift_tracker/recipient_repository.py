"""Recipient persistence operations."""

import logging
import sqlite3
from datetime import datetime

from .database import Database, now
from .models import Recipient, RecipientCreate, RecipientUpdate

logger = logging.getLogger(__name__)


def row_to_recipient(row: sqlite3.Row) -> Recipient:
    """Build a Recipient from a database row."""
    return Recipient(
        id=row["id"],
        name=row["name"],
        relationship=row["relationship"],
        budget_allocation=row["budget_allocation"] or 0.0,
        notes=row["notes"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class RecipientRepository:
    """Manages recipient rows."""

    def __init__(self, db: Database):
        self.db = db

    def list_all(self) -> list[Recipient]:
        """Get all recipients ordered by name."""
        rows = self.db.execute("SELECT * FROM recipients ORDER BY name ASC, id ASC").fetchall()
        return [row_to_recipient(row) for row in rows]

    def get(self, recipient_id: int) -> Recipient | None:
        """Get a recipient by ID.

        Args:
            recipient_id: Recipient ID

        Returns:
            Recipient if found, None otherwise
        """
        row = self.db.execute("SELECT * FROM recipients WHERE id = ?", (recipient_id,)).fetchone()
        if not row:
            return None
        return row_to_recipient(row)

    def create(self, data: RecipientCreate) -> Recipient:
        """Insert a new recipient.

        Args:
            data: Validated recipient fields

        Returns:
            The stored Recipient
        """
        timestamp = now()
        with self.db.transaction() as conn:
            cursor = conn.execute(
                """
                INSERT INTO recipients
                (name, relationship, budget_allocation, notes, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    data.name,
                    data.relationship,
                    data.budget_allocation,
                    data.notes,
                    timestamp,
                    timestamp,
                ),
            )
            recipient_id = cursor.lastrowid

        logger.debug("Created recipient %s (%s)", recipient_id, data.name)
        return self.get(recipient_id)

    def update(self, recipient_id: int, changes: RecipientUpdate) -> Recipient | None:
        """Apply the explicitly set fields of ``changes`` to a recipient.

        Returns:
            The updated Recipient, or None if it doesn't exist
        """
        if self.get(recipient_id) is None:
            return None

        fields = changes.model_dump(mode="json", exclude_unset=True)
        fields["updated_at"] = now()
        assignments = ", ".join(f"{column} = ?" for column in fields)

        with self.db.transaction() as conn:
            conn.execute(
                f"UPDATE recipients SET {assignments} WHERE id = ?",
                (*fields.values(), recipient_id),
            )

        logger.debug("Updated recipient %s: %s", recipient_id, sorted(fields))
        return self.get(recipient_id)

    def delete(self, recipient_id: int) -> bool:
        """Delete a recipient along with its gift items and their purchases.

        Returns:
            True if a row was removed
        """
        with self.db.transaction() as conn:
            cursor = conn.execute("DELETE FROM recipients WHERE id = ?", (recipient_id,))

        removed = cursor.rowcount > 0
        if removed:
            logger.debug("Deleted recipient %s", recipient_id)
        return removed
