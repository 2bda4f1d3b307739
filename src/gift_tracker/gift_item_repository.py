"""Gift item persistence operations."""

import logging
import sqlite3
from datetime import datetime

from .database import Database, now
from .models import GiftItem, GiftItemCreate, GiftItemUpdate, GiftStatus

logger = logging.getLogger(__name__)

SELECT_WITH_RECIPIENT = """
    SELECT gi.*, r.name AS recipient_name
    FROM gift_items gi
    LEFT JOIN recipients r ON gi.recipient_id = r.id
"""


def row_to_gift_item(row: sqlite3.Row) -> GiftItem:
    """Build a GiftItem from a joined database row."""
    return GiftItem(
        id=row["id"],
        recipient_id=row["recipient_id"],
        name=row["name"],
        description=row["description"],
        priority=row["priority"],
        status=GiftStatus(row["status"]),
        target_price=row["target_price"],
        current_best_price=row["current_best_price"],
        notes=row["notes"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
        recipient_name=row["recipient_name"],
    )


class GiftItemRepository:
    """Manages gift item rows."""

    def __init__(self, db: Database):
        self.db = db

    def list_all(self, recipient_id: int | None = None) -> list[GiftItem]:
        """Get gift items, newest first.

        Args:
            recipient_id: Only return items for this recipient. The filtered
                list is ordered by priority (highest first), then newest first.

        Returns:
            List of GiftItem
        """
        if recipient_id is None:
            rows = self.db.execute(
                SELECT_WITH_RECIPIENT + " ORDER BY gi.created_at DESC, gi.id DESC"
            ).fetchall()
        else:
            rows = self.db.execute(
                SELECT_WITH_RECIPIENT
                + """
                WHERE gi.recipient_id = ?
                ORDER BY gi.priority DESC, gi.created_at DESC, gi.id DESC
                """,
                (recipient_id,),
            ).fetchall()
        return [row_to_gift_item(row) for row in rows]

    def get(self, item_id: int) -> GiftItem | None:
        """Get a gift item by ID, or None if not found."""
        row = self.db.execute(SELECT_WITH_RECIPIENT + " WHERE gi.id = ?", (item_id,)).fetchone()
        if not row:
            return None
        return row_to_gift_item(row)

    def create(self, data: GiftItemCreate) -> GiftItem:
        """Insert a new gift item.

        The recipient is not looked up first; a dangling ``recipient_id``
        fails on the foreign key and raises ``sqlite3.IntegrityError``.
        """
        timestamp = now()
        with self.db.transaction() as conn:
            cursor = conn.execute(
                """
                INSERT INTO gift_items
                (recipient_id, name, description, priority, status, target_price,
                 current_best_price, notes, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    data.recipient_id,
                    data.name,
                    data.description,
                    data.priority,
                    data.status.value,
                    data.target_price,
                    data.current_best_price,
                    data.notes,
                    timestamp,
                    timestamp,
                ),
            )
            item_id = cursor.lastrowid

        logger.debug("Created gift item %s for recipient %s", item_id, data.recipient_id)
        return self.get(item_id)

    def update(self, item_id: int, changes: GiftItemUpdate) -> GiftItem | None:
        """Apply the explicitly set fields of ``changes`` to a gift item.

        Returns:
            The updated GiftItem, or None if it doesn't exist
        """
        if self.get(item_id) is None:
            return None

        fields = changes.model_dump(mode="json", exclude_unset=True)
        fields["updated_at"] = now()
        assignments = ", ".join(f"{column} = ?" for column in fields)

        with self.db.transaction() as conn:
            conn.execute(
                f"UPDATE gift_items SET {assignments} WHERE id = ?",
                (*fields.values(), item_id),
            )

        logger.debug("Updated gift item %s: %s", item_id, sorted(fields))
        return self.get(item_id)

    def set_status(self, item_id: int, status: GiftStatus) -> GiftItem | None:
        """Overwrite an item's status directly.

        This is a manual correction and does not touch purchases, so it can
        leave ``purchased`` out of step with purchase existence.
        """
        status = GiftStatus(status)
        with self.db.transaction() as conn:
            cursor = conn.execute(
                "UPDATE gift_items SET status = ?, updated_at = ? WHERE id = ?",
                (status.value, now(), item_id),
            )

        if cursor.rowcount == 0:
            return None
        logger.debug("Set gift item %s status to %s", item_id, status.value)
        return self.get(item_id)

    def delete(self, item_id: int) -> bool:
        """Delete a gift item and its purchases.

        Returns:
            True if a row was removed
        """
        with self.db.transaction() as conn:
            cursor = conn.execute("DELETE FROM gift_items WHERE id = ?", (item_id,))

        removed = cursor.rowcount > 0
        if removed:
            logger.debug("Deleted gift item %s", item_id)
        return removed
