"""Purchase persistence and the gift item status transition.

Creating a purchase marks its gift item ``purchased``; deleting it puts the
item back to ``ready_to_buy``. Both writes of each transition share a single
transaction so the item status and purchase existence never diverge.
"""

import logging
import sqlite3
from datetime import date, datetime

from .database import Database, now
from .models import GiftStatus, Purchase, PurchaseCreate, PurchaseUpdate

logger = logging.getLogger(__name__)

SELECT_WITH_ITEM = """
    SELECT p.*, gi.name AS item_name, r.name AS recipient_name
    FROM purchases p
    LEFT JOIN gift_items gi ON p.item_id = gi.id
    LEFT JOIN recipients r ON gi.recipient_id = r.id
"""

STATUS_UPDATE = "UPDATE gift_items SET status = ?, updated_at = ? WHERE id = ?"


def row_to_purchase(row: sqlite3.Row) -> Purchase:
    """Build a Purchase from a joined database row."""
    return Purchase(
        id=row["id"],
        item_id=row["item_id"],
        store_name=row["store_name"],
        purchase_price=row["purchase_price"],
        purchase_date=date.fromisoformat(row["purchase_date"]),
        payment_method=row["payment_method"],
        receipt_photo=row["receipt_photo"],
        was_on_sale=bool(row["was_on_sale"]),
        notes=row["notes"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
        item_name=row["item_name"],
        recipient_name=row["recipient_name"],
    )


class PurchaseRepository:
    """Manages purchase rows and their effect on gift item status."""

    def __init__(self, db: Database):
        self.db = db

    def list_all(self) -> list[Purchase]:
        """Get all purchases, most recent purchase date first."""
        rows = self.db.execute(
            SELECT_WITH_ITEM + " ORDER BY p.purchase_date DESC, p.id DESC"
        ).fetchall()
        return [row_to_purchase(row) for row in rows]

    def get(self, purchase_id: int) -> Purchase | None:
        """Get a purchase by ID, or None if not found."""
        row = self.db.execute(SELECT_WITH_ITEM + " WHERE p.id = ?", (purchase_id,)).fetchone()
        if not row:
            return None
        return row_to_purchase(row)

    def get_by_item(self, item_id: int) -> Purchase | None:
        """Get the purchase recorded for a gift item, if any."""
        row = self.db.execute(
            SELECT_WITH_ITEM + " WHERE p.item_id = ? ORDER BY p.id ASC LIMIT 1",
            (item_id,),
        ).fetchone()
        if not row:
            return None
        return row_to_purchase(row)

    def create(self, data: PurchaseCreate) -> Purchase:
        """Record a purchase and mark its gift item as purchased.

        The insert and the status change commit together or not at all.

        Args:
            data: Validated purchase fields

        Returns:
            The stored Purchase with item and recipient names

        Raises:
            sqlite3.IntegrityError: If ``item_id`` references no gift item
        """
        timestamp = now()
        with self.db.transaction() as conn:
            cursor = conn.execute(
                """
                INSERT INTO purchases
                (item_id, store_name, purchase_price, purchase_date, payment_method,
                 receipt_photo, was_on_sale, notes, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    data.item_id,
                    data.store_name,
                    data.purchase_price,
                    data.purchase_date,
                    data.payment_method,
                    data.receipt_photo,
                    int(data.was_on_sale),
                    data.notes,
                    timestamp,
                    timestamp,
                ),
            )
            purchase_id = cursor.lastrowid
            conn.execute(STATUS_UPDATE, (GiftStatus.PURCHASED.value, timestamp, data.item_id))

        logger.info("Recorded purchase %s; gift item %s is purchased", purchase_id, data.item_id)
        return self.get(purchase_id)

    def update(self, purchase_id: int, changes: PurchaseUpdate) -> Purchase | None:
        """Apply the explicitly set fields of ``changes`` to a purchase.

        Item status is left alone. An omitted ``was_on_sale`` keeps its
        stored value.

        Returns:
            The updated Purchase, or None if it doesn't exist
        """
        if self.get(purchase_id) is None:
            return None

        fields = changes.model_dump(mode="json", exclude_unset=True)
        if "was_on_sale" in fields:
            fields["was_on_sale"] = int(fields["was_on_sale"])
        fields["updated_at"] = now()
        assignments = ", ".join(f"{column} = ?" for column in fields)

        with self.db.transaction() as conn:
            conn.execute(
                f"UPDATE purchases SET {assignments} WHERE id = ?",
                (*fields.values(), purchase_id),
            )

        logger.debug("Updated purchase %s: %s", purchase_id, sorted(fields))
        return self.get(purchase_id)

    def delete(self, purchase_id: int) -> bool:
        """Remove a purchase and put its gift item back to ready_to_buy.

        The delete and the status change commit together or not at all.
        A missing purchase changes nothing.

        Returns:
            True if a row was removed
        """
        with self.db.transaction() as conn:
            row = conn.execute(
                "SELECT item_id FROM purchases WHERE id = ?", (purchase_id,)
            ).fetchone()
            if not row:
                return False

            cursor = conn.execute("DELETE FROM purchases WHERE id = ?", (purchase_id,))
            conn.execute(STATUS_UPDATE, (GiftStatus.READY_TO_BUY.value, now(), row["item_id"]))

        logger.info(
            "Deleted purchase %s; gift item %s is ready_to_buy", purchase_id, row["item_id"]
        )
        return cursor.rowcount > 0
