"""SQLite persistence for Gift Tracker.

A single :class:`Database` handle is shared by every repository. SQLite
serializes writers itself and WAL mode keeps readers unblocked, so no
application-level locking is layered on top.
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path

logger = logging.getLogger(__name__)


def adapt_datetime(dt: datetime) -> str:
    """Adapt datetime to ISO string for SQLite."""
    return dt.isoformat()


def adapt_date(d: date) -> str:
    """Adapt date to ISO string for SQLite."""
    return d.isoformat()


sqlite3.register_adapter(datetime, adapt_datetime)
sqlite3.register_adapter(date, adapt_date)


SCHEMA = """
    -- Schema version tracking
    CREATE TABLE IF NOT EXISTS schema_version (
        version INTEGER PRIMARY KEY
    );

    -- People being shopped for
    CREATE TABLE IF NOT EXISTS recipients (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        relationship TEXT,
        budget_allocation REAL NOT NULL DEFAULT 0 CHECK (budget_allocation >= 0),
        notes TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );

    -- Gift ideas per recipient
    CREATE TABLE IF NOT EXISTS gift_items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        recipient_id INTEGER NOT NULL REFERENCES recipients(id) ON DELETE CASCADE,
        name TEXT NOT NULL,
        description TEXT,
        priority INTEGER NOT NULL DEFAULT 1 CHECK (priority BETWEEN 1 AND 5),
        status TEXT NOT NULL DEFAULT 'needed'
            CHECK (status IN ('needed', 'researching', 'ready_to_buy', 'purchased')),
        target_price REAL CHECK (target_price IS NULL OR target_price >= 0),
        current_best_price REAL CHECK (current_best_price IS NULL OR current_best_price >= 0),
        notes TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_gift_items_recipient
        ON gift_items(recipient_id);

    -- Completed purchases
    CREATE TABLE IF NOT EXISTS purchases (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        item_id INTEGER NOT NULL REFERENCES gift_items(id) ON DELETE CASCADE,
        store_name TEXT,
        purchase_price REAL NOT NULL CHECK (purchase_price >= 0),
        purchase_date TEXT NOT NULL,
        payment_method TEXT,
        receipt_photo TEXT,
        was_on_sale INTEGER NOT NULL DEFAULT 0 CHECK (was_on_sale IN (0, 1)),
        notes TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_purchases_item
        ON purchases(item_id);

    CREATE INDEX IF NOT EXISTS idx_purchases_date
        ON purchases(purchase_date);

    -- Yearly budget
    CREATE TABLE IF NOT EXISTS budget (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        total_budget REAL NOT NULL CHECK (total_budget >= 0),
        year INTEGER NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_budget_year
        ON budget(year);

    -- Scraped prices (reserved)
    CREATE TABLE IF NOT EXISTS price_history (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        item_id INTEGER NOT NULL REFERENCES gift_items(id) ON DELETE CASCADE,
        store_name TEXT NOT NULL,
        price REAL NOT NULL CHECK (price >= 0),
        product_url TEXT,
        scraped_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    );

    CREATE INDEX IF NOT EXISTS idx_price_history_item
        ON price_history(item_id);

    -- Record schema version
    INSERT OR IGNORE INTO schema_version (version) VALUES (1);
"""


def now() -> datetime:
    """Timestamp used for created_at/updated_at columns."""
    return datetime.now()


class Database:
    """Shared SQLite handle for all gift tracker repositories."""

    SCHEMA_VERSION = 1
    TABLES = ("recipients", "gift_items", "purchases", "budget", "price_history")

    def __init__(self, db_path: Path | None = None):
        """Open the database and apply the schema.

        Args:
            db_path: Path to the SQLite database file. Defaults to ./data/gifts.db
        """
        if db_path is None:
            db_path = Path.cwd() / "data" / "gifts.db"
        self.db_path = db_path
        self._ensure_directories()
        self._conn = self._connect()
        self._init_database()

    def _ensure_directories(self) -> None:
        """Create the database directory if it doesn't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        conn.execute("PRAGMA journal_mode = WAL")
        return conn

    def _init_database(self) -> None:
        """Initialize database schema if not exists."""
        logger.debug("Applying schema to %s", self.db_path)
        self._conn.executescript(SCHEMA)

    @property
    def connection(self) -> sqlite3.Connection:
        """The underlying connection, for reads."""
        return self._conn

    @contextmanager
    def transaction(self):
        """Run a unit of work that commits on success and rolls back on error.

        Yields:
            The shared sqlite3 connection
        """
        try:
            yield self._conn
            self._conn.commit()
        except Exception:
            logger.warning("Rolling back transaction on %s", self.db_path, exc_info=True)
            self._conn.rollback()
            raise

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        """Run a read-only statement on the shared connection."""
        return self._conn.execute(sql, params)

    def schema_version(self) -> int:
        """Get the recorded schema version."""
        row = self._conn.execute("SELECT MAX(version) AS version FROM schema_version").fetchone()
        return row["version"]

    def close(self) -> None:
        """Close the underlying connection."""
        self._conn.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
