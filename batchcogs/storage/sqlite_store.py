"""
SQLite Snapshot Store

Stores the ledger snapshot in plain tables. Each save replaces the previous
snapshot inside one database transaction.
"""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from batchcogs.errors import PersistenceError
from batchcogs.models.common import InventoryReason
from batchcogs.models.inventory import AuditLogEntry, Ingredient, LedgerSnapshot, StockBatch

logger = logging.getLogger(__name__)

# Default database path
DEFAULT_DB_PATH = "./data/db/batchcogs.db"

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS snapshot_meta (
        id INTEGER PRIMARY KEY CHECK (id = 1),
        version INTEGER NOT NULL,
        saved_at TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS ingredients (
        name TEXT PRIMARY KEY,
        unit TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS stock_batches (
        batch_id TEXT PRIMARY KEY,
        sequence INTEGER NOT NULL,
        ingredient_name TEXT NOT NULL,
        arrived_at TEXT NOT NULL,
        expires_at TEXT,
        initial_qty REAL NOT NULL,
        current_qty REAL NOT NULL,
        total_cost REAL NOT NULL,
        unit_cost REAL NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS audit_log (
        position INTEGER PRIMARY KEY,
        entry_id TEXT NOT NULL,
        timestamp TEXT NOT NULL,
        ingredient_name TEXT NOT NULL,
        batch_id TEXT NOT NULL,
        quantity_change REAL NOT NULL,
        actor TEXT NOT NULL,
        reason TEXT NOT NULL,
        expires_at TEXT
    )
    """,
]


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


class SqliteSnapshotStore:
    """Ledger snapshot store backed by SQLite."""

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = db_path

    def get_connection(self) -> sqlite3.Connection:
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_database(self, conn: sqlite3.Connection) -> None:
        cursor = conn.cursor()
        for statement in SCHEMA:
            cursor.execute(statement)

    def save(self, snapshot: LedgerSnapshot) -> None:
        try:
            conn = self.get_connection()
        except (OSError, sqlite3.Error) as e:
            raise PersistenceError(f"Could not open {self.db_path}: {e}") from e

        try:
            with conn:
                self.init_database(conn)
                cursor = conn.cursor()
                for table in ("snapshot_meta", "ingredients", "stock_batches", "audit_log"):
                    cursor.execute(f"DELETE FROM {table}")

                cursor.execute(
                    "INSERT INTO snapshot_meta (id, version, saved_at) VALUES (1, ?, ?)",
                    (snapshot.version, _iso(snapshot.saved_at)),
                )
                cursor.executemany(
                    "INSERT INTO ingredients (name, unit) VALUES (?, ?)",
                    [(i.name, i.unit) for i in snapshot.ingredients],
                )
                cursor.executemany(
                    """
                    INSERT INTO stock_batches (
                        batch_id, sequence, ingredient_name, arrived_at, expires_at,
                        initial_qty, current_qty, total_cost, unit_cost
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            b.batch_id, b.sequence, b.ingredient_name, _iso(b.arrived_at),
                            _iso(b.expires_at), b.initial_qty, b.current_qty,
                            b.total_cost, b.unit_cost,
                        )
                        for b in snapshot.batches
                    ],
                )
                cursor.executemany(
                    """
                    INSERT INTO audit_log (
                        position, entry_id, timestamp, ingredient_name, batch_id,
                        quantity_change, actor, reason, expires_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            pos, e.entry_id, _iso(e.timestamp), e.ingredient_name, e.batch_id,
                            e.quantity_change, e.actor, e.reason.value, _iso(e.expires_at),
                        )
                        for pos, e in enumerate(snapshot.audit_log)
                    ],
                )
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not save snapshot to {self.db_path}: {e}") from e
        finally:
            conn.close()

        logger.debug(f"Saved snapshot v{snapshot.version} to {self.db_path}")

    def load(self) -> Optional[LedgerSnapshot]:
        if not Path(self.db_path).exists():
            return None

        try:
            conn = self.get_connection()
        except (OSError, sqlite3.Error) as e:
            raise PersistenceError(f"Could not open {self.db_path}: {e}") from e

        try:
            self.init_database(conn)
            cursor = conn.cursor()

            cursor.execute("SELECT version, saved_at FROM snapshot_meta WHERE id = 1")
            meta = cursor.fetchone()
            if meta is None:
                return None

            cursor.execute("SELECT name, unit FROM ingredients")
            ingredients = [Ingredient(name=row["name"], unit=row["unit"]) for row in cursor.fetchall()]

            cursor.execute("SELECT * FROM stock_batches ORDER BY sequence")
            batches = [
                StockBatch(
                    batch_id=row["batch_id"],
                    sequence=row["sequence"],
                    ingredient_name=row["ingredient_name"],
                    arrived_at=_parse(row["arrived_at"]),
                    expires_at=_parse(row["expires_at"]),
                    initial_qty=row["initial_qty"],
                    current_qty=row["current_qty"],
                    total_cost=row["total_cost"],
                    unit_cost=row["unit_cost"],
                )
                for row in cursor.fetchall()
            ]

            cursor.execute("SELECT * FROM audit_log ORDER BY position")
            audit_log = [
                AuditLogEntry(
                    entry_id=row["entry_id"],
                    timestamp=_parse(row["timestamp"]),
                    ingredient_name=row["ingredient_name"],
                    batch_id=row["batch_id"],
                    quantity_change=row["quantity_change"],
                    actor=row["actor"],
                    reason=InventoryReason(row["reason"]),
                    expires_at=_parse(row["expires_at"]),
                )
                for row in cursor.fetchall()
            ]

            return LedgerSnapshot(
                version=meta["version"],
                saved_at=_parse(meta["saved_at"]),
                ingredients=ingredients,
                batches=batches,
                audit_log=audit_log,
            )
        except (sqlite3.Error, ValueError) as e:
            raise PersistenceError(f"Could not load snapshot from {self.db_path}: {e}") from e
        finally:
            conn.close()
