"""
Batch Ledger

Owns every stock batch, answers FEFO-ordered queries and applies the only
two mutations a batch ever sees: creation by restock and reduction by
adjustment. Every change is written to the audit log in the same critical
section as the batch mutation.

Concurrency: one re-entrant lock per ledger. ``transaction()`` groups
several calls into a single serialized unit; the snapshot is taken before
the lock is released and written to the store afterwards.
"""

import logging
import math
import threading
from contextlib import contextmanager
from datetime import date, datetime, time
from typing import Callable, Dict, Iterator, List, Optional, Set, Union

from batchcogs.errors import (
    BatchCompletedError,
    InvalidQuantityError,
    NotFoundError,
    UnknownIngredientError,
    ValidationError,
)
from batchcogs.models.common import ADJUSTMENT_REASONS, QTY_EPSILON, InventoryReason
from batchcogs.models.inventory import AuditLogEntry, LedgerSnapshot, StockBatch, to_local_naive
from batchcogs.models.results import PersistenceResult
from batchcogs.services.audit_log import AuditLog
from batchcogs.services.catalog import IngredientCatalog
from batchcogs.services.persistence import SnapshotPersister

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
ExpiryInput = Union[None, str, date, datetime]


def as_datetime(value: ExpiryInput) -> Optional[datetime]:
    """Normalize an expiry given as date, datetime or ISO string to naive local time."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_local_naive(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    try:
        return to_local_naive(datetime.fromisoformat(str(value).strip()))
    except ValueError:
        raise ValidationError(
            f"Invalid expiry date: {value}. Use yyyy-mm-dd.",
            details={"expiry": str(value)},
        )


class LedgerTransaction:
    """State shared by all calls inside one outermost ``transaction()``."""

    def __init__(self):
        self.dirty = False
        self.entries: List[AuditLogEntry] = []
        self.persistence: Optional[PersistenceResult] = None


class BatchLedger:
    """Active stock batches for all ingredients."""

    def __init__(
        self,
        catalog: IngredientCatalog,
        audit_log: AuditLog,
        clock: Optional[Clock] = None,
        persister: Optional[SnapshotPersister] = None,
    ):
        self.catalog = catalog
        self.audit_log = audit_log
        self.clock = clock or datetime.now
        self.persister = persister or SnapshotPersister()

        self._lock = threading.RLock()
        self._batches: Dict[str, StockBatch] = {}
        self._completed: Set[str] = set()
        self._sequence = 0
        self._version = 0
        self._depth = 0
        self._txn: Optional[LedgerTransaction] = None

    def now(self) -> datetime:
        return to_local_naive(self.clock())

    # =========================================================================
    # Transactions
    # =========================================================================

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the ledger lock for a consistent multi-ingredient read."""
        with self._lock:
            yield

    @contextmanager
    def transaction(self) -> Iterator[LedgerTransaction]:
        """
        Serialize a group of ledger calls.

        Nested transactions join the outermost one. When the outermost one
        exits after a mutation, a snapshot is taken under the lock and saved
        once the lock is released. The save result lands on
        ``txn.persistence``.
        """
        self._lock.acquire()
        self._depth += 1
        if self._txn is None:
            self._txn = LedgerTransaction()
        txn = self._txn
        try:
            yield txn
        finally:
            snapshot = self._finish(txn)
            if snapshot is not None:
                txn.persistence = self.persister.save(snapshot)

    def _finish(self, txn: LedgerTransaction) -> Optional[LedgerSnapshot]:
        snapshot = None
        try:
            self._depth -= 1
            if self._depth == 0:
                self._txn = None
                if txn.dirty:
                    self._version += 1
                    snapshot = self.snapshot()
        finally:
            self._lock.release()
        return snapshot

    def _log(
        self,
        batch: StockBatch,
        change: float,
        actor: str,
        reason: InventoryReason,
        now: datetime,
    ) -> AuditLogEntry:
        entry = AuditLogEntry(
            timestamp=now,
            ingredient_name=batch.ingredient_name,
            batch_id=batch.batch_id,
            quantity_change=change,
            actor=actor,
            reason=reason,
            expires_at=batch.expires_at,
        )
        self.audit_log.append(entry)
        self._txn.dirty = True
        self._txn.entries.append(entry)
        return entry

    # =========================================================================
    # Mutations
    # =========================================================================

    def restock(
        self,
        ingredient_name: str,
        quantity: float,
        expiry: ExpiryInput = None,
        actor: str = "",
        total_cost: float = 0.0,
    ) -> StockBatch:
        """Add a new batch and log it as a regular restock."""
        ingredient = self.catalog.lookup(ingredient_name)
        if ingredient is None:
            raise UnknownIngredientError(ingredient_name)
        if quantity is None or not math.isfinite(quantity) or quantity <= 0:
            raise InvalidQuantityError("Quantity must be positive.", quantity)
        if total_cost is None or not math.isfinite(total_cost) or total_cost < 0:
            raise ValidationError("Cost cannot be negative.", details={"total_cost": total_cost})
        if not actor:
            raise ValidationError("Actor is required for a restock.")
        expires_at = as_datetime(expiry)

        with self.transaction():
            now = self.now()
            self._sequence += 1
            batch = StockBatch.create(
                ingredient_name=ingredient.name,
                quantity=float(quantity),
                total_cost=float(total_cost),
                arrived_at=now,
                expires_at=expires_at,
                sequence=self._sequence,
            )
            self._batches[batch.batch_id] = batch
            self._log(batch, batch.initial_qty, actor, InventoryReason.REGULAR_RESTOCK, now)

        logger.info(
            f"Restocked {batch.initial_qty} {ingredient.unit} of {ingredient.name} "
            f"as {batch.batch_id} by {actor}"
        )
        return batch.model_copy()

    def adjust(
        self,
        batch_id: str,
        delta: float,
        reason: Union[InventoryReason, str],
        actor: str,
    ) -> float:
        """
        Remove stock from a batch.

        ``delta`` must be negative; removing more than the batch holds removes
        only what remains. Returns the applied (negative) change, 0.0 for a
        zero delta which is skipped without logging.
        """
        try:
            reason = InventoryReason(reason)
        except ValueError:
            raise ValidationError(f"Unknown adjustment reason: {reason}", details={"reason": str(reason)})
        if reason not in ADJUSTMENT_REASONS:
            raise ValidationError(
                f"'{reason.value}' cannot be used for an adjustment.",
                details={"reason": reason.value},
            )
        if delta is None or not math.isfinite(delta):
            raise InvalidQuantityError("Adjustment quantity must be a finite number.", delta)
        if delta > 0:
            raise InvalidQuantityError("Adjustments can only remove stock; use a restock to add.", delta)
        if delta == 0:
            return 0.0
        if not actor:
            raise ValidationError("Actor is required for an adjustment.")

        with self.transaction():
            batch = self._batches.get(batch_id)
            if batch is None:
                if batch_id in self._completed:
                    raise BatchCompletedError(batch_id)
                raise NotFoundError("Batch", batch_id)

            amount = min(-delta, batch.current_qty)
            remaining = batch.current_qty - amount
            if remaining <= QTY_EPSILON:
                amount = batch.current_qty
                remaining = 0.0
            batch.current_qty = remaining

            now = self.now()
            self._log(batch, -amount, actor, reason, now)
            if remaining == 0.0:
                self._complete(batch, actor, now)

        logger.info(f"Adjusted {batch_id} by -{amount} ({reason.value}) by {actor}")
        return -amount

    def _complete(self, batch: StockBatch, actor: str, now: datetime) -> None:
        self._log(batch, 0.0, actor, InventoryReason.BATCH_COMPLETED, now)
        del self._batches[batch.batch_id]
        self._completed.add(batch.batch_id)
        logger.info(f"Batch {batch.batch_id} of {batch.ingredient_name} completed")

    # =========================================================================
    # Queries
    # =========================================================================

    def active_batches(self, ingredient_name: str) -> List[StockBatch]:
        """Allocatable batches for an ingredient in FEFO order."""
        now = self.now()
        key = (ingredient_name or "").strip().lower()
        with self._lock:
            batches = [
                b for b in self._batches.values()
                if b.ingredient_name.lower() == key
                and not b.is_completed
                and not b.is_expired(now)
            ]
            batches.sort(key=StockBatch.fefo_key)
            return [b.model_copy() for b in batches]

    def total_stock(self, ingredient_name: str) -> float:
        return sum(b.current_qty for b in self.active_batches(ingredient_name))

    def get_batch(self, batch_id: str) -> Optional[StockBatch]:
        with self._lock:
            batch = self._batches.get(batch_id)
            return batch.model_copy() if batch else None

    def is_completed(self, batch_id: str) -> bool:
        with self._lock:
            return batch_id in self._completed

    def all_batches(self) -> List[StockBatch]:
        """Every listed batch, expired ones included, nearest expiry first."""
        with self._lock:
            batches = sorted(self._batches.values(), key=StockBatch.fefo_key)
            return [b.model_copy() for b in batches]

    def expired_batches(self) -> List[StockBatch]:
        now = self.now()
        return [b for b in self.all_batches() if b.is_expired(now)]

    def days_remaining(self, batch: StockBatch) -> Optional[int]:
        """Whole days from today's midnight until expiry; None if it never expires."""
        if batch.expires_at is None:
            return None
        today = datetime.combine(self.now().date(), time.min)
        return math.ceil((batch.expires_at - today).total_seconds() / 86400)

    # =========================================================================
    # Snapshots
    # =========================================================================

    @property
    def version(self) -> int:
        return self._version

    def snapshot(self) -> LedgerSnapshot:
        with self._lock:
            batches = sorted(self._batches.values(), key=lambda b: b.sequence)
            return LedgerSnapshot(
                version=self._version,
                saved_at=self.now(),
                ingredients=self.catalog.list_all(),
                batches=[b.model_copy() for b in batches],
                audit_log=self.audit_log.entries(),
            )

    def load_snapshot(self, snapshot: LedgerSnapshot) -> None:
        """Replace all state with a stored snapshot."""
        with self._lock:
            self.catalog.load(snapshot.ingredients)
            self.audit_log.load(snapshot.audit_log)
            self._batches = {
                b.batch_id: b.model_copy()
                for b in snapshot.batches
                if not b.is_completed
            }
            self._completed = {
                e.batch_id for e in snapshot.audit_log
                if e.reason == InventoryReason.BATCH_COMPLETED
            }
            self._sequence = max((b.sequence for b in snapshot.batches), default=0)
            self._version = snapshot.version

        logger.info(
            f"Loaded ledger snapshot v{snapshot.version}: "
            f"{len(snapshot.ingredients)} ingredients, {len(self._batches)} batches, "
            f"{len(snapshot.audit_log)} log entries"
        )
