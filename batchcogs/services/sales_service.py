"""
Sales Service

Records completed sales: deducts the order's stock through the inventory
service and keeps the journal of immutable sale records.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from batchcogs.errors import NotFoundError, ValidationError
from batchcogs.models.recipes import Dish
from batchcogs.models.results import OperationResult, PersistenceResult
from batchcogs.models.sales import Order, SaleRecord, SalesHistory
from batchcogs.services.inventory_service import InventoryService
from batchcogs.services.persistence import SnapshotPersister
from batchcogs.storage.base import SnapshotStore

logger = logging.getLogger(__name__)


class SalesService:
    """Sale recording and sales history."""

    def __init__(
        self,
        inventory: InventoryService,
        store: Optional[SnapshotStore] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.inventory = inventory
        self.clock = clock or datetime.now
        self.persister = SnapshotPersister(store, name="sales")
        self._lock = threading.Lock()
        self._records: List[SaleRecord] = []
        self._version = 0

    def load(self) -> PersistenceResult:
        history, result = self.persister.load()
        if history is not None:
            with self._lock:
                self._records = list(history.records)
                self._version = history.version
            logger.info(f"Loaded {len(history.records)} sale records")
        return result

    def record_sale(self, order: Order, dishes: Iterable[Dish]) -> OperationResult[SaleRecord]:
        """
        Deduct stock for every order line and record the sale.

        ``dishes`` supplies the recipe data for the dishes on the order. When
        the deduction fails nothing is recorded.
        """
        if not order.lines:
            raise ValidationError("Cart is empty.")

        items = self._resolve(order, dishes)
        deduction = self.inventory.deduct_for_order(items)

        record = SaleRecord.from_order(order, deduction.value.total_cost)
        with self._lock:
            self._records.append(record)
            self._version += 1
            history = SalesHistory(
                version=self._version,
                saved_at=self.clock(),
                records=list(self._records),
            )
        saved = self.persister.save(history)

        logger.info(
            f"Recorded sale {record.sale_id}: total {record.grand_total:.2f}, "
            f"COGS {record.cost_of_goods_sold:.2f}, profit {record.profit:.2f}"
        )
        return OperationResult[SaleRecord](
            value=record,
            persistence=_merge(deduction.persistence, saved),
        )

    def history(self) -> List[SaleRecord]:
        with self._lock:
            return list(self._records)

    def _resolve(self, order: Order, dishes: Iterable[Dish]) -> List[Tuple[Dish, int]]:
        by_name: Dict[str, Dish] = {d.name.lower(): d for d in dishes}
        items = []
        for line in order.lines:
            dish = by_name.get(line.dish_name.lower())
            if dish is None:
                raise NotFoundError("Dish", line.dish_name)
            items.append((dish, line.quantity))
        return items


def _merge(*results: Optional[PersistenceResult]) -> PersistenceResult:
    """Combine ledger and journal persistence into one result."""
    present = [r for r in results if r is not None]
    errors = [r.error for r in present if r.error]
    return PersistenceResult(
        ok=all(r.ok for r in present),
        skipped=all(r.skipped for r in present),
        version=max((r.version for r in present), default=0),
        error="; ".join(errors) or None,
    )
