"""
Inventory Service - the ledger's interface to collaborators

Wires catalog, ledger, estimator, cost accountant and deduction transaction
together. Mutating calls return an ``OperationResult`` so callers can see
whether the change was persisted; ledger errors are raised as exceptions.
"""

import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Union

from batchcogs.errors import NotFoundError
from batchcogs.models.common import InventoryReason
from batchcogs.models.deductions import DishDeduction, OrderDeduction
from batchcogs.models.inventory import AuditLogEntry, Ingredient, LedgerSnapshot, StockBatch
from batchcogs.models.recipes import RecipeItem
from batchcogs.models.results import OperationResult, PersistenceResult
from batchcogs.services.audit_log import AuditLog
from batchcogs.services.availability import AvailabilityEstimator
from batchcogs.services.catalog import IngredientCatalog
from batchcogs.services.cost_accountant import CostAccountant
from batchcogs.services.deduction import DeductionTransaction, OrderItems
from batchcogs.services.ledger import BatchLedger, ExpiryInput
from batchcogs.services.persistence import SnapshotPersister
from batchcogs.storage.base import SnapshotStore

logger = logging.getLogger(__name__)


class InventoryService:
    """Main service for the perishable-stock ledger."""

    def __init__(
        self,
        store: Optional[SnapshotStore] = None,
        clock: Optional[Callable[[], datetime]] = None,
        atomic_orders: bool = True,
        catalog: Optional[IngredientCatalog] = None,
        audit_log: Optional[AuditLog] = None,
        accountant: Optional[CostAccountant] = None,
    ):
        self.catalog = catalog or IngredientCatalog()
        self.audit_log = audit_log or AuditLog()
        self.persister = SnapshotPersister(store, name="ledger")
        self.ledger = BatchLedger(
            self.catalog,
            self.audit_log,
            clock=clock,
            persister=self.persister,
        )
        self.estimator = AvailabilityEstimator(self.ledger)
        self.accountant = accountant or CostAccountant()
        self.deduction = DeductionTransaction(
            self.ledger,
            self.estimator,
            self.accountant,
            atomic_orders=atomic_orders,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def load(self) -> PersistenceResult:
        """Restore state from the store. Failures leave the ledger empty."""
        snapshot, result = self.persister.load()
        if snapshot is not None:
            self.ledger.load_snapshot(snapshot)
        return result

    def snapshot(self) -> LedgerSnapshot:
        return self.ledger.snapshot()

    # =========================================================================
    # Catalog
    # =========================================================================

    def define_ingredient(self, name: str, unit: str) -> OperationResult[Ingredient]:
        with self.ledger.transaction() as txn:
            ingredient = self.catalog.define(name, unit)
            txn.dirty = True
        return OperationResult[Ingredient](value=ingredient, persistence=txn.persistence)

    def get_ingredient(self, name: str) -> Optional[Ingredient]:
        return self.catalog.lookup(name)

    def list_ingredients(self) -> List[Ingredient]:
        return self.catalog.list_all()

    # =========================================================================
    # Batches
    # =========================================================================

    def restock_batch(
        self,
        ingredient_name: str,
        quantity: float,
        expiry: ExpiryInput = None,
        actor: str = "",
        total_cost: float = 0.0,
    ) -> OperationResult[StockBatch]:
        with self.ledger.transaction() as txn:
            batch = self.ledger.restock(ingredient_name, quantity, expiry, actor, total_cost)
        return OperationResult[StockBatch](value=batch, persistence=txn.persistence)

    def adjust_batch(
        self,
        batch_id: str,
        delta: float,
        reason: Union[InventoryReason, str],
        actor: str,
    ) -> OperationResult[float]:
        with self.ledger.transaction() as txn:
            applied = self.ledger.adjust(batch_id, delta, reason, actor)
        return OperationResult[float](value=applied, persistence=txn.persistence)

    def get_batch(self, batch_id: str) -> StockBatch:
        batch = self.ledger.get_batch(batch_id)
        if batch is None:
            raise NotFoundError("Batch", batch_id)
        return batch

    def list_active_batches(self, ingredient_name: str) -> List[StockBatch]:
        return self.ledger.active_batches(ingredient_name)

    def list_batches(self) -> List[StockBatch]:
        return self.ledger.all_batches()

    def total_stock(self, ingredient_name: str) -> float:
        return self.ledger.total_stock(ingredient_name)

    # =========================================================================
    # Availability and sales deductions
    # =========================================================================

    def estimate_servings(self, recipe: Iterable[RecipeItem]) -> int:
        return self.estimator.estimate_servings(recipe)

    def is_available(self, recipe: Iterable[RecipeItem], quantity: int) -> bool:
        return self.estimator.is_available(recipe, quantity)

    def deduct_for_dish(
        self,
        recipe: Iterable[RecipeItem],
        quantity: int,
        dish_name: Optional[str] = None,
    ) -> OperationResult[DishDeduction]:
        with self.ledger.transaction() as txn:
            deduction = self.deduction.deduct_for_dish(recipe, quantity, dish_name)
        return OperationResult[DishDeduction](value=deduction, persistence=txn.persistence)

    def deduct_for_order(self, items: OrderItems) -> OperationResult[OrderDeduction]:
        with self.ledger.transaction() as txn:
            deduction = self.deduction.deduct_for_order(items)
        return OperationResult[OrderDeduction](value=deduction, persistence=txn.persistence)

    # =========================================================================
    # Audit
    # =========================================================================

    def audit_history(self, newest_first: bool = False) -> List[AuditLogEntry]:
        return self.audit_log.entries(newest_first=newest_first)
