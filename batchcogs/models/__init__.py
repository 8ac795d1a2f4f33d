"""Data models for batchCOGS."""

from batchcogs.models.common import (
    ADJUSTMENT_REASONS,
    QTY_EPSILON,
    SALE_ACTOR,
    InventoryReason,
    PaymentMode,
)
from batchcogs.models.deductions import BatchConsumption, DishDeduction, OrderDeduction
from batchcogs.models.inventory import AuditLogEntry, Ingredient, LedgerSnapshot, StockBatch
from batchcogs.models.recipes import Dish, RecipeItem
from batchcogs.models.reports import PeriodSummary, SalesOverview, TopItem
from batchcogs.models.results import OperationResult, PersistenceResult
from batchcogs.models.sales import Order, OrderLine, SaleRecord, SalesHistory, SoldItem

__all__ = [
    # Common
    "InventoryReason",
    "PaymentMode",
    "ADJUSTMENT_REASONS",
    "QTY_EPSILON",
    "SALE_ACTOR",
    # Inventory
    "Ingredient",
    "StockBatch",
    "AuditLogEntry",
    "LedgerSnapshot",
    # Recipes
    "RecipeItem",
    "Dish",
    # Deductions
    "BatchConsumption",
    "DishDeduction",
    "OrderDeduction",
    # Sales
    "Order",
    "OrderLine",
    "SoldItem",
    "SaleRecord",
    "SalesHistory",
    # Reports
    "PeriodSummary",
    "TopItem",
    "SalesOverview",
    # Results
    "PersistenceResult",
    "OperationResult",
]
