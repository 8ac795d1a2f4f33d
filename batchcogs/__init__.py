"""
batchCOGS Core Package

Perishable-stock ledger for restaurants: batch tracking, FEFO allocation,
availability estimates and cost of goods sold.
No framework dependencies (FastAPI) in this package.
"""

__version__ = "1.0.0"

from batchcogs.models.inventory import AuditLogEntry, Ingredient, StockBatch
from batchcogs.models.recipes import Dish, RecipeItem
from batchcogs.models.sales import Order, SaleRecord
from batchcogs.services.inventory_service import InventoryService
from batchcogs.services.sales_service import SalesService

__all__ = [
    "Ingredient",
    "StockBatch",
    "AuditLogEntry",
    "RecipeItem",
    "Dish",
    "Order",
    "SaleRecord",
    "InventoryService",
    "SalesService",
]
