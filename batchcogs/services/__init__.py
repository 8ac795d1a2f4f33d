"""batchCOGS Services - Business Logic"""

from batchcogs.services.audit_log import AuditLog
from batchcogs.services.availability import AvailabilityEstimator
from batchcogs.services.catalog import IngredientCatalog
from batchcogs.services.cost_accountant import CostAccountant
from batchcogs.services.deduction import DeductionTransaction
from batchcogs.services.inventory_service import InventoryService
from batchcogs.services.ledger import BatchLedger
from batchcogs.services.persistence import SnapshotPersister
from batchcogs.services.report_service import ReportService
from batchcogs.services.sales_service import SalesService

__all__ = [
    "AuditLog",
    "AvailabilityEstimator",
    "BatchLedger",
    "CostAccountant",
    "DeductionTransaction",
    "IngredientCatalog",
    "InventoryService",
    "ReportService",
    "SalesService",
    "SnapshotPersister",
]
