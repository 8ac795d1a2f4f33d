"""
API Dependencies

Dependency injection for services. One ledger per process; tests swap the
providers through ``app.dependency_overrides``.
"""

import logging
from functools import lru_cache
from typing import Optional

from api.config import get_settings
from batchcogs.models.sales import SalesHistory
from batchcogs.models.inventory import LedgerSnapshot
from batchcogs.services import InventoryService, ReportService, SalesService
from batchcogs.storage import JsonFileStore, SnapshotStore, SqliteSnapshotStore

logger = logging.getLogger(__name__)


def build_ledger_store() -> Optional[SnapshotStore]:
    """Pick the ledger snapshot store from settings."""
    settings = get_settings()
    backend = settings.storage_backend.lower()
    if backend == "memory":
        return None
    if backend == "sqlite":
        return SqliteSnapshotStore(settings.sqlite_path)
    if backend != "json":
        logger.warning(f"Unknown storage backend '{backend}', using json")
    return JsonFileStore(settings.ledger_path, LedgerSnapshot)


def build_sales_store() -> Optional[SnapshotStore]:
    """The sales journal is kept as JSON whichever ledger backend is configured."""
    settings = get_settings()
    if settings.storage_backend.lower() == "memory":
        return None
    return JsonFileStore(settings.sales_path, SalesHistory)


@lru_cache()
def get_inventory_service() -> InventoryService:
    """Get singleton inventory service, restored from the configured store."""
    settings = get_settings()
    service = InventoryService(
        store=build_ledger_store(),
        atomic_orders=settings.atomic_orders,
    )
    service.load()
    return service


@lru_cache()
def get_sales_service() -> SalesService:
    """Get singleton sales service."""
    service = SalesService(get_inventory_service(), store=build_sales_store())
    service.load()
    return service


@lru_cache()
def get_report_service() -> ReportService:
    return ReportService()
