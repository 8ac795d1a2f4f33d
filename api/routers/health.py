"""Health check endpoints."""

from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.config import Settings, get_settings
from api.dependencies import get_inventory_service
from batchcogs.services import InventoryService

router = APIRouter()


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    Basic liveness check.

    Returns 200 if the service is running.
    """
    return {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat() + "Z"
    }


@router.get("/health/ready")
async def readiness_check(
    settings: Settings = Depends(get_settings),
    service: InventoryService = Depends(get_inventory_service),
) -> Dict[str, Any]:
    """
    Readiness check - reports the ledger and its storage backend.
    """
    checks = {
        "ledger": {
            "status": "ok",
            "ingredients": len(service.list_ingredients()),
            "batches": len(service.list_batches()),
            "version": service.ledger.version,
        },
        "storage": {
            "status": "ok" if service.persister.enabled else "not_configured",
            "backend": settings.storage_backend,
        },
    }

    return {
        "status": "ready",
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "version": settings.app_version,
        "checks": checks
    }


@router.get("/health/info")
async def service_info(
    settings: Settings = Depends(get_settings)
) -> Dict[str, Any]:
    """Return service information."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": "development" if settings.debug else "production",
        "atomic_orders": settings.atomic_orders,
    }
