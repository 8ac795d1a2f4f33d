"""
Inventory API Routes

Ingredient definitions, stock batches, manual adjustments and the audit log.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from api.dependencies import get_inventory_service
from batchcogs.models.common import InventoryReason
from batchcogs.models.inventory import AuditLogEntry, Ingredient, StockBatch
from batchcogs.models.results import OperationResult
from batchcogs.services import InventoryService

router = APIRouter()


# =============================================================================
# Request / Response Models
# =============================================================================

class IngredientCreate(BaseModel):
    name: str
    unit: str


class RestockRequest(BaseModel):
    ingredient_name: str
    quantity: float = Field(..., gt=0, allow_inf_nan=False)
    total_cost: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    expiry: Optional[datetime] = Field(default=None, description="Omit for stock that never expires")
    actor: str


class AdjustmentRequest(BaseModel):
    quantity: float = Field(..., allow_inf_nan=False, description="Amount to remove; the sign is ignored")
    reason: InventoryReason = InventoryReason.SPOILAGE_WASTAGE
    actor: str


class BatchView(StockBatch):
    """A batch plus the days left until it expires."""
    days_remaining: Optional[int] = None


class StockLevel(BaseModel):
    ingredient_name: str
    unit: Optional[str] = None
    total_stock: float
    batches: List[StockBatch]


# =============================================================================
# Ingredients
# =============================================================================

@router.post("/ingredients", response_model=OperationResult[Ingredient], status_code=201)
async def define_ingredient(
    request: IngredientCreate,
    service: InventoryService = Depends(get_inventory_service),
):
    """Define a new ingredient and its unit of measure."""
    return service.define_ingredient(request.name, request.unit)


@router.get("/ingredients", response_model=List[Ingredient])
async def list_ingredients(service: InventoryService = Depends(get_inventory_service)):
    """List ingredient definitions sorted by name."""
    return sorted(service.list_ingredients(), key=lambda i: i.name.lower())


@router.get("/ingredients/{name}/stock", response_model=StockLevel)
async def get_stock_level(
    name: str,
    service: InventoryService = Depends(get_inventory_service),
):
    """Total allocatable stock and the FEFO-ordered batches behind it."""
    ingredient = service.get_ingredient(name)
    return StockLevel(
        ingredient_name=ingredient.name if ingredient else name,
        unit=ingredient.unit if ingredient else None,
        total_stock=service.total_stock(name),
        batches=service.list_active_batches(name),
    )


# =============================================================================
# Batches
# =============================================================================

@router.post("/batches", response_model=OperationResult[StockBatch], status_code=201)
async def restock_batch(
    request: RestockRequest,
    service: InventoryService = Depends(get_inventory_service),
):
    """Add a new stock batch."""
    return service.restock_batch(
        request.ingredient_name,
        request.quantity,
        expiry=request.expiry,
        actor=request.actor,
        total_cost=request.total_cost,
    )


@router.get("/batches", response_model=List[BatchView])
async def list_batches(
    expired_only: bool = Query(False, description="Only batches past their expiry"),
    service: InventoryService = Depends(get_inventory_service),
):
    """List every batch still on the shelf, nearest expiry first."""
    batches = service.ledger.expired_batches() if expired_only else service.list_batches()
    return [
        BatchView(**b.model_dump(), days_remaining=service.ledger.days_remaining(b))
        for b in batches
    ]


@router.get("/batches/{batch_id}", response_model=StockBatch)
async def get_batch(
    batch_id: str,
    service: InventoryService = Depends(get_inventory_service),
):
    return service.get_batch(batch_id)


@router.post("/batches/{batch_id}/adjust", response_model=OperationResult[float])
async def adjust_batch(
    batch_id: str,
    request: AdjustmentRequest,
    service: InventoryService = Depends(get_inventory_service),
):
    """Log spoilage or a stock correction against a batch."""
    return service.adjust_batch(batch_id, -abs(request.quantity), request.reason, request.actor)


# =============================================================================
# Audit
# =============================================================================

@router.get("/audit", response_model=List[AuditLogEntry])
async def audit_history(
    ingredient: Optional[str] = Query(None, description="Filter by ingredient"),
    batch_id: Optional[str] = Query(None, description="Filter by batch"),
    limit: int = Query(200, ge=1, le=5000),
    service: InventoryService = Depends(get_inventory_service),
):
    """Audit log, newest first."""
    if ingredient:
        entries = service.audit_log.for_ingredient(ingredient)[::-1]
    else:
        entries = service.audit_history(newest_first=True)
    if batch_id:
        entries = [e for e in entries if e.batch_id == batch_id]
    return entries[:limit]
