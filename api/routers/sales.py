"""
Sales API Routes

Availability checks, sale-time stock deductions and the sales journal.
Menu data is owned by the caller, so every request carries the recipes it needs.
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from api.dependencies import get_inventory_service, get_sales_service
from batchcogs.models.deductions import DishDeduction, OrderDeduction
from batchcogs.models.recipes import Dish, RecipeItem
from batchcogs.models.results import OperationResult
from batchcogs.models.sales import Order, SaleRecord
from batchcogs.services import InventoryService, SalesService

router = APIRouter()


# =============================================================================
# Request / Response Models
# =============================================================================

class AvailabilityRequest(BaseModel):
    recipe: List[RecipeItem]
    quantity: int = Field(default=1, ge=1)


class AvailabilityResponse(BaseModel):
    servings: int
    quantity: int
    available: bool


class DishDeductionRequest(BaseModel):
    dish: Dish
    quantity: int


class OrderItemRequest(BaseModel):
    dish: Dish
    quantity: int


class OrderDeductionRequest(BaseModel):
    items: List[OrderItemRequest]


class SaleRequest(BaseModel):
    order: Order
    dishes: List[Dish] = Field(..., description="Recipes for the dishes on the order")


# =============================================================================
# Availability
# =============================================================================

@router.post("/availability", response_model=AvailabilityResponse)
async def check_availability(
    request: AvailabilityRequest,
    service: InventoryService = Depends(get_inventory_service),
):
    """How many servings current stock supports for a recipe."""
    servings = service.estimate_servings(request.recipe)
    return AvailabilityResponse(
        servings=servings,
        quantity=request.quantity,
        available=servings >= request.quantity,
    )


# =============================================================================
# Deductions
# =============================================================================

@router.post("/deductions/dish", response_model=OperationResult[DishDeduction])
async def deduct_for_dish(
    request: DishDeductionRequest,
    service: InventoryService = Depends(get_inventory_service),
):
    """Consume stock for one dish line, nearest expiry first."""
    return service.deduct_for_dish(request.dish.recipe, request.quantity, request.dish.name)


@router.post("/deductions/order", response_model=OperationResult[OrderDeduction])
async def deduct_for_order(
    request: OrderDeductionRequest,
    service: InventoryService = Depends(get_inventory_service),
):
    """Consume stock for a whole order."""
    return service.deduct_for_order([(item.dish, item.quantity) for item in request.items])


# =============================================================================
# Sales journal
# =============================================================================

@router.post("", response_model=OperationResult[SaleRecord], status_code=201)
async def record_sale(
    request: SaleRequest,
    service: SalesService = Depends(get_sales_service),
):
    """Deduct stock for an order and record the sale."""
    return service.record_sale(request.order, request.dishes)


@router.get("", response_model=List[SaleRecord])
async def sales_history(
    limit: int = Query(100, ge=1, le=10000),
    service: SalesService = Depends(get_sales_service),
):
    """Recorded sales, newest first."""
    records = sorted(service.history(), key=lambda r: r.sale_time, reverse=True)
    return records[:limit]
