"""Results of converting sales into batch deductions."""

from typing import List, Optional

from pydantic import BaseModel, Field


class BatchConsumption(BaseModel):
    """Stock taken from a single batch and what it cost."""

    batch_id: str
    ingredient_name: str
    quantity: float
    unit_cost: float
    cost: float


class DishDeduction(BaseModel):
    """All batch consumptions for one dish line of a sale."""

    dish_name: Optional[str] = None
    quantity: int
    consumptions: List[BatchConsumption] = Field(default_factory=list)
    cost: float = 0.0


class OrderDeduction(BaseModel):
    """Deductions for every dish of an order."""

    dishes: List[DishDeduction] = Field(default_factory=list)
    total_cost: float = 0.0
    atomic: bool = True
