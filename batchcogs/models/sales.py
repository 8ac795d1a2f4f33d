"""
Sales Data Models

Orders taken at the counter and the immutable records of completed sales.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from batchcogs.models.common import PaymentMode


class OrderLine(BaseModel):
    """One dish on an order."""

    dish_name: str = Field(..., min_length=1)
    unit_price: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    quantity: int = Field(..., ge=1)

    @property
    def total(self) -> float:
        return self.unit_price * self.quantity


class Order(BaseModel):
    """
    A customer order.

    ``tax_amount`` is computed by the caller (billing layer); the ledger only
    adds it to the grand total.
    """

    order_id: str = Field(default_factory=lambda: f"ord_{uuid.uuid4().hex[:12]}")
    order_time: datetime = Field(default_factory=datetime.now)
    table_number: str = ""
    lines: List[OrderLine] = Field(default_factory=list)
    discount: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    tax_amount: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    payment_mode: PaymentMode = PaymentMode.CASH

    def add_item(self, dish_name: str, quantity: int, unit_price: float = 0.0) -> OrderLine:
        """Add a dish, merging with an existing line for the same dish."""
        if quantity < 1:
            raise ValueError("Quantity must be at least 1")
        for line in self.lines:
            if line.dish_name.lower() == dish_name.lower():
                line.quantity += quantity
                return line
        line = OrderLine(dish_name=dish_name, unit_price=unit_price, quantity=quantity)
        self.lines.append(line)
        return line

    def remove_item(self, index: int) -> OrderLine:
        if index < 0 or index >= len(self.lines):
            raise IndexError(f"Invalid item index: {index}")
        return self.lines.pop(index)

    @property
    def subtotal(self) -> float:
        return sum(line.total for line in self.lines)

    @property
    def grand_total(self) -> float:
        return max(0.0, self.subtotal + self.tax_amount - self.discount)


class SoldItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    dish_name: str
    quantity: int


class SaleRecord(BaseModel):
    """A completed sale. Written once, never changed."""

    model_config = ConfigDict(frozen=True)

    sale_id: str = Field(default_factory=lambda: f"sale_{uuid.uuid4().hex[:12]}")
    order_id: str
    sale_time: datetime
    grand_total: float
    cost_of_goods_sold: float
    profit: float
    payment_mode: PaymentMode
    items_sold: List[SoldItem] = Field(default_factory=list)

    @classmethod
    def from_order(cls, order: Order, cost_of_goods_sold: float) -> "SaleRecord":
        grand_total = order.grand_total
        return cls(
            order_id=order.order_id,
            sale_time=order.order_time,
            grand_total=grand_total,
            cost_of_goods_sold=cost_of_goods_sold,
            profit=grand_total - cost_of_goods_sold,
            payment_mode=order.payment_mode,
            items_sold=[
                SoldItem(dish_name=line.dish_name, quantity=line.quantity)
                for line in order.lines
            ],
        )


class SalesHistory(BaseModel):
    """Persisted form of the sales journal."""

    version: int = 0
    saved_at: Optional[datetime] = None
    records: List[SaleRecord] = Field(default_factory=list)
