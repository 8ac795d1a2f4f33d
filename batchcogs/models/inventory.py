"""
Inventory Data Models

Ingredients, stock batches and the audit trail of quantity changes.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from batchcogs.models.common import InventoryReason


def to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Aware datetimes become naive local time so they compare with the clock."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


# ============================================================================
# Catalog
# ============================================================================

class Ingredient(BaseModel):
    """An ingredient definition. The name is the case-insensitive key."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    unit: str = Field(..., min_length=1, description="Unit of measure (kg, l, pcs, ...)")

    @property
    def key(self) -> str:
        return self.name.lower()


# ============================================================================
# Stock batches
# ============================================================================

def new_batch_id() -> str:
    return f"b_{uuid.uuid4().hex[:12]}"


class StockBatch(BaseModel):
    """
    A discrete arrival lot of one ingredient.

    ``unit_cost`` is fixed when the batch is created; deductions only ever
    lower ``current_qty``.
    """

    batch_id: str = Field(default_factory=new_batch_id)
    sequence: int = Field(default=0, ge=0, description="Creation order within the ledger")
    ingredient_name: str
    arrived_at: datetime
    expires_at: Optional[datetime] = Field(default=None, description="None = never expires")

    initial_qty: float = Field(..., gt=0, allow_inf_nan=False)
    current_qty: float = Field(..., ge=0, allow_inf_nan=False)
    total_cost: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    unit_cost: float = Field(default=0.0, ge=0, allow_inf_nan=False)

    @field_validator("arrived_at", "expires_at")
    @classmethod
    def local_times(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_local_naive(v)

    @model_validator(mode="after")
    def check_quantities(self) -> "StockBatch":
        if self.current_qty > self.initial_qty:
            raise ValueError("current_qty cannot exceed initial_qty")
        return self

    @classmethod
    def create(
        cls,
        ingredient_name: str,
        quantity: float,
        total_cost: float,
        arrived_at: datetime,
        expires_at: Optional[datetime] = None,
        sequence: int = 0,
    ) -> "StockBatch":
        return cls(
            sequence=sequence,
            ingredient_name=ingredient_name,
            arrived_at=arrived_at,
            expires_at=expires_at,
            initial_qty=quantity,
            current_qty=quantity,
            total_cost=total_cost,
            unit_cost=total_cost / quantity,
        )

    @property
    def is_completed(self) -> bool:
        return self.current_qty <= 0

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    def fefo_key(self):
        """Sort key: earliest expiry first, undated batches last."""
        return (
            self.expires_at is None,
            self.expires_at or datetime.max,
            self.arrived_at,
            self.sequence,
            self.batch_id,
        )


# ============================================================================
# Audit trail
# ============================================================================

class AuditLogEntry(BaseModel):
    """One immutable quantity change on a batch."""

    model_config = ConfigDict(frozen=True)

    entry_id: str = Field(default_factory=lambda: f"log_{uuid.uuid4().hex[:12]}")
    timestamp: datetime
    ingredient_name: str
    batch_id: str
    quantity_change: float = Field(..., allow_inf_nan=False, description="+ added, - removed, 0 = batch completed")
    actor: str
    reason: InventoryReason
    expires_at: Optional[datetime] = None

    @field_validator("timestamp", "expires_at")
    @classmethod
    def local_times(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_local_naive(v)


class LedgerSnapshot(BaseModel):
    """Everything needed to restore a ledger between runs."""

    version: int = 0
    saved_at: Optional[datetime] = None
    ingredients: List[Ingredient] = Field(default_factory=list)
    batches: List[StockBatch] = Field(default_factory=list)
    audit_log: List[AuditLogEntry] = Field(default_factory=list)
