"""Common types used across the ledger."""

from enum import Enum

# Quantities closer to zero than this are treated as zero.
QTY_EPSILON = 1e-9

# Actor recorded on audit entries written by sale-time deductions.
SALE_ACTOR = "System (Sale)"


class InventoryReason(str, Enum):
    """Why a batch quantity changed."""
    REGULAR_RESTOCK = "Regular Restock"
    SPOILAGE_WASTAGE = "Spoilage/Wastage"
    INVENTORY_CORRECTION = "Inventory Correction"
    SALE_DEDUCTION = "Sale Deduction"
    BATCH_COMPLETED = "Batch Completed"


# Reasons accepted by BatchLedger.adjust
ADJUSTMENT_REASONS = frozenset({
    InventoryReason.SPOILAGE_WASTAGE,
    InventoryReason.INVENTORY_CORRECTION,
    InventoryReason.SALE_DEDUCTION,
})


class PaymentMode(str, Enum):
    """How a sale was paid."""
    CASH = "Cash"
    CARD = "Card"
    UPI = "UPI"
