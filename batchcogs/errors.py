"""Domain errors raised by the ledger services."""

from typing import Any, Dict, List, Optional


class LedgerError(Exception):
    """Base class for ledger errors."""

    code = "LEDGER_ERROR"

    def __init__(self, message: str, details: Dict[str, Any] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(LedgerError):
    """Input rejected before any state change."""

    code = "VALIDATION_ERROR"


class UnknownIngredientError(ValidationError):
    """Ingredient is not defined in the catalog."""

    def __init__(self, name: str):
        super().__init__(
            f"Ingredient '{name}' is not defined.",
            details={"ingredient": name},
        )


class InvalidQuantityError(ValidationError):
    """Quantity is zero, negative or otherwise unusable."""

    def __init__(self, message: str, quantity: Any = None):
        super().__init__(message, details={"quantity": quantity})


class AlreadyExistsError(LedgerError):
    """Resource already registered."""

    code = "CONFLICT"

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            f"{resource} already exists: {identifier}",
            details={"resource": resource, "identifier": identifier},
        )


class NotFoundError(LedgerError):
    """Referenced resource does not exist."""

    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            f"{resource} not found: {identifier}",
            details={"resource": resource, "identifier": identifier},
        )


class BatchCompletedError(LedgerError):
    """Batch was fully consumed and accepts no further mutation."""

    code = "BATCH_COMPLETED"

    def __init__(self, batch_id: str):
        super().__init__(
            f"Batch {batch_id} is completed and can no longer be adjusted.",
            details={"batch_id": batch_id},
        )


class InsufficientStockError(LedgerError):
    """Requested quantity exceeds what current stock can serve."""

    code = "INSUFFICIENT_STOCK"

    def __init__(
        self,
        message: str,
        shortfalls: Optional[Dict[str, float]] = None,
        committed: Optional[List[str]] = None,
    ):
        self.shortfalls = shortfalls or {}
        self.committed = committed or []
        super().__init__(
            message,
            details={"shortfalls": self.shortfalls, "committed": self.committed},
        )


class PersistenceError(LedgerError):
    """Snapshot could not be loaded or saved."""

    code = "PERSISTENCE_ERROR"
