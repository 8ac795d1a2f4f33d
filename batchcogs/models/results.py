"""Operation results returned to collaborators."""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PersistenceResult(BaseModel):
    """Outcome of writing a snapshot after a mutation."""

    ok: bool = True
    skipped: bool = False
    version: int = 0
    error: Optional[str] = None


class OperationResult(BaseModel, Generic[T]):
    """
    Value of a mutating operation plus how its persistence went.

    A failed save never undoes the in-memory change, so ``value`` is always
    the applied result and ``persistence.ok`` tells whether it reached disk.
    """

    value: T
    persistence: Optional[PersistenceResult] = None

    @property
    def persisted(self) -> bool:
        return self.persistence is not None and self.persistence.ok
