"""Snapshot store contract."""

from typing import Optional, Protocol

from pydantic import BaseModel


class SnapshotStore(Protocol):
    """
    Loads and saves one snapshot model.

    Implementations raise ``PersistenceError`` on any failure and return
    ``None`` from ``load`` when nothing has been saved yet.
    """

    def load(self) -> Optional[BaseModel]:
        ...

    def save(self, snapshot: BaseModel) -> None:
        ...
