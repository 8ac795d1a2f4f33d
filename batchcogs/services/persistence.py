"""
Snapshot Persistence

Wraps a snapshot store so that save/load failures are reported as results
instead of exceptions. The in-memory state stays authoritative: a failed
save is logged and the next successful save catches up.
"""

import logging
import threading
from typing import Optional, Tuple

from pydantic import BaseModel

from batchcogs.errors import PersistenceError
from batchcogs.models.results import PersistenceResult
from batchcogs.storage.base import SnapshotStore

logger = logging.getLogger(__name__)


class SnapshotPersister:
    """Serializes snapshot writes and drops snapshots older than the last one written."""

    def __init__(self, store: Optional[SnapshotStore] = None, name: str = "ledger"):
        self.store = store
        self.name = name
        self._lock = threading.Lock()
        self._saved_version = -1

    @property
    def enabled(self) -> bool:
        return self.store is not None

    def save(self, snapshot: BaseModel) -> PersistenceResult:
        version = getattr(snapshot, "version", 0)
        if self.store is None:
            return PersistenceResult(ok=True, skipped=True, version=version)

        with self._lock:
            if version <= self._saved_version:
                # A newer snapshot was already written by another thread
                return PersistenceResult(ok=True, skipped=True, version=version)
            try:
                self.store.save(snapshot)
            except PersistenceError as e:
                logger.warning(f"Failed to save {self.name} snapshot v{version}: {e.message}")
                return PersistenceResult(ok=False, version=version, error=e.message)
            self._saved_version = version

        logger.debug(f"Saved {self.name} snapshot v{version}")
        return PersistenceResult(ok=True, version=version)

    def load(self) -> Tuple[Optional[BaseModel], PersistenceResult]:
        """Load the stored snapshot; (None, result) when nothing is available."""
        if self.store is None:
            return None, PersistenceResult(ok=True, skipped=True)

        try:
            snapshot = self.store.load()
        except PersistenceError as e:
            logger.warning(f"Failed to load {self.name} snapshot, starting empty: {e.message}")
            return None, PersistenceResult(ok=False, error=e.message)

        if snapshot is None:
            logger.info(f"No {self.name} snapshot found. Starting fresh.")
            return None, PersistenceResult(ok=True, skipped=True)

        version = getattr(snapshot, "version", 0)
        with self._lock:
            self._saved_version = max(self._saved_version, version)
        return snapshot, PersistenceResult(ok=True, version=version)
