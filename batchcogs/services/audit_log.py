"""Append-only audit trail of batch quantity changes."""

import threading
from typing import Iterable, List, Optional

from batchcogs.models.inventory import AuditLogEntry


class AuditLog:
    """Entries are only ever appended; reads return copies."""

    def __init__(self, entries: Optional[Iterable[AuditLogEntry]] = None):
        self._lock = threading.Lock()
        self._entries: List[AuditLogEntry] = list(entries or [])

    def append(self, entry: AuditLogEntry) -> AuditLogEntry:
        with self._lock:
            self._entries.append(entry)
        return entry

    def entries(self, newest_first: bool = False) -> List[AuditLogEntry]:
        with self._lock:
            result = list(self._entries)
        if newest_first:
            result.reverse()
        return result

    def for_batch(self, batch_id: str) -> List[AuditLogEntry]:
        with self._lock:
            return [e for e in self._entries if e.batch_id == batch_id]

    def for_ingredient(self, ingredient_name: str) -> List[AuditLogEntry]:
        key = ingredient_name.lower()
        with self._lock:
            return [e for e in self._entries if e.ingredient_name.lower() == key]

    def load(self, entries: Iterable[AuditLogEntry]) -> None:
        with self._lock:
            self._entries = list(entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
