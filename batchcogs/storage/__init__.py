"""Data storage layer."""

from batchcogs.storage.base import SnapshotStore
from batchcogs.storage.json_store import JsonFileStore
from batchcogs.storage.sqlite_store import SqliteSnapshotStore

__all__ = [
    "SnapshotStore",
    "JsonFileStore",
    "SqliteSnapshotStore",
]
