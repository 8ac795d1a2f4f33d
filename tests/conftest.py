"""Pytest configuration and fixtures."""

import os
import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app
os.environ["DEBUG"] = "true"
os.environ["STORAGE_BACKEND"] = "memory"

from batchcogs.errors import PersistenceError  # noqa: E402
from batchcogs.models.recipes import Dish, RecipeItem  # noqa: E402
from batchcogs.services import InventoryService  # noqa: E402


class FixedClock:
    """Clock that only moves when a test moves it."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class FailingStore:
    """Snapshot store whose writes always fail."""

    def __init__(self):
        self.attempts = 0

    def load(self):
        return None

    def save(self, snapshot):
        self.attempts += 1
        raise PersistenceError("disk full")


class RecordingStore:
    """In-memory snapshot store that keeps every saved snapshot."""

    def __init__(self):
        self.saved = []

    def load(self):
        return self.saved[-1] if self.saved else None

    def save(self, snapshot):
        self.saved.append(snapshot)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 1, 5, 10, 0))


@pytest.fixture
def service(clock) -> InventoryService:
    """Ledger without persistence."""
    return InventoryService(clock=clock)


@pytest.fixture
def rice(service):
    """
    Rice stocked in two batches:
    A: 10 kg for 800 expiring 2025-01-10, B: 5 kg for 450 expiring 2025-02-01.
    """
    service.define_ingredient("Rice", "kg")
    batch_a = service.restock_batch("Rice", 10, expiry="2025-01-10", actor="Chef", total_cost=800).value
    batch_b = service.restock_batch("Rice", 5, expiry="2025-02-01", actor="Chef", total_cost=450).value
    return batch_a, batch_b


@pytest.fixture
def fried_rice() -> Dish:
    return Dish(
        name="Fried Rice",
        price=250,
        category="Mains",
        recipe=[RecipeItem(ingredient_name="Rice", quantity_needed=0.5)],
    )


@pytest.fixture
def api_client() -> Generator[TestClient, None, None]:
    """Create a FastAPI test client backed by a fresh in-memory ledger."""
    from api.dependencies import get_inventory_service, get_report_service, get_sales_service
    from api.main import app

    for provider in (get_inventory_service, get_sales_service, get_report_service):
        provider.cache_clear()

    with TestClient(app) as client:
        yield client

    for provider in (get_inventory_service, get_sales_service, get_report_service):
        provider.cache_clear()


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()


@pytest.fixture
def recording_store() -> RecordingStore:
    return RecordingStore()
