"""
Centralized Test Configuration.
"""

import pytest
from datetime import datetime, timedelta, timezone
from httpx import AsyncClient, ASGITransport

from backend.app.main import app
from backend.app.core.dependencies import get_shipment_store
from backend.app.services.shipment_store import ShipmentStore


class TickingClock:
    """Deterministic clock: every call is one second after the previous one."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        self.current = self.current + timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def store(clock):
    """Fresh isolated store per test."""
    return ShipmentStore(shard_count=4, clock=clock)


@pytest.fixture(autouse=True)
def apply_overrides(store):
    """Route API requests to the per-test store."""
    app.dependency_overrides[get_shipment_store] = lambda: store
    yield
    app.dependency_overrides = {}


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
