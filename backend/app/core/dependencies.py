"""
Shared FastAPI dependencies.

Provides the process-wide shipment store to route handlers.
"""

from backend.app.core.config import settings
from backend.app.services.shipment_store import ShipmentStore

# Memory-resident store, lives as long as the process
shipment_store = ShipmentStore(shard_count=settings.store_shard_count)


def get_shipment_store() -> ShipmentStore:
    """
    FastAPI dependency for the shipment store.
    
    Tests override this to get an isolated store per test.
    """
    return shipment_store
