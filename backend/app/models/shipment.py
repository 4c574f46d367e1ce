"""
Shipment record model.

A shipment is one tracked package, identified by its order ID.
"""

import copy
from datetime import datetime
from typing import Optional

from backend.app.models.shipment_enums import ShipmentStatus


class Shipment:
    """
    In-memory shipment record.
    
    Identity and equality are based on ``order_id`` alone.
    A ``status`` of None means the store picks the default (PENDING) on create.
    """

    def __init__(
        self,
        order_id: str,
        origin: str,
        destination: str,
        status: Optional[ShipmentStatus] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.order_id = order_id
        self.origin = origin
        self.destination = destination
        self.status = status
        self.created_at = created_at
        self.updated_at = updated_at

    @property
    def status_description(self) -> Optional[str]:
        return self.status.description if self.status else None

    def snapshot(self) -> "Shipment":
        """Return an independent point-in-time copy of this record."""
        return copy.copy(self)

    def __eq__(self, other):
        if not isinstance(other, Shipment):
            return NotImplemented
        return self.order_id == other.order_id

    def __hash__(self):
        return hash(self.order_id)

    def __repr__(self):
        status = self.status.value if self.status else None
        return (
            f"<Shipment(order_id='{self.order_id}', origin='{self.origin}', "
            f"destination='{self.destination}', status='{status}')>"
        )
