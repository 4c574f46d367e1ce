"""
Shipment Status Enumeration.
"""

import enum


class ShipmentStatus(str, enum.Enum):
    """
    Shipment status enumeration.
    
    Status flow (forward only, one step at a time):
        PENDING → DISPATCHED → IN_TRANSIT → DELIVERED
    
    Values are the wire representation used for parsing and serialization.
    """
    PENDING = "pending"
    DISPATCHED = "dispatched"
    IN_TRANSIT = "in-transit"
    DELIVERED = "delivered"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    ShipmentStatus.PENDING: "Shipment is pending processing",
    ShipmentStatus.DISPATCHED: "Shipment has been dispatched",
    ShipmentStatus.IN_TRANSIT: "Shipment is in transit",
    ShipmentStatus.DELIVERED: "Shipment has been delivered",
}
