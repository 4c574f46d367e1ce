"""
Shipment workflow rules.

Pure functions over ShipmentStatus; no state, safe from any thread.
"""

from typing import Optional

from backend.app.core.exceptions import UnknownStatusError
from backend.app.models.shipment_enums import ShipmentStatus


def next_status(current: ShipmentStatus) -> Optional[ShipmentStatus]:
    """
    Get the next status in the workflow.
    
    Returns:
        The single successor of ``current``, or None once DELIVERED
    """
    match current:
        case ShipmentStatus.PENDING:
            return ShipmentStatus.DISPATCHED
        case ShipmentStatus.DISPATCHED:
            return ShipmentStatus.IN_TRANSIT
        case ShipmentStatus.IN_TRANSIT:
            return ShipmentStatus.DELIVERED
        case ShipmentStatus.DELIVERED:
            return None


def can_transition(current: ShipmentStatus, target: ShipmentStatus) -> bool:
    """Check whether ``target`` is exactly the next step after ``current``."""
    successor = next_status(current)
    return successor is not None and successor == target


def parse_status(text: Optional[str]) -> ShipmentStatus:
    """
    Parse a wire string into a ShipmentStatus (case-insensitive).
    
    Raises:
        UnknownStatusError: If text is missing or matches no status
    """
    if text is None:
        raise UnknownStatusError(text)

    normalized = text.lower()
    for status in ShipmentStatus:
        if status.value == normalized:
            return status

    raise UnknownStatusError(text)
