"""
In-memory shipment store.

Keeps shipment records keyed by order ID. The collection is split into
lock-striped shards: every operation on one order ID runs under that key's
shard lock, so check-then-act sequences (create, status update) are atomic
per key while keys in other shards proceed in parallel.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from backend.app.core.exceptions import (
    DuplicateShipmentError,
    InvalidStatusTransitionError,
    ShipmentNotFoundError,
    UnknownStatusError,
)
from backend.app.domain.shipment.status_policy import can_transition, next_status, parse_status
from backend.app.models.shipment import Shipment
from backend.app.models.shipment_enums import ShipmentStatus

logger = logging.getLogger("shipments.store")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _Shard:
    __slots__ = ("lock", "records")

    def __init__(self):
        self.lock = threading.Lock()
        self.records: Dict[str, Shipment] = {}


class ShipmentStore:
    """
    Concurrency-safe keyed collection of shipments.

    Every Shipment handed out is a snapshot; mutating it never touches
    the stored record.
    """

    def __init__(self, shard_count: int = 16, clock: Callable[[], datetime] = utc_now):
        if shard_count < 1:
            raise ValueError("shard_count must be at least 1")
        self._shards = [_Shard() for _ in range(shard_count)]
        self._clock = clock

    def _shard_for(self, order_id: str) -> _Shard:
        return self._shards[hash(order_id) % len(self._shards)]

    def _set_status(self, record: Shipment, status: ShipmentStatus) -> None:
        # Caller holds the shard lock.
        record.status = status
        record.updated_at = self._clock()

    def create(self, shipment: Shipment) -> Shipment:
        """
        Store a new shipment.

        Missing status defaults to PENDING; missing timestamps are stamped now.

        Raises:
            DuplicateShipmentError: If the order ID is already present
        """
        record = shipment.snapshot()
        if record.status is None:
            record.status = ShipmentStatus.PENDING
        if record.created_at is None:
            record.created_at = self._clock()
        if record.updated_at is None:
            record.updated_at = record.created_at

        shard = self._shard_for(record.order_id)
        with shard.lock:
            if record.order_id in shard.records:
                logger.warning("Duplicate shipment rejected", extra={"order_id": record.order_id})
                raise DuplicateShipmentError(record.order_id)
            shard.records[record.order_id] = record
            created = record.snapshot()

        logger.info(
            "Shipment created",
            extra={"order_id": created.order_id, "status": created.status.value}
        )
        return created

    def get(self, order_id: str) -> Shipment:
        """
        Get a snapshot of a shipment.

        Raises:
            ShipmentNotFoundError: If no shipment has this order ID
        """
        shard = self._shard_for(order_id)
        with shard.lock:
            record = shard.records.get(order_id)
            if record is None:
                raise ShipmentNotFoundError(order_id)
            return record.snapshot()

    def update_status(self, order_id: str, target: ShipmentStatus) -> Shipment:
        """
        Move a shipment to its next status.

        The current-status check and the write happen under one lock.

        Raises:
            ShipmentNotFoundError: If no shipment has this order ID
            InvalidStatusTransitionError: If target is not the next step
        """
        shard = self._shard_for(order_id)
        with shard.lock:
            record = shard.records.get(order_id)
            if record is None:
                raise ShipmentNotFoundError(order_id)

            current = record.status
            if not can_transition(current, target):
                logger.warning(
                    "Invalid status transition rejected",
                    extra={"order_id": order_id, "current": current.value, "target": target.value}
                )
                raise InvalidStatusTransitionError(current, target, next_status(current))

            self._set_status(record, target)
            updated = record.snapshot()

        logger.info(
            "Shipment status updated",
            extra={"order_id": order_id, "previous": current.value, "status": target.value}
        )
        return updated

    def update_status_by_text(self, order_id: str, status_text: Optional[str]) -> Shipment:
        """
        Parse a status wire string and apply it with update_status.

        Unparseable text is reported as an invalid transition.
        """
        try:
            target = parse_status(status_text)
        except UnknownStatusError as exc:
            raise InvalidStatusTransitionError(status_value=status_text) from exc
        return self.update_status(order_id, target)

    def list(self, status: Optional[str] = None, origin: Optional[str] = None) -> List[Shipment]:
        """Get snapshots matching optional status and origin filters (case-insensitive)."""
        status_filter = status.lower() if status is not None else None
        origin_filter = origin.lower() if origin is not None else None

        results = []
        for shard in self._shards:
            with shard.lock:
                for record in shard.records.values():
                    if status_filter is not None and record.status.value != status_filter:
                        continue
                    if origin_filter is not None and record.origin.lower() != origin_filter:
                        continue
                    results.append(record.snapshot())
        return results

    def count_by_status(self) -> Dict[ShipmentStatus, int]:
        """Count shipments per status. Statuses with no shipments are absent."""
        counts: Dict[ShipmentStatus, int] = {}
        for shard in self._shards:
            with shard.lock:
                for record in shard.records.values():
                    counts[record.status] = counts.get(record.status, 0) + 1
        return counts

    def total_count(self) -> int:
        total = 0
        for shard in self._shards:
            with shard.lock:
                total += len(shard.records)
        return total

    def exists(self, order_id: str) -> bool:
        shard = self._shard_for(order_id)
        with shard.lock:
            return order_id in shard.records

    def delete(self, order_id: str) -> bool:
        """Remove a shipment (administrative use). Returns whether it existed."""
        shard = self._shard_for(order_id)
        with shard.lock:
            removed = shard.records.pop(order_id, None) is not None

        if removed:
            logger.info("Shipment deleted", extra={"order_id": order_id})
        return removed

    def clear(self) -> None:
        for shard in self._shards:
            with shard.lock:
                shard.records.clear()
