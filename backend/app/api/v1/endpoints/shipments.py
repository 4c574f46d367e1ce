"""
Shipment Tracking API Endpoints.

Create, inspect and advance shipments through
pending → dispatched → in-transit → delivered.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Response, status, Query, Path

from backend.app.core.dependencies import get_shipment_store
from backend.app.core.exceptions import ShipmentNotFoundError
from backend.app.models.shipment import Shipment
from backend.app.schemas.shipment import (
    ShipmentCreate, ShipmentStatusUpdate, ShipmentResponse, ShipmentStatsResponse
)
from backend.app.services.shipment_store import ShipmentStore

router = APIRouter(prefix="/shipments", tags=["Shipment Tracking"])


@router.post("", response_model=ShipmentResponse, status_code=status.HTTP_201_CREATED)
async def create_shipment(
    shipment_data: ShipmentCreate,
    store: ShipmentStore = Depends(get_shipment_store)
):
    """
    Create a new shipment.
    
    Status defaults to pending when not provided.
    Returns 409 if the order ID already exists.
    """
    created = store.create(Shipment(
        order_id=shipment_data.order_id,
        origin=shipment_data.origin,
        destination=shipment_data.destination,
        status=shipment_data.status,
    ))
    return ShipmentResponse.model_validate(created)


@router.get("", response_model=List[ShipmentResponse])
async def list_shipments(
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by shipment status"),
    origin: Optional[str] = Query(None, description="Filter by origin location"),
    store: ShipmentStore = Depends(get_shipment_store)
):
    """List shipments, optionally filtered by status and origin (case-insensitive)."""
    shipments = store.list(status=status_filter, origin=origin)
    return [ShipmentResponse.model_validate(s) for s in shipments]


@router.get("/stats", response_model=ShipmentStatsResponse)
async def get_shipment_stats(store: ShipmentStore = Depends(get_shipment_store)):
    """Total shipment count plus counts per status."""
    counts = store.count_by_status()
    return ShipmentStatsResponse(
        total_shipments=store.total_count(),
        count_by_status={s.value: count for s, count in counts.items()}
    )


@router.get("/{order_id}", response_model=ShipmentResponse)
async def get_shipment(
    order_id: str = Path(..., description="Order ID of the shipment"),
    store: ShipmentStore = Depends(get_shipment_store)
):
    """Get shipment details by order ID."""
    return ShipmentResponse.model_validate(store.get(order_id))


@router.head("/{order_id}")
async def shipment_exists(
    order_id: str = Path(..., description="Order ID of the shipment"),
    store: ShipmentStore = Depends(get_shipment_store)
):
    """200 if the shipment exists, 404 otherwise. No body."""
    if not store.exists(order_id):
        raise ShipmentNotFoundError(order_id)
    return Response(status_code=status.HTTP_200_OK)


@router.patch("/{order_id}", response_model=ShipmentResponse)
async def update_shipment_status(
    update: ShipmentStatusUpdate,
    order_id: str = Path(..., description="Order ID of the shipment"),
    store: ShipmentStore = Depends(get_shipment_store)
):
    """
    Update the shipment's status.
    
    Valid transitions: pending → dispatched → in-transit → delivered.
    Returns 400 for skipped, backward or unknown statuses; 404 if missing.
    """
    updated = store.update_status_by_text(order_id, update.status)
    return ShipmentResponse.model_validate(updated)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_shipment(
    order_id: str = Path(..., description="Order ID of the shipment"),
    store: ShipmentStore = Depends(get_shipment_store)
):
    """Remove a shipment (administrative/testing use)."""
    if not store.delete(order_id):
        raise ShipmentNotFoundError(order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
