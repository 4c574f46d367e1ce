"""
Shipment Pydantic schemas.

Defines request and response models for shipment tracking.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional, Dict
from backend.app.core.exceptions import UnknownStatusError
from backend.app.domain.shipment.status_policy import parse_status
from backend.app.models.shipment_enums import ShipmentStatus


class ShipmentCreate(BaseModel):
    """Schema for creating a new shipment."""
    order_id: str = Field(..., min_length=1, max_length=100, description="Unique order identifier")
    origin: str = Field(..., min_length=1, max_length=255, description="Origin location")
    destination: str = Field(..., min_length=1, max_length=255, description="Destination location")
    status: Optional[ShipmentStatus] = Field(None, description="Initial status (default: pending)")

    @field_validator("status", mode="before")
    @classmethod
    def parse_status_text(cls, value):
        """Accept any casing of the wire value, as status updates do."""
        if not isinstance(value, str):
            return value
        try:
            return parse_status(value)
        except UnknownStatusError as exc:
            raise ValueError(exc.message) from exc
    
    class Config:
        str_strip_whitespace = True


class ShipmentStatusUpdate(BaseModel):
    """Schema for a status change. The value is parsed case-insensitively."""
    status: Optional[str] = Field(None, description="Next status, e.g. 'dispatched'")


class ShipmentResponse(BaseModel):
    """Schema for shipment response."""
    order_id: str
    origin: str
    destination: str
    status: ShipmentStatus
    status_description: str
    created_at: datetime
    updated_at: datetime
    
    class Config:
        from_attributes = True


class ShipmentStatsResponse(BaseModel):
    """Shipment totals, with counts keyed by status wire value."""
    total_shipments: int
    count_by_status: Dict[str, int]
