"""
Custom exceptions and error handlers for consistent error responses.

Provides standardized error codes and global exception handlers.
"""

import logging
from datetime import datetime, timezone
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from typing import Any, Dict, Optional

logger = logging.getLogger("shipments.errors")


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found."""

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            error_code="ERR_NOT_FOUND_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


class ShipmentNotFoundError(ResourceNotFoundError):
    """Raised when no shipment exists for an order ID."""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__("Shipment", order_id)


class DuplicateShipmentError(AppException):
    """Raised when creating a shipment under an order ID that already exists."""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(
            message=f"Shipment with order ID already exists: {order_id}",
            error_code="ERR_SHIPMENT_DUPLICATE",
            status_code=status.HTTP_409_CONFLICT,
            details={"order_id": order_id}
        )


class UnknownStatusError(AppException):
    """Raised when text does not name any shipment status."""

    def __init__(self, value: Optional[str]):
        self.value = value
        super().__init__(
            message=f"Invalid shipment status: {value}",
            error_code="ERR_SHIPMENT_STATUS",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"status_value": value}
        )


class InvalidStatusTransitionError(AppException):
    """
    Raised when a requested status change is not the single valid next step.

    Either built from (current, target) statuses, or from the raw text of a
    status value that could not be parsed.
    """

    def __init__(self, current=None, target=None, valid_next=None, status_value: Optional[str] = None):
        self.current = current
        self.target = target
        self.valid_next = valid_next
        self.status_value = status_value

        if current is None or target is None:
            message = f"Invalid status value: {status_value}"
            details = {"status_value": status_value}
        else:
            next_value = valid_next.value if valid_next else "none"
            message = (
                f"Invalid status transition from {current.value} to {target.value}. "
                f"Valid next status is: {next_value}"
            )
            details = {
                "current_status": current.value,
                "target_status": target.value,
                "valid_next_status": valid_next.value if valid_next else None,
            }

        super().__init__(
            message=message,
            error_code="ERR_SHIPMENT_TRANSITION",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


# Global Exception Handlers

def _error_body(error_code: str, message: Any, details: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "error_code": error_code,
        "message": message,
        "details": details,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.error_code, exc.message, exc.details)
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for FastAPI HTTPException with standardized format."""
    # Map status code to error code
    error_code_map = {
        400: "ERR_BAD_REQUEST",
        404: "ERR_NOT_FOUND",
        405: "ERR_METHOD_NOT_ALLOWED",
        409: "ERR_CONFLICT",
        500: "ERR_INTERNAL_SERVER"
    }

    error_code = error_code_map.get(exc.status_code, "ERR_UNKNOWN")

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(error_code, exc.detail, {}),
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    field_errors = {
        ".".join(str(part) for part in error["loc"][1:]) or "body": error["msg"]
        for error in exc.errors()
    }
    return JSONResponse(
        status_code=422,
        content=_error_body(
            "ERR_VALIDATION",
            "Validation error",
            {
                "field_errors": field_errors,
                "errors": jsonable_encoder(exc.errors())
            }
        )
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception(
        "Unhandled exception",
        extra={"path": request.url.path, "exception_type": type(exc).__name__}
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("ERR_INTERNAL_SERVER", "An internal server error occurred", {})
    )
