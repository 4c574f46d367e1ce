"""
Observability Middleware.

Adds correlation IDs and structured logging context to requests.
"""

import time
import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# Configure structured logger
logger = logging.getLogger("shipments.http")


def configure_logging(level: str = "INFO") -> None:
    """Configure the ``shipments`` logger family once for the process."""
    root = logging.getLogger("shipments")
    root.setLevel(level.upper())
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s [%(name)s] %(message)s"
        ))
        root.addHandler(handler)


def _log_level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with a correlation ID and logs one line per request.

    Shipment routes also carry the order ID in the log record, so all calls
    touching one shipment can be pulled out of the logs together.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        started = time.perf_counter()

        response = await call_next(request)

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Process-Time"] = str(duration_ms)

        # Routing has filled in path params on the shared scope by now
        order_id = request.scope.get("path_params", {}).get("order_id")

        logger.log(
            _log_level_for(response.status_code),
            "%s %s -> %d",
            request.method,
            request.url.path,
            response.status_code,
            extra={
                "correlation_id": correlation_id,
                "order_id": order_id,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "client_ip": request.client.host if request.client else "unknown",
            }
        )
        return response
