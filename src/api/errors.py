"""Request timing, response logging and error responses."""

import logging
import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.services.metrics import error_tracker, performance_monitor

logger = logging.getLogger(__name__)

# Latency bucket for requests that matched no route
UNMATCHED_ENDPOINT = "<unmatched>"

# Location prefixes FastAPI adds to validation errors
_LOCATION_ROOTS = {"body", "query", "path", "header", "cookie"}


def _field_name(loc: tuple) -> str:
    parts = [str(part) for part in loc if part not in _LOCATION_ROOTS]
    return ".".join(parts) or "body"


def format_validation_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into ``{"field", "message"}`` pairs."""
    return [
        {"field": _field_name(tuple(error.get("loc", ()))), "message": error.get("msg", "")}
        for error in exc.errors()
    ]


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed input as 400 with per-field messages."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid input", "errors": format_validation_errors(exc)},
    )


def _endpoint_key(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ENDPOINT


async def timing_middleware(request: Request, call_next):
    """Time every request, log its outcome, and turn unexpected errors into 500s."""
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as e:
        latency_ms = (time.perf_counter() - start) * 1000
        endpoint = _endpoint_key(request)
        error_tracker.track_error(
            e, endpoint=endpoint, method=request.method, latency_ms=round(latency_ms)
        )
        performance_monitor.record_latency(endpoint, latency_ms)
        logger.warning(
            f"API Response: {request.method} {request.url.path} - 500 - {latency_ms:.0f}ms"
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    latency_ms = (time.perf_counter() - start) * 1000
    performance_monitor.record_latency(_endpoint_key(request), latency_ms)

    message = (
        f"API Response: {request.method} {request.url.path} - "
        f"{response.status_code} - {latency_ms:.0f}ms"
    )
    if response.status_code >= 400:
        logger.warning(message)
    else:
        logger.info(message)
    return response


def register_error_handling(app: FastAPI) -> None:
    """Install the validation handler and timing middleware on ``app``."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.middleware("http")(timing_middleware)
