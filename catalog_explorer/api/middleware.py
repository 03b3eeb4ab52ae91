"""API middleware for Catalog Explorer.

The request ID assigned here is forwarded to the remote catalog API on every
upstream fetch, so one ID ties a page request to the catalog calls it made.
"""

import re
import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from catalog_explorer.api.schemas import ErrorResponse

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"

# Only header-safe IDs are forwarded upstream.
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def resolve_request_id(supplied: str | None) -> str:
    """Return the caller's request ID, or a fresh one if it is missing or unsafe."""
    if supplied and _REQUEST_ID_PATTERN.match(supplied):
        return supplied
    return str(uuid4())


# ============================================================================
# Request ID Middleware
# ============================================================================


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Assign a correlation ID and log one line per page request."""

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        supplied = request.headers.get(REQUEST_ID_HEADER)
        request_id = resolve_request_id(supplied)
        if supplied and supplied != request_id:
            logger.warning("Replaced invalid request ID", supplied_length=len(supplied))

        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
        finally:
            logger.info(
                "Page request served",
                method=request.method,
                path=request.url.path,
                query=request.url.query or None,
                status_code=getattr(response, "status_code", 500),
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


# ============================================================================
# Error Handling Middleware
# ============================================================================


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turn crashes that escape a page handler into a standard error body.

    Expected page failures are already mapped to 404/502 by the page
    handlers; anything reaching here is a bug and is reported as a 500.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                "Page handler crashed",
                path=request.url.path,
                error_type=type(e).__name__,
            )
            body = ErrorResponse(
                error_code="INTERNAL_ERROR",
                message="An internal error occurred",
                request_id=getattr(request.state, "request_id", None),
            )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=body.model_dump(),
            )


# ============================================================================
# Middleware Setup
# ============================================================================


def setup_middleware(app: FastAPI) -> None:
    """Configure all middleware for the application.

    Middleware is added in reverse order (last added = first executed).

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(ErrorHandlerMiddleware)
    # Outermost, so error responses carry the header too
    app.add_middleware(RequestIdMiddleware)
