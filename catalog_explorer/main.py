"""Catalog Explorer API main application module.

This module initializes the FastAPI application and configures
logging, middleware, routers and exception handlers.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalog_explorer.api.health import router as health_router
from catalog_explorer.api.middleware import setup_middleware
from catalog_explorer.api.pages import router as pages_router
from catalog_explorer.infrastructure.config import settings
from catalog_explorer.infrastructure.logging import configure_logging

configure_logging(settings.log_level, json_output=settings.log_json)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    logger.info(
        "Starting Catalog Explorer API",
        version=settings.api_version,
        debug=settings.debug,
        catalog_api_url=settings.catalog_api_url,
    )

    yield

    logger.info("Shutting down Catalog Explorer API")


app = FastAPI(
    title="Catalog Explorer API",
    description="Searchable, linked views over a remote product catalog",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Setup custom middleware (request ID, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(pages_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    request_id = getattr(request.state, "request_id", None)

    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", [])
        retryable = detail.get("retryable", False)
    else:
        error_code = "NOT_FOUND" if exc.status_code == 404 else "ERROR"
        message = str(detail)
        details = []
        retryable = False

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details,
            "retryable": retryable,
            "request_id": request_id,
        },
    )
