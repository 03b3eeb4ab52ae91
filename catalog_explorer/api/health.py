"""Health check endpoints.

`/health` is a liveness check; `/ready` also checks that the remote catalog
API answers, since no page can load without it.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from catalog_explorer.api.pages import get_client
from catalog_explorer.infrastructure.catalog_client import CatalogAPIClient
from catalog_explorer.infrastructure.config import settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness response schema."""

    status: str
    catalog_api_url: str
    catalog_reachable: bool


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        service="catalog-explorer",
        version=settings.api_version,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"model": ReadinessResponse}},
)
async def readiness_check(
    response: Response,
    client: Annotated[CatalogAPIClient, Depends(get_client)],
) -> ReadinessResponse:
    """Check if the service can serve pages.

    Returns:
        Readiness status; 503 when the catalog API is unreachable.
    """
    reachable = await client.health_check()
    if not reachable:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(
        status="ready" if reachable else "not_ready",
        catalog_api_url=settings.catalog_api_url,
        catalog_reachable=reachable,
    )
