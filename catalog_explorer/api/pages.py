"""Catalog page endpoints.

Each request fetches what its page needs once, derives the page through
the page service and returns it as JSON. Page load failures map to HTTP
errors: a missing entity is a 404, an unreachable catalog a 502.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Annotated, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from catalog_explorer.api.schemas import (
    BrandDetailResponse,
    BrandListResponse,
    BrandShelfSchema,
    ErrorResponse,
    LandingResponse,
    ModelDetailResponse,
    PriceRangeSchema,
    ProductDetailResponse,
    SearchResponse,
    SeriesDetailResponse,
    SeriesListResponse,
    VariantCardSchema,
)
from catalog_explorer.application.page_controller import PageController
from catalog_explorer.application.pages import CatalogPageService, get_page_service
from catalog_explorer.catalog.joins import VariantDisplay
from catalog_explorer.catalog.search import SearchResults
from catalog_explorer.domain.state_machines import PageError, PageErrorKind, PageStatus
from catalog_explorer.infrastructure.catalog_client import (
    CatalogAPIClient,
    get_catalog_client,
)

T = TypeVar("T")

router = APIRouter(tags=["Pages"])

QueryParam = Annotated[
    str | None,
    Query(alias="q", description="Case-insensitive substring filter"),
]

ERROR_RESPONSES: dict[int | str, dict] = {
    404: {"model": ErrorResponse, "description": "Entity not found"},
    502: {"model": ErrorResponse, "description": "Catalog API unavailable"},
}


# ============================================================================
# Dependencies
# ============================================================================


async def get_client(request: Request) -> AsyncIterator[CatalogAPIClient]:
    """Catalog client scoped to the request."""
    request_id = getattr(request.state, "request_id", None)
    client = get_catalog_client(request_id=request_id)
    try:
        yield client
    finally:
        await client.close()


def get_service(
    client: Annotated[CatalogAPIClient, Depends(get_client)],
) -> CatalogPageService:
    """Page service bound to the request's catalog client."""
    return get_page_service(client)


ServiceDep = Annotated[CatalogPageService, Depends(get_service)]


async def render_page(name: str, loader: Callable[[], Awaitable[T]]) -> T:
    """Load a page through its state machine.

    Args:
        name: Page name used in error messages.
        loader: Coroutine factory producing the page data.

    Returns:
        The page data.

    Raises:
        HTTPException: If the page settled in the error state.
    """
    page: PageController[T] = PageController(name, loader)
    try:
        state = await page.load()
    finally:
        await page.close()

    if state.status is PageStatus.SUCCESS:
        return state.data  # type: ignore[return-value]
    raise page_error_to_http(state.error)


def page_error_to_http(error: PageError | None) -> HTTPException:
    """Convert a page error into an HTTP exception."""
    if error is not None and error.kind is PageErrorKind.NOT_FOUND:
        status_code = status.HTTP_404_NOT_FOUND
        error_code = "NOT_FOUND"
    else:
        status_code = status.HTTP_502_BAD_GATEWAY
        error_code = "CATALOG_UNAVAILABLE"

    return HTTPException(
        status_code=status_code,
        detail={
            "error_code": error_code,
            "message": error.message if error else "Page failed to load",
            "details": [
                {"field": key, "message": str(value)}
                for key, value in (error.details if error else {}).items()
                if value is not None
            ],
            "retryable": error.retryable if error else False,
        },
    )


# ============================================================================
# Converters
# ============================================================================


def variant_card(display: VariantDisplay) -> VariantCardSchema:
    """Convert a resolved variant into a card schema."""
    return VariantCardSchema(
        variant=display.variant,
        image=display.image,
        price=display.price,
        product_name=display.product.name if display.product else None,
        in_stock=display.variant.in_stock,
        stock=display.variant.available_stock,
    )


def search_response(results: SearchResults) -> SearchResponse:
    """Convert search results into a response schema."""
    return SearchResponse(
        active=results.active,
        query=results.query,
        total=results.total,
        brands=list(results.brands),
        series=list(results.series),
        models=list(results.models),
        products=list(results.products),
        variants=list(results.variants),
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "/pages/home",
    response_model=LandingResponse,
    responses=ERROR_RESPONSES,
)
async def landing_page(service: ServiceDep, q: QueryParam = None) -> LandingResponse:
    """Landing page: hero search, featured series and brand shelves."""
    page = await render_page("catalog", lambda: service.landing(q))
    return LandingResponse(
        search=search_response(page.search),
        featured_series=page.featured_series,
        shelves=[
            BrandShelfSchema(
                brand=shelf.brand,
                variants=[variant_card(v) for v in shelf.variants],
            )
            for shelf in page.shelves
        ],
    )


@router.get("/search", response_model=SearchResponse, responses=ERROR_RESPONSES)
async def search_catalog(service: ServiceDep, q: QueryParam = None) -> SearchResponse:
    """Search brands, series, models, products and variants."""
    results = await render_page("search results", lambda: service.search(q))
    return search_response(results)


@router.get(
    "/pages/brands",
    response_model=BrandListResponse,
    responses=ERROR_RESPONSES,
)
async def brand_listing(service: ServiceDep, q: QueryParam = None) -> BrandListResponse:
    """All brands, filtered by name."""
    page = await render_page("brands", lambda: service.brand_listing(q))
    return BrandListResponse(items=page.items, matched=len(page.items), total=page.total)


@router.get(
    "/pages/brands/{brand_id}",
    response_model=BrandDetailResponse,
    responses=ERROR_RESPONSES,
)
async def brand_detail(brand_id: str, service: ServiceDep) -> BrandDetailResponse:
    """A brand and its series."""
    page = await render_page("brand details", lambda: service.brand_detail(brand_id))
    return BrandDetailResponse(
        brand=page.brand,
        series=page.series,
        series_count=len(page.series),
    )


@router.get(
    "/pages/series",
    response_model=SeriesListResponse,
    responses=ERROR_RESPONSES,
)
async def series_listing(service: ServiceDep, q: QueryParam = None) -> SeriesListResponse:
    """All series, filtered by name."""
    page = await render_page("series", lambda: service.series_listing(q))
    return SeriesListResponse(items=page.items, matched=len(page.items), total=page.total)


@router.get(
    "/pages/series/{series_id}",
    response_model=SeriesDetailResponse,
    responses=ERROR_RESPONSES,
)
async def series_detail(
    series_id: str,
    service: ServiceDep,
    q: QueryParam = None,
) -> SeriesDetailResponse:
    """A series with its brand and models (models filtered by name)."""
    page = await render_page(
        "series details", lambda: service.series_detail(series_id, q)
    )
    return SeriesDetailResponse(
        series=page.series,
        brand=page.brand,
        models=page.models,
        model_count=page.model_count,
    )


@router.get(
    "/pages/models/{model_id}",
    response_model=ModelDetailResponse,
    responses=ERROR_RESPONSES,
)
async def model_detail(model_id: str, service: ServiceDep) -> ModelDetailResponse:
    """A model with its series, brand and variants."""
    page = await render_page("model details", lambda: service.model_detail(model_id))
    return ModelDetailResponse(
        model=page.lineage.model,
        series=page.lineage.series,
        brand=page.lineage.brand,
        variants=[variant_card(v) for v in page.variants],
        variant_count=len(page.variants),
    )


@router.get(
    "/pages/products/{product_id}",
    response_model=ProductDetailResponse,
    responses=ERROR_RESPONSES,
)
async def product_detail(product_id: str, service: ServiceDep) -> ProductDetailResponse:
    """A product with its variants, price range and stock."""
    page = await render_page(
        "product details", lambda: service.product_detail(product_id)
    )
    price_range = (
        PriceRangeSchema(min=page.price_range.min, max=page.price_range.max)
        if page.price_range is not None
        else None
    )
    return ProductDetailResponse(
        product=page.product,
        variants=[variant_card(v) for v in page.variants],
        variant_count=len(page.variants),
        price_range=price_range,
        has_price_range=page.has_price_range,
        display_price=page.display_price,
        total_stock=page.total_stock,
    )
