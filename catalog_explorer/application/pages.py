"""Catalog page services.

Assembles the data of every catalog page from the remote client and the
join/search engines. Each page fetches its collections once as a parallel
batch and derives all views from that single fetch.
"""

from dataclasses import dataclass

from catalog_explorer.application.page_controller import PageController
from catalog_explorer.catalog.indexes import CatalogIndexes, build_indexes
from catalog_explorer.catalog.joins import (
    ModelLineage,
    PriceRange,
    VariantDisplay,
    brand_shelves,
    model_lineage,
    models_of_series,
    price_range,
    resolve_display,
    series_brand,
    series_of_brand,
    total_stock,
    variants_of_model,
    variants_of_product,
)
from catalog_explorer.catalog.models import (
    Brand,
    CatalogSnapshot,
    Model,
    Product,
    Series,
)
from catalog_explorer.catalog.search import (
    INACTIVE_SEARCH,
    SearchResults,
    filter_by_name,
    search,
)
from catalog_explorer.domain.state_machines import PageState, PageStatus
from catalog_explorer.infrastructure.catalog_client import (
    CatalogAPIClient,
    gather_or_cancel,
)
from catalog_explorer.infrastructure.config import settings


# ============================================================================
# Page Views
# ============================================================================


@dataclass(frozen=True)
class CatalogView:
    """A fetched snapshot together with the indexes built from it."""

    snapshot: CatalogSnapshot
    indexes: CatalogIndexes

    @classmethod
    def from_snapshot(cls, snapshot: CatalogSnapshot) -> "CatalogView":
        return cls(snapshot=snapshot, indexes=build_indexes(snapshot))


@dataclass(frozen=True)
class BrandShelfView:
    """A brand shelf with display-resolved variants."""

    brand: Brand
    variants: list[VariantDisplay]


@dataclass(frozen=True)
class LandingPage:
    """Landing page: hero search, featured series, brand shelves."""

    search: SearchResults
    featured_series: list[Series]
    shelves: list[BrandShelfView]


@dataclass(frozen=True)
class ListingPage:
    """Name-filtered listing of brands or series.

    Attributes:
        items: Matching records.
        total: Size of the unfiltered collection.
    """

    items: list[Brand] | list[Series]
    total: int


@dataclass(frozen=True)
class BrandDetailPage:
    """A brand and its series."""

    brand: Brand
    series: list[Series]


@dataclass(frozen=True)
class SeriesDetailPage:
    """A series, its brand and its (filtered) models."""

    series: Series
    brand: Brand | None
    models: list[Model]
    model_count: int


@dataclass(frozen=True)
class ModelDetailPage:
    """A model, its lineage and its variants."""

    lineage: ModelLineage
    variants: list[VariantDisplay]


@dataclass(frozen=True)
class ProductDetailPage:
    """A product with its variants and pricing summary.

    Attributes:
        product: The product.
        variants: Display-resolved variants.
        price_range: Variant price range, if any price is set.
        display_price: Single price shown when there is no real range.
        total_stock: Units available across variants.
    """

    product: Product
    variants: list[VariantDisplay]
    price_range: PriceRange | None
    display_price: float
    total_stock: int

    @property
    def has_price_range(self) -> bool:
        """Whether a min-max range should be shown instead of one price."""
        return (
            len(self.variants) > 1
            and self.price_range is not None
            and not self.price_range.is_single
        )


def build_landing_page(
    view: CatalogView,
    query: str | None = None,
    shelf_size: int | None = None,
    featured_series_size: int | None = None,
) -> LandingPage:
    """Derive the landing page from a catalog view.

    Args:
        view: Fetched catalog with indexes.
        query: Hero search query.
        shelf_size: Variants per brand shelf.
        featured_series_size: Series shown in the carousel.

    Returns:
        Landing page data.
    """
    if shelf_size is None:
        shelf_size = settings.brand_shelf_size
    if featured_series_size is None:
        featured_series_size = settings.featured_series_size
    products_by_id = view.indexes.products_by_id

    return LandingPage(
        search=search(view.snapshot, query),
        featured_series=list(view.snapshot.series[: max(featured_series_size, 0)]),
        shelves=[
            BrandShelfView(
                brand=shelf.brand,
                variants=[resolve_display(v, products_by_id) for v in shelf.variants],
            )
            for shelf in brand_shelves(view.indexes, limit=shelf_size)
        ],
    )


# ============================================================================
# Page Service
# ============================================================================


class CatalogPageService:
    """Loads catalog pages.

    Every method performs one fetch batch and returns fully derived page
    data. Fetch errors propagate as CatalogFetchError / EntityNotFoundError;
    derivation never fails.
    """

    def __init__(
        self,
        client: CatalogAPIClient,
        shelf_size: int | None = None,
        featured_series_size: int | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            client: Remote catalog client.
            shelf_size: Variants per brand shelf.
            featured_series_size: Series shown in the landing carousel.
        """
        self.client = client
        self.shelf_size = settings.brand_shelf_size if shelf_size is None else shelf_size
        self.featured_series_size = (
            settings.featured_series_size
            if featured_series_size is None
            else featured_series_size
        )
        self._generation = 0

    async def load_catalog(self) -> CatalogView:
        """Fetch all five collections and index them."""
        self._generation += 1
        snapshot = await self.client.fetch_snapshot(generation=self._generation)
        return CatalogView.from_snapshot(snapshot)

    async def landing(self, query: str | None = None) -> LandingPage:
        """Load the landing page."""
        view = await self.load_catalog()
        return build_landing_page(
            view,
            query=query,
            shelf_size=self.shelf_size,
            featured_series_size=self.featured_series_size,
        )

    async def search(self, query: str | None) -> SearchResults:
        """Search the whole catalog.

        A blank query returns the inactive sentinel without fetching.
        """
        if not (query or "").strip():
            return INACTIVE_SEARCH
        view = await self.load_catalog()
        return search(view.snapshot, query)

    async def brand_listing(self, query: str | None = None) -> ListingPage:
        """Load the brands listing, filtered by name."""
        brands = await self.client.list_brands()
        return ListingPage(items=filter_by_name(brands, query), total=len(brands))

    async def series_listing(self, query: str | None = None) -> ListingPage:
        """Load the series listing, filtered by name."""
        series = await self.client.list_series()
        return ListingPage(items=filter_by_name(series, query), total=len(series))

    async def brand_detail(self, brand_id: str) -> BrandDetailPage:
        """Load a brand and its series.

        The server-side brand filter is re-applied locally so only series
        that really reference the brand are shown.
        """
        brand, series = await gather_or_cancel(
            self.client.get_brand(brand_id),
            self.client.list_series(brand_id=brand_id),
        )
        indexes = build_indexes(CatalogSnapshot(brands=(brand,), series=tuple(series)))
        return BrandDetailPage(brand=brand, series=series_of_brand(indexes, brand.id))

    async def series_detail(
        self,
        series_id: str,
        query: str | None = None,
    ) -> SeriesDetailPage:
        """Load a series, its brand and its models filtered by name."""
        series, models = await gather_or_cancel(
            self.client.get_series(series_id),
            self.client.list_models(series_id=series_id),
        )
        indexes = build_indexes(CatalogSnapshot(series=(series,), models=tuple(models)))
        series_models = models_of_series(indexes, series.id)
        return SeriesDetailPage(
            series=series,
            brand=series_brand(indexes, series),
            models=filter_by_name(series_models, query),
            model_count=len(series_models),
        )

    async def model_detail(self, model_id: str) -> ModelDetailPage:
        """Load a model, its lineage and its variants."""
        model, variants = await gather_or_cancel(
            self.client.get_model(model_id),
            self.client.list_variants(model_id=model_id),
        )
        indexes = build_indexes(CatalogSnapshot(models=(model,), variants=tuple(variants)))
        return ModelDetailPage(
            lineage=model_lineage(indexes, model),
            variants=[resolve_display(v) for v in variants_of_model(indexes, model.id)],
        )

    async def product_detail(self, product_id: str) -> ProductDetailPage:
        """Load a product and its variants.

        The API has no product filter for variants, so every variant is
        fetched and grouped locally.
        """
        product, variants = await gather_or_cancel(
            self.client.get_product(product_id),
            self.client.list_variants(),
        )
        indexes = build_indexes(
            CatalogSnapshot(products=(product,), variants=tuple(variants))
        )
        product_variants = variants_of_product(indexes, product.id)
        displays = [resolve_display(v, indexes.products_by_id) for v in product_variants]
        return ProductDetailPage(
            product=product,
            variants=displays,
            price_range=price_range(product_variants, fallback_price=product.price),
            display_price=displays[0].price if displays else product.price,
            total_stock=total_stock(product_variants),
        )


# ============================================================================
# Landing Session
# ============================================================================


class CatalogBrowser:
    """Long-lived landing page session.

    Loads the catalog once, then recomputes search and shelves from that
    snapshot on every query change. A refresh replaces the snapshot as a
    whole; queries always run against the latest successful load.
    """

    def __init__(self, service: CatalogPageService) -> None:
        self.service = service
        self.page: PageController[CatalogView] = PageController(
            "catalog", service.load_catalog
        )
        self._view: CatalogView | None = None

    @property
    def view(self) -> CatalogView | None:
        """Catalog view of the latest successful load, kept across reloads."""
        return self._view

    async def refresh(self) -> PageState[CatalogView]:
        """(Re)fetch the catalog."""
        return self._remember(await self.page.load())

    async def retry(self) -> PageState[CatalogView]:
        """Retry a failed catalog fetch."""
        return self._remember(await self.page.retry())

    def _remember(self, state: PageState[CatalogView]) -> PageState[CatalogView]:
        if state.status is PageStatus.SUCCESS and state.data is not None:
            self._view = state.data
        return state

    def search(self, query: str | None) -> SearchResults:
        """Search the loaded catalog; inactive until a load succeeds."""
        view = self.view
        if view is None:
            return INACTIVE_SEARCH
        return search(view.snapshot, query)

    def landing(self, query: str | None = None) -> LandingPage | None:
        """Landing page data for the loaded catalog."""
        view = self.view
        if view is None:
            return None
        return build_landing_page(
            view,
            query=query,
            shelf_size=self.service.shelf_size,
            featured_series_size=self.service.featured_series_size,
        )

    async def close(self) -> None:
        """Tear down the session, cancelling any fetch in flight."""
        await self.page.close()


def get_page_service(client: CatalogAPIClient) -> CatalogPageService:
    """Get a page service bound to a catalog client.

    Args:
        client: Remote catalog client.

    Returns:
        CatalogPageService instance.
    """
    return CatalogPageService(client)
