"""Tests for catalog page services."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from catalog_explorer.application.pages import (
    CatalogBrowser,
    CatalogPageService,
    CatalogView,
    build_landing_page,
    get_page_service,
)
from catalog_explorer.catalog.models import (
    Brand,
    CatalogSnapshot,
    Model,
    Product,
    ProductVariant,
    Series,
)
from catalog_explorer.catalog.search import INACTIVE_SEARCH
from catalog_explorer.domain.exceptions import CatalogFetchError, EntityNotFoundError
from catalog_explorer.domain.state_machines import PageStatus
from catalog_explorer.infrastructure.catalog_client import CatalogAPIClient


@pytest.fixture
def mock_client(catalog_snapshot: CatalogSnapshot) -> AsyncMock:
    """Catalog client serving the sample catalog."""
    client = AsyncMock(spec=CatalogAPIClient)
    client.fetch_snapshot.return_value = catalog_snapshot
    client.list_brands.return_value = list(catalog_snapshot.brands)
    client.list_series.return_value = list(catalog_snapshot.series)
    return client


@pytest.fixture
def service(mock_client: AsyncMock) -> CatalogPageService:
    """Page service over the mock client."""
    return CatalogPageService(mock_client, shelf_size=2, featured_series_size=2)


# ============================================================================
# Landing & Search
# ============================================================================


class TestLanding:
    """Tests for the landing page."""

    @pytest.mark.asyncio
    async def test_landing_page(self, service: CatalogPageService) -> None:
        """The landing page derives search, carousel and shelves from one fetch."""
        page = await service.landing("ipad")

        assert [s.id for s in page.search.series] == ["s-ipad"]
        assert [s.id for s in page.featured_series] == ["s-iphone", "s-galaxy-s"]
        assert [shelf.brand.id for shelf in page.shelves] == ["b-apple", "b-samsung"]
        apple = page.shelves[0]
        assert [d.variant.id for d in apple.variants] == ["VAR-15-SCR", "VAR-15-BAT"]
        assert apple.variants[1].price == 45.0
        service.client.fetch_snapshot.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_landing_without_query(self, service: CatalogPageService) -> None:
        """Without a query the hero search is inactive."""
        page = await service.landing()
        assert page.search is INACTIVE_SEARCH

    @pytest.mark.asyncio
    async def test_each_load_gets_a_new_generation(
        self, service: CatalogPageService
    ) -> None:
        """Snapshots are stamped with increasing generations."""
        await service.load_catalog()
        await service.load_catalog()
        generations = [
            call.kwargs["generation"]
            for call in service.client.fetch_snapshot.await_args_list
        ]
        assert generations == [1, 2]

    def test_build_landing_page_uses_settings_defaults(
        self, catalog_snapshot: CatalogSnapshot
    ) -> None:
        """Shelf sizes default to configuration."""
        page = build_landing_page(CatalogView.from_snapshot(catalog_snapshot))
        assert len(page.featured_series) == len(catalog_snapshot.series)
        assert [len(s.variants) for s in page.shelves] == [3, 1]

    def test_zero_sizes_are_respected(self, catalog_snapshot: CatalogSnapshot) -> None:
        """An explicit zero empties the carousel and shelves."""
        view = CatalogView.from_snapshot(catalog_snapshot)
        page = build_landing_page(view, shelf_size=0, featured_series_size=0)
        assert page.featured_series == []
        assert page.shelves == []

    def test_service_keeps_explicit_zero(self, mock_client: AsyncMock) -> None:
        """Zero is a valid service size, not a request for the default."""
        service = CatalogPageService(mock_client, shelf_size=0, featured_series_size=0)
        assert service.shelf_size == 0
        assert service.featured_series_size == 0


class TestSearch:
    """Tests for catalog-wide search."""

    @pytest.mark.asyncio
    async def test_blank_query_does_not_fetch(self, service: CatalogPageService) -> None:
        """A blank query returns the inactive sentinel without fetching."""
        assert await service.search("  ") is INACTIVE_SEARCH
        service.client.fetch_snapshot.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_search(self, service: CatalogPageService) -> None:
        """A query searches the freshly fetched catalog."""
        results = await service.search("Battery")
        assert [p.id for p in results.products] == ["p-battery"]
        assert [v.id for v in results.variants] == [
            "VAR-15-BAT",
            "VAR-AIR-BAT",
            "VAR-LOST",
        ]


# ============================================================================
# Listings
# ============================================================================


class TestListings:
    """Tests for brand and series listings."""

    @pytest.mark.asyncio
    async def test_brand_listing(self, service: CatalogPageService) -> None:
        """Brands are filtered by name; the total counts all brands."""
        page = await service.brand_listing("APP")
        assert [b.id for b in page.items] == ["b-apple"]
        assert page.total == 3

    @pytest.mark.asyncio
    async def test_series_listing_without_query(
        self, service: CatalogPageService
    ) -> None:
        """No query lists every series."""
        page = await service.series_listing()
        assert len(page.items) == page.total == 5


# ============================================================================
# Detail Pages
# ============================================================================


class TestBrandDetail:
    """Tests for the brand detail page."""

    @pytest.mark.asyncio
    async def test_series_are_filtered_locally(
        self, service: CatalogPageService, mock_client: AsyncMock
    ) -> None:
        """Series that do not reference the brand are dropped."""
        mock_client.get_brand.return_value = Brand(id="b-apple", name="Apple")

        page = await service.brand_detail("b-apple")

        assert page.brand.name == "Apple"
        assert [s.id for s in page.series] == ["s-iphone", "s-ipad"]
        mock_client.list_series.assert_awaited_once_with(brand_id="b-apple")

    @pytest.mark.asyncio
    async def test_unknown_brand(
        self, service: CatalogPageService, mock_client: AsyncMock
    ) -> None:
        """A missing brand propagates as not found."""
        mock_client.get_brand.side_effect = EntityNotFoundError("Brand", "nope")
        with pytest.raises(EntityNotFoundError):
            await service.brand_detail("nope")


class TestSeriesDetail:
    """Tests for the series detail page."""

    @pytest.mark.asyncio
    async def test_models_filtered_by_query(
        self, service: CatalogPageService, mock_client: AsyncMock
    ) -> None:
        """Models are filtered by name; the count covers all of the series' models."""
        mock_client.get_series.return_value = Series(
            id="s-iphone",
            name="iPhone",
            brand_id="b-apple",
            brand=Brand(id="b-apple", name="Apple"),
        )
        mock_client.list_models.return_value = [
            Model(id="m-15", name="iPhone 15", series_id="s-iphone"),
            Model(id="m-15-pro", name="iPhone 15 Pro", series_id="s-iphone"),
            Model(id="m-s24", name="Galaxy S24 Pro", series_id="s-galaxy-s"),
        ]

        page = await service.series_detail("s-iphone", "pro")

        assert [m.id for m in page.models] == ["m-15-pro"]
        assert page.model_count == 2
        assert page.brand is not None and page.brand.name == "Apple"
        mock_client.list_models.assert_awaited_once_with(series_id="s-iphone")

    @pytest.mark.asyncio
    async def test_brand_unknown_without_embed(
        self, service: CatalogPageService, mock_client: AsyncMock
    ) -> None:
        """Without an embedded brand the series' brand is unknown."""
        mock_client.get_series.return_value = Series(
            id="s-iphone", name="iPhone", brand_id="b-apple"
        )
        mock_client.list_models.return_value = []

        page = await service.series_detail("s-iphone")

        assert page.brand is None
        assert page.models == []
        assert page.model_count == 0


class TestModelDetail:
    """Tests for the model detail page."""

    @pytest.mark.asyncio
    async def test_lineage_and_variants(
        self,
        service: CatalogPageService,
        mock_client: AsyncMock,
        catalog_snapshot: CatalogSnapshot,
    ) -> None:
        """The model page shows its lineage and only its own variants."""
        mock_client.get_model.return_value = Model(
            id="m-15",
            name="iPhone 15",
            series_id="s-iphone",
            series=Series(
                id="s-iphone",
                name="iPhone",
                brand=Brand(id="b-apple", name="Apple"),
            ),
        )
        mock_client.list_variants.return_value = list(catalog_snapshot.variants)

        page = await service.model_detail("m-15")

        assert page.lineage.series is not None and page.lineage.series.name == "iPhone"
        assert page.lineage.brand is not None and page.lineage.brand.name == "Apple"
        assert [d.variant.id for d in page.variants] == ["VAR-15-SCR", "VAR-15-BAT"]
        # No embedded product and no product lookup: unset price shows as 0
        assert page.variants[1].price == 0
        mock_client.list_variants.assert_awaited_once_with(model_id="m-15")

    @pytest.mark.asyncio
    async def test_fetch_failure_propagates(
        self, service: CatalogPageService, mock_client: AsyncMock
    ) -> None:
        """A failed variant fetch fails the page."""
        mock_client.get_model.return_value = Model(id="m-15", name="iPhone 15")
        mock_client.list_variants.side_effect = CatalogFetchError(
            "/product-variants", "unexpected status 500", status_code=500
        )
        with pytest.raises(CatalogFetchError):
            await service.model_detail("m-15")


class TestProductDetail:
    """Tests for the product detail page."""

    @pytest.mark.asyncio
    async def test_price_range_and_stock(
        self,
        service: CatalogPageService,
        mock_client: AsyncMock,
        catalog_snapshot: CatalogSnapshot,
    ) -> None:
        """Variants are grouped locally and summarized."""
        mock_client.get_product.return_value = catalog_snapshot.products[0]
        mock_client.list_variants.return_value = list(catalog_snapshot.variants)

        page = await service.product_detail("p-screen")

        assert [d.variant.id for d in page.variants] == [
            "VAR-15-SCR",
            "VAR-S24-SCR",
            "VAR-GHOST",
        ]
        assert page.price_range is not None
        assert (page.price_range.min, page.price_range.max) == (10.0, 150.0)
        assert page.has_price_range
        assert page.display_price == 150.0
        assert page.total_stock == 4
        mock_client.list_variants.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_product_without_variants(
        self, service: CatalogPageService, mock_client: AsyncMock
    ) -> None:
        """Without variants the product's own price is shown."""
        mock_client.get_product.return_value = Product(id="p1", name="Case", price=25.0)
        mock_client.list_variants.return_value = []

        page = await service.product_detail("p1")

        assert page.variants == []
        assert page.price_range is None
        assert not page.has_price_range
        assert page.display_price == 25.0
        assert page.total_stock == 0

    @pytest.mark.asyncio
    async def test_unpriced_variants_fall_back_to_product(
        self, service: CatalogPageService, mock_client: AsyncMock
    ) -> None:
        """Variants without a price show the product price, never a range."""
        mock_client.get_product.return_value = Product(id="p1", name="Case", price=25.0)
        mock_client.list_variants.return_value = [
            ProductVariant(id="v1", name="Black", product_id="p1", price=0, stock=2),
            ProductVariant(id="v2", name="White", product_id="p1", stock=1),
        ]

        page = await service.product_detail("p1")

        assert [d.price for d in page.variants] == [25.0, 25.0]
        assert page.price_range is not None and page.price_range.is_single
        assert not page.has_price_range
        assert page.display_price == 25.0
        assert page.total_stock == 3


# ============================================================================
# Landing Session
# ============================================================================


class TestCatalogBrowser:
    """Tests for the long-lived landing session."""

    def test_nothing_before_first_load(self, service: CatalogPageService) -> None:
        """Before a load there is no view, no landing and no search."""
        browser = CatalogBrowser(service)
        assert browser.view is None
        assert browser.landing() is None
        assert browser.search("apple") is INACTIVE_SEARCH

    @pytest.mark.asyncio
    async def test_queries_reuse_loaded_snapshot(
        self, service: CatalogPageService
    ) -> None:
        """Query changes are answered from the snapshot without refetching."""
        browser = CatalogBrowser(service)
        state = await browser.refresh()
        assert state.status == PageStatus.SUCCESS

        assert [s.id for s in browser.search("galaxy").series] == ["s-galaxy-s"]
        assert [m.id for m in browser.search("AIR").models] == ["m-air"]
        landing = browser.landing("nokia")
        assert landing is not None
        assert [b.id for b in landing.search.brands] == ["b-empty"]

        assert service.client.fetch_snapshot.await_count == 1
        await browser.close()

    @pytest.mark.asyncio
    async def test_queries_use_last_good_load_during_refresh(
        self, service: CatalogPageService, catalog_snapshot: CatalogSnapshot
    ) -> None:
        """A refresh in flight does not deactivate search."""
        second_fetch_started = asyncio.Event()
        release = asyncio.Event()
        calls = 0

        async def fetch_snapshot(generation: int) -> CatalogSnapshot:
            nonlocal calls
            calls += 1
            if calls > 1:
                second_fetch_started.set()
                await release.wait()
            return catalog_snapshot

        service.client.fetch_snapshot.side_effect = fetch_snapshot
        browser = CatalogBrowser(service)
        await browser.refresh()

        pending = asyncio.ensure_future(browser.refresh())
        await second_fetch_started.wait()
        assert browser.page.state.status == PageStatus.LOADING

        results = browser.search("galaxy")
        assert results.active
        assert [s.id for s in results.series] == ["s-galaxy-s"]
        assert browser.landing() is not None

        release.set()
        state = await pending
        assert state.status == PageStatus.SUCCESS
        await browser.close()

    @pytest.mark.asyncio
    async def test_failed_reload_keeps_previous_catalog(
        self, service: CatalogPageService, catalog_snapshot: CatalogSnapshot
    ) -> None:
        """A failed reload leaves the last good catalog searchable."""
        service.client.fetch_snapshot.side_effect = [
            catalog_snapshot,
            CatalogFetchError("/products", "unexpected status 502", status_code=502),
        ]
        browser = CatalogBrowser(service)
        await browser.refresh()

        state = await browser.refresh()
        assert state.status == PageStatus.ERROR
        assert browser.view is not None
        assert browser.view.snapshot is catalog_snapshot
        assert [b.id for b in browser.search("samsung").brands] == ["b-samsung"]

    @pytest.mark.asyncio
    async def test_failed_refresh_can_be_retried(
        self, service: CatalogPageService, catalog_snapshot: CatalogSnapshot
    ) -> None:
        """A failed catalog load shows a retryable error."""
        service.client.fetch_snapshot.side_effect = [
            CatalogFetchError("/brands", "request timed out", status_code=504),
            catalog_snapshot,
        ]
        browser = CatalogBrowser(service)

        state = await browser.refresh()
        assert state.status == PageStatus.ERROR
        assert state.error is not None
        assert state.error.message == "Failed to load catalog"
        assert browser.view is None

        state = await browser.retry()
        assert state.status == PageStatus.SUCCESS
        assert browser.view is not None
        assert browser.view.snapshot is catalog_snapshot

        await browser.close()
        assert browser.page.closed


def test_get_page_service(mock_client: AsyncMock) -> None:
    """The factory binds the service to the client."""
    service = get_page_service(mock_client)
    assert service.client is mock_client
