"""Application layer - page loading and page view assembly."""

from catalog_explorer.application.page_controller import PageController
from catalog_explorer.application.pages import (
    BrandDetailPage,
    BrandShelfView,
    CatalogBrowser,
    CatalogPageService,
    CatalogView,
    LandingPage,
    ListingPage,
    ModelDetailPage,
    ProductDetailPage,
    SeriesDetailPage,
    build_landing_page,
    get_page_service,
)

__all__ = [
    "BrandDetailPage",
    "BrandShelfView",
    "CatalogBrowser",
    "CatalogPageService",
    "CatalogView",
    "LandingPage",
    "ListingPage",
    "ModelDetailPage",
    "PageController",
    "ProductDetailPage",
    "SeriesDetailPage",
    "build_landing_page",
    "get_page_service",
]
