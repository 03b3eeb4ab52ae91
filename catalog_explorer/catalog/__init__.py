"""Catalog engine.

Record models, index builder, relational joins and text search over
catalog data fetched from the remote API.
"""

from catalog_explorer.catalog.indexes import (
    CatalogIndexes,
    build_indexes,
    group_by_foreign_key,
    index_by_id,
)
from catalog_explorer.catalog.joins import (
    BrandShelf,
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
    variants_by_brand,
    variants_of_brand,
    variants_of_model,
    variants_of_product,
)
from catalog_explorer.catalog.models import (
    Brand,
    CatalogRecord,
    CatalogSnapshot,
    Model,
    Product,
    ProductVariant,
    Series,
)
from catalog_explorer.catalog.search import (
    INACTIVE_SEARCH,
    SearchResults,
    filter_by_name,
    normalize_query,
    search,
)

__all__ = [
    # Models
    "Brand",
    "CatalogRecord",
    "CatalogSnapshot",
    "Model",
    "Product",
    "ProductVariant",
    "Series",
    # Indexes
    "CatalogIndexes",
    "build_indexes",
    "group_by_foreign_key",
    "index_by_id",
    # Joins
    "BrandShelf",
    "ModelLineage",
    "PriceRange",
    "VariantDisplay",
    "brand_shelves",
    "model_lineage",
    "models_of_series",
    "price_range",
    "resolve_display",
    "series_brand",
    "series_of_brand",
    "total_stock",
    "variants_by_brand",
    "variants_of_brand",
    "variants_of_model",
    "variants_of_product",
    # Search
    "INACTIVE_SEARCH",
    "SearchResults",
    "filter_by_name",
    "normalize_query",
    "search",
]
