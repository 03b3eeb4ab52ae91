"""API schemas for the Catalog Explorer API.

Pydantic models for page responses. Page payloads use camelCase keys,
matching the catalog records they embed.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from catalog_explorer.catalog.models import (
    Brand,
    Model,
    Product,
    ProductVariant,
    Series,
)


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Context key")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    retryable: bool = Field(default=False, description="Whether retrying can help")
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class PageSchema(BaseModel):
    """Base for page payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )


# ============================================================================
# Shared Page Parts
# ============================================================================


class VariantCardSchema(PageSchema):
    """Variant card with resolved image and price."""

    variant: ProductVariant
    image: str | None = Field(default=None, description="Variant or product image")
    price: float = Field(..., description="Resolved display price")
    product_name: str | None = Field(default=None, description="Parent product name")
    in_stock: bool
    stock: int = Field(..., description="Available units")


class PriceRangeSchema(PageSchema):
    """Price span of a product's variants."""

    min: float
    max: float


class SearchResponse(PageSchema):
    """Catalog-wide search results.

    `active` is false when the query was blank and no search ran.
    """

    active: bool
    query: str
    total: int
    brands: list[Brand] = Field(default_factory=list)
    series: list[Series] = Field(default_factory=list)
    models: list[Model] = Field(default_factory=list)
    products: list[Product] = Field(default_factory=list)
    variants: list[ProductVariant] = Field(default_factory=list)


class BrandShelfSchema(PageSchema):
    """A brand with a handful of its variants."""

    brand: Brand
    variants: list[VariantCardSchema]


# ============================================================================
# Page Responses
# ============================================================================


class LandingResponse(PageSchema):
    """Landing page."""

    search: SearchResponse
    featured_series: list[Series]
    shelves: list[BrandShelfSchema]


class BrandListResponse(PageSchema):
    """Brands listing."""

    items: list[Brand]
    matched: int
    total: int


class SeriesListResponse(PageSchema):
    """Series listing."""

    items: list[Series]
    matched: int
    total: int


class BrandDetailResponse(PageSchema):
    """Brand detail page."""

    brand: Brand
    series: list[Series]
    series_count: int


class SeriesDetailResponse(PageSchema):
    """Series detail page."""

    series: Series
    brand: Brand | None = None
    models: list[Model]
    model_count: int


class ModelDetailResponse(PageSchema):
    """Model detail page."""

    model: Model
    series: Series | None = None
    brand: Brand | None = None
    variants: list[VariantCardSchema]
    variant_count: int


class ProductDetailResponse(PageSchema):
    """Product detail page."""

    product: Product
    variants: list[VariantCardSchema]
    variant_count: int
    price_range: PriceRangeSchema | None = None
    has_price_range: bool
    display_price: float
    total_stock: int
