"""Catalog record models.

Immutable pydantic models for the five catalog collections returned by
the remote API. Field names are snake_case in Python and camelCase on the
wire. Embedded relations are optional and never assumed present.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CatalogRecord(BaseModel):
    """Fields shared by every catalog record.

    Attributes:
        id: Opaque unique identifier.
        name: Display name.
        image: Optional image URL.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        protected_namespaces=(),
    )

    id: str
    name: str
    image: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Brand(CatalogRecord):
    """Top-level manufacturer."""


class Series(CatalogRecord):
    """A product line belonging to one brand."""

    brand_id: str | None = None
    brand: Brand | None = None


class Model(CatalogRecord):
    """A specific item of a series."""

    series_id: str | None = None
    series: Series | None = None


class Product(CatalogRecord):
    """A sellable catalog item with a SKU and base price."""

    sku: str = ""
    price: float = 0.0


class ProductVariant(CatalogRecord):
    """A purchasable configuration of a product, tied to a model.

    Attributes:
        price: Variant price; None or non-positive means "not set".
        stock: Units in stock. Negative values are invalid data.
        product_id: Parent product reference.
        model_id: Parent model reference.
    """

    price: float | None = None
    stock: int = 0
    product_id: str | None = None
    product: Product | None = None
    model_id: str | None = None
    model: Model | None = None

    @property
    def available_stock(self) -> int:
        """Stock usable for display; invalid negative counts become zero."""
        return max(self.stock, 0)

    @property
    def in_stock(self) -> bool:
        """Whether at least one unit is available."""
        return self.available_stock > 0


# ============================================================================
# Snapshot
# ============================================================================


@dataclass(frozen=True)
class CatalogSnapshot:
    """All five collections from a single fetch.

    Derived indexes and views are always built from exactly one snapshot,
    so entities from two fetch generations never mix.

    Attributes:
        brands: Brands in source order.
        series: Series in source order.
        models: Models in source order.
        products: Products in source order.
        variants: Variants in source order.
        generation: Fetch generation that produced this snapshot.
        fetched_at: When the fetch completed.
    """

    brands: tuple[Brand, ...] = ()
    series: tuple[Series, ...] = ()
    models: tuple[Model, ...] = ()
    products: tuple[Product, ...] = ()
    variants: tuple[ProductVariant, ...] = ()
    generation: int = 0
    fetched_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc),
        compare=False,
    )

    @property
    def counts(self) -> dict[str, int]:
        """Collection sizes, for logging."""
        return {
            "brands": len(self.brands),
            "series": len(self.series),
            "models": len(self.models),
            "products": len(self.products),
            "variants": len(self.variants),
        }
