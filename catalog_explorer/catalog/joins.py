"""Relational join engine.

Answers "what belongs to what" over prebuilt catalog indexes without
mutating source records. Every function is total: unknown ids and
dangling references produce empty results or None, never exceptions.

Complexity note: `variants_by_brand` relies on the model → brand inversion
built once by `build_indexes` (one pass over series and models) and then
makes a single pass over variants, so grouping every variant under its
brands costs O(series + models + variants) in total.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from catalog_explorer.catalog.indexes import CatalogIndexes
from catalog_explorer.catalog.models import (
    Brand,
    Model,
    Product,
    ProductVariant,
    Series,
)


# ============================================================================
# Result Types
# ============================================================================


@dataclass(frozen=True)
class VariantDisplay:
    """What a variant card shows.

    Attributes:
        variant: The variant itself.
        image: Variant image, else product image, else None.
        price: Resolved display price (0 when nothing is set).
        product: Resolved parent product, if known.
    """

    variant: ProductVariant
    image: str | None
    price: float
    product: Product | None


@dataclass(frozen=True)
class PriceRange:
    """Price span of a set of variants.

    Attributes:
        min: Lowest positive price.
        max: Highest price.
    """

    min: float
    max: float

    @property
    def is_single(self) -> bool:
        """Whether the range collapses to one displayed price."""
        return self.min == self.max


@dataclass(frozen=True)
class BrandShelf:
    """A brand with a handful of its variants for the landing page."""

    brand: Brand
    variants: list[ProductVariant]


@dataclass(frozen=True)
class ModelLineage:
    """Parent chain of a model. Unknown parents are None."""

    model: Model
    series: Series | None
    brand: Brand | None


# ============================================================================
# One-hop Joins
# ============================================================================


def series_of_brand(indexes: CatalogIndexes, brand_id: str) -> list[Series]:
    """Series belonging to a brand, in source order.

    Args:
        indexes: Catalog indexes.
        brand_id: Brand identifier.

    Returns:
        Series of the brand; empty for unknown brands.
    """
    return list(indexes.series_by_brand_id.get(brand_id, []))


def models_of_series(indexes: CatalogIndexes, series_id: str) -> list[Model]:
    """Models belonging to a series, in source order.

    Args:
        indexes: Catalog indexes.
        series_id: Series identifier.

    Returns:
        Models of the series; empty for unknown series.
    """
    return list(indexes.models_by_series_id.get(series_id, []))


def variants_of_model(indexes: CatalogIndexes, model_id: str) -> list[ProductVariant]:
    """Variants tied to a model, in source order."""
    return list(indexes.variants_by_model_id.get(model_id, []))


def variants_of_product(
    indexes: CatalogIndexes, product_id: str
) -> list[ProductVariant]:
    """Variants of a product, in source order."""
    return list(indexes.variants_by_product_id.get(product_id, []))


# ============================================================================
# Brand → Variant Join
# ============================================================================


def variants_by_brand(indexes: CatalogIndexes) -> dict[str, list[ProductVariant]]:
    """Group every variant under the brands its model is reachable from.

    Args:
        indexes: Catalog indexes.

    Returns:
        Mapping from brand id to variants in source order. Brands with no
        reachable variants are absent.
    """
    grouped: dict[str, list[ProductVariant]] = {}
    for variant in indexes.snapshot.variants:
        for brand_id in indexes.brand_ids_by_model_id.get(variant.model_id or "", []):
            grouped.setdefault(brand_id, []).append(variant)
    return grouped


def variants_of_brand(
    indexes: CatalogIndexes,
    brand_id: str,
    limit: int | None = None,
) -> list[ProductVariant]:
    """Variants reachable from a brand via its series and their models.

    Args:
        indexes: Catalog indexes.
        brand_id: Brand identifier.
        limit: Optional cap on the number of variants returned.

    Returns:
        Variants in source order, at most `limit` long.
    """
    variants = [
        v
        for v in indexes.snapshot.variants
        if brand_id in indexes.brand_ids_by_model_id.get(v.model_id or "", [])
    ]
    if limit is not None:
        return variants[: max(limit, 0)]
    return variants


def brand_shelves(indexes: CatalogIndexes, limit: int | None = None) -> list[BrandShelf]:
    """Build the per-brand variant shelves.

    Brands keep their source order; brands without variants get no shelf.

    Args:
        indexes: Catalog indexes.
        limit: Optional cap on variants per shelf.

    Returns:
        Brand shelves.
    """
    grouped = variants_by_brand(indexes)
    shelves: list[BrandShelf] = []
    for brand in indexes.snapshot.brands:
        variants = grouped.get(brand.id, [])
        if limit is not None:
            variants = variants[: max(limit, 0)]
        if variants:
            shelves.append(BrandShelf(brand=brand, variants=variants))
    return shelves


# ============================================================================
# Lineage
# ============================================================================


def series_brand(indexes: CatalogIndexes | None, series: Series) -> Brand | None:
    """Resolve a series' brand, preferring the embedded relation.

    Args:
        indexes: Catalog indexes for lazy lookup, if available.
        series: Series to resolve.

    Returns:
        The brand, or None if it cannot be resolved.
    """
    if series.brand is not None:
        return series.brand
    if indexes is None or not series.brand_id:
        return None
    return indexes.brands_by_id.get(series.brand_id)


def model_lineage(indexes: CatalogIndexes | None, model: Model) -> ModelLineage:
    """Resolve a model's series and brand.

    Args:
        indexes: Catalog indexes for lazy lookup, if available.
        model: Model to resolve.

    Returns:
        The model's lineage.
    """
    series = model.series
    if series is None and indexes is not None and model.series_id:
        series = indexes.series_by_id.get(model.series_id)
    brand = series_brand(indexes, series) if series is not None else None
    return ModelLineage(model=model, series=series, brand=brand)


# ============================================================================
# Display Resolution
# ============================================================================


def resolve_display(
    variant: ProductVariant,
    products_by_id: Mapping[str, Product] | None = None,
) -> VariantDisplay:
    """Resolve the image and price a variant card shows.

    A variant price that is missing or not positive falls back to the
    parent product's price when that is positive, else to 0.

    Args:
        variant: Variant to display.
        products_by_id: Product lookup for variants without an embedded
            product.

    Returns:
        Display values for the variant.
    """
    product = variant.product
    if product is None and products_by_id is not None and variant.product_id:
        product = products_by_id.get(variant.product_id)

    image = variant.image or (product.image if product is not None else None) or None

    if variant.price is not None and variant.price > 0:
        price = variant.price
    elif product is not None and product.price > 0:
        price = product.price
    else:
        price = 0.0

    return VariantDisplay(variant=variant, image=image, price=price, product=product)


def price_range(
    variants: Sequence[ProductVariant],
    fallback_price: float | None = None,
) -> PriceRange | None:
    """Compute the price range of a set of variants.

    The minimum only considers positive prices; the maximum considers all
    set prices. When no variant has a positive price, a positive
    `fallback_price` (typically the parent product's) becomes a one-point
    range.

    Args:
        variants: Variants to inspect.
        fallback_price: Price used when no variant price is set.

    Returns:
        The price range, or None when there is nothing to show.
    """
    prices = [v.price for v in variants if v.price is not None]
    positive = [p for p in prices if p > 0]
    if positive:
        return PriceRange(min=min(positive), max=max(prices))
    if variants and fallback_price is not None and fallback_price > 0:
        return PriceRange(min=fallback_price, max=fallback_price)
    return None


def total_stock(variants: Iterable[ProductVariant]) -> int:
    """Sum of available units across variants, ignoring invalid counts."""
    return sum(v.available_stock for v in variants)
