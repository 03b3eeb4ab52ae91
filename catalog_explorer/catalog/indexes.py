"""Catalog index builder.

Turns the flat collections of a snapshot into O(1) lookup structures:
by-id maps, one-to-many groupings by foreign key, and the model → brand
inversion used by the brand shelf join. All builders are pure and run in
time linear in collection size.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TypeVar

import structlog

from catalog_explorer.catalog.models import (
    Brand,
    CatalogRecord,
    CatalogSnapshot,
    Model,
    Product,
    ProductVariant,
    Series,
)

logger = structlog.get_logger()

R = TypeVar("R", bound=CatalogRecord)


def index_by_id(collection: Iterable[R]) -> dict[str, R]:
    """Map each record's id to the record.

    When two records share an id the later one wins. Duplicates are a
    data-quality problem upstream, so they are logged, not raised.

    Args:
        collection: Records in source order.

    Returns:
        Mapping from id to record.
    """
    index: dict[str, R] = {}
    duplicates: list[str] = []
    for record in collection:
        if record.id in index:
            duplicates.append(record.id)
        index[record.id] = record

    if duplicates:
        logger.warning(
            "Duplicate catalog ids, keeping last occurrence",
            record_type=type(next(iter(index.values()))).__name__,
            duplicate_ids=duplicates,
        )
    return index


def group_by_foreign_key(
    collection: Iterable[R],
    key: Callable[[R], str | None],
) -> dict[str, list[R]]:
    """Group records by a foreign key value.

    Records whose key is None or empty are left out. Groups keep the
    source order of their records.

    Args:
        collection: Records in source order.
        key: Extracts the foreign key from a record.

    Returns:
        Mapping from foreign key value to the records referencing it.
    """
    groups: dict[str, list[R]] = {}
    for record in collection:
        value = key(record)
        if not value:
            continue
        groups.setdefault(value, []).append(record)
    return groups


@dataclass(frozen=True)
class CatalogIndexes:
    """Lookup structures derived from one catalog snapshot.

    Attributes:
        snapshot: Snapshot the indexes were built from.
        brands_by_id: Brand lookup.
        series_by_id: Series lookup.
        models_by_id: Model lookup.
        products_by_id: Product lookup.
        variants_by_id: Variant lookup.
        series_by_brand_id: Series grouped by brand, unknown brands dropped.
        models_by_series_id: Models grouped by series, unknown series dropped.
        variants_by_model_id: Variants grouped by model.
        variants_by_product_id: Variants grouped by product.
        brand_ids_by_model_id: Brands each model is reachable from.
    """

    snapshot: CatalogSnapshot
    brands_by_id: dict[str, Brand]
    series_by_id: dict[str, Series]
    models_by_id: dict[str, Model]
    products_by_id: dict[str, Product]
    variants_by_id: dict[str, ProductVariant]
    series_by_brand_id: dict[str, list[Series]]
    models_by_series_id: dict[str, list[Model]]
    variants_by_model_id: dict[str, list[ProductVariant]]
    variants_by_product_id: dict[str, list[ProductVariant]]
    brand_ids_by_model_id: dict[str, list[str]]


def build_indexes(snapshot: CatalogSnapshot) -> CatalogIndexes:
    """Build every lookup structure for a snapshot.

    Series pointing at a missing brand and models pointing at a missing
    series are excluded from the parent groupings, so joins never surface
    children of unknown parents.

    Args:
        snapshot: Fetched catalog collections.

    Returns:
        Catalog indexes.
    """
    brands_by_id = index_by_id(snapshot.brands)
    series_by_id = index_by_id(snapshot.series)

    series_by_brand_id = group_by_foreign_key(
        (s for s in snapshot.series if s.brand_id in brands_by_id),
        lambda s: s.brand_id,
    )
    models_by_series_id = group_by_foreign_key(
        (m for m in snapshot.models if m.series_id in series_by_id),
        lambda m: m.series_id,
    )

    # One pass over series and one over models: model id -> reachable brands.
    brand_ids_by_series_id: dict[str, list[str]] = {}
    for brand_id, brand_series in series_by_brand_id.items():
        for s in brand_series:
            owners = brand_ids_by_series_id.setdefault(s.id, [])
            if brand_id not in owners:
                owners.append(brand_id)

    brand_ids_by_model_id: dict[str, list[str]] = {}
    for m in snapshot.models:
        for brand_id in brand_ids_by_series_id.get(m.series_id or "", []):
            owners = brand_ids_by_model_id.setdefault(m.id, [])
            if brand_id not in owners:
                owners.append(brand_id)

    indexes = CatalogIndexes(
        snapshot=snapshot,
        brands_by_id=brands_by_id,
        series_by_id=series_by_id,
        models_by_id=index_by_id(snapshot.models),
        products_by_id=index_by_id(snapshot.products),
        variants_by_id=index_by_id(snapshot.variants),
        series_by_brand_id=series_by_brand_id,
        models_by_series_id=models_by_series_id,
        variants_by_model_id=group_by_foreign_key(snapshot.variants, lambda v: v.model_id),
        variants_by_product_id=group_by_foreign_key(
            snapshot.variants, lambda v: v.product_id
        ),
        brand_ids_by_model_id=brand_ids_by_model_id,
    )

    logger.debug(
        "Built catalog indexes",
        generation=snapshot.generation,
        **snapshot.counts,
    )
    return indexes
