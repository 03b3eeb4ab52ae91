"""Client-side text search over the catalog.

Case-insensitive substring matching across all five collections. There is
no ranking: a record either matches or it does not, and every collection
is filtered on its own.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TypeVar

from catalog_explorer.catalog.models import (
    Brand,
    CatalogRecord,
    CatalogSnapshot,
    Model,
    Product,
    ProductVariant,
    Series,
)

R = TypeVar("R", bound=CatalogRecord)


@dataclass(frozen=True)
class SearchResults:
    """Matches per collection, each in source order.

    An inactive result means no search was run (blank query). It is
    distinct from an active search that matched nothing.
    """

    active: bool = True
    query: str = ""
    brands: tuple[Brand, ...] = ()
    series: tuple[Series, ...] = ()
    models: tuple[Model, ...] = ()
    products: tuple[Product, ...] = ()
    variants: tuple[ProductVariant, ...] = ()

    @property
    def total(self) -> int:
        """Number of matches across all collections."""
        return (
            len(self.brands)
            + len(self.series)
            + len(self.models)
            + len(self.products)
            + len(self.variants)
        )

    @property
    def is_empty(self) -> bool:
        """Whether an active search found nothing."""
        return self.active and self.total == 0


INACTIVE_SEARCH = SearchResults(active=False)


def normalize_query(query: str | None) -> str | None:
    """Trim and lower-case a query.

    Returns:
        The normalized query, or None when it is blank.
    """
    if query is None:
        return None
    normalized = query.strip().lower()
    return normalized or None


def _contains(value: str | None, needle: str) -> bool:
    return bool(value) and needle in value.lower()


def search(collections: CatalogSnapshot, query: str | None) -> SearchResults:
    """Search every collection for a free-text query.

    Names are matched for all records; products also match on SKU and
    variants also match on their id, so code fragments find them.

    Args:
        collections: Catalog snapshot to search.
        query: Raw user query.

    Returns:
        Search results, or INACTIVE_SEARCH for a blank query.
    """
    needle = normalize_query(query)
    if needle is None:
        return INACTIVE_SEARCH

    return SearchResults(
        active=True,
        query=needle,
        brands=tuple(b for b in collections.brands if _contains(b.name, needle)),
        series=tuple(s for s in collections.series if _contains(s.name, needle)),
        models=tuple(m for m in collections.models if _contains(m.name, needle)),
        products=tuple(
            p
            for p in collections.products
            if _contains(p.name, needle) or _contains(p.sku, needle)
        ),
        variants=tuple(
            v
            for v in collections.variants
            if _contains(v.name, needle) or _contains(v.id, needle)
        ),
    )


def filter_by_name(items: Iterable[R], query: str | None) -> list[R]:
    """Filter listing items by name.

    Args:
        items: Records in source order.
        query: Raw user query.

    Returns:
        Matching records; all records for a blank query.
    """
    needle = normalize_query(query)
    if needle is None:
        return list(items)
    return [item for item in items if _contains(item.name, needle)]
