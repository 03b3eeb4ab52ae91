"""Shared fixtures for Catalog Explorer tests."""

import pytest

from catalog_explorer.catalog.indexes import CatalogIndexes, build_indexes
from catalog_explorer.catalog.models import (
    Brand,
    CatalogSnapshot,
    Model,
    Product,
    ProductVariant,
    Series,
)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def acme_snapshot() -> CatalogSnapshot:
    """One brand, one series, one model, two variants."""
    return CatalogSnapshot(
        brands=(Brand(id="b1", name="Acme"),),
        series=(Series(id="s1", name="Pro", brand_id="b1"),),
        models=(Model(id="m1", name="X1", series_id="s1"),),
        products=(),
        variants=(
            ProductVariant(id="v1", name="X1 Black", model_id="m1", price=100, stock=5),
            ProductVariant(id="v2", name="X1 White", model_id="m1", price=0, stock=0),
        ),
        generation=1,
    )


@pytest.fixture
def catalog_snapshot() -> CatalogSnapshot:
    """A catalog with two brands and a few dangling references."""
    brands = (
        Brand(id="b-apple", name="Apple", image="https://img/apple.png"),
        Brand(id="b-samsung", name="Samsung"),
        Brand(id="b-empty", name="Nokia"),
    )
    series = (
        Series(id="s-iphone", name="iPhone", brand_id="b-apple"),
        Series(id="s-galaxy-s", name="Galaxy S", brand_id="b-samsung"),
        Series(id="s-ipad", name="iPad", brand_id="b-apple"),
        Series(id="s-orphan", name="Ghost Series", brand_id="b-missing"),
        Series(id="s-nobrand", name="Loose Series", brand_id=None),
    )
    models = (
        Model(id="m-15", name="iPhone 15", series_id="s-iphone"),
        Model(id="m-s24", name="Galaxy S24", series_id="s-galaxy-s"),
        Model(id="m-air", name="iPad Air", series_id="s-ipad"),
        Model(id="m-ghost", name="Ghost Phone", series_id="s-orphan"),
        Model(id="m-lost", name="Lost Model", series_id="s-missing"),
    )
    products = (
        Product(id="p-screen", name="Display Assembly", sku="DSP-001", price=120.0,
                image="https://img/screen.png"),
        Product(id="p-battery", name="Battery Pack", sku="BAT-002", price=45.0),
    )
    variants = (
        ProductVariant(id="VAR-15-SCR", name="iPhone 15 Screen", product_id="p-screen",
                       model_id="m-15", price=150.0, stock=3),
        ProductVariant(id="VAR-S24-SCR", name="Galaxy S24 Screen", product_id="p-screen",
                       model_id="m-s24", price=140.0, stock=0, image="https://img/s24.png"),
        ProductVariant(id="VAR-15-BAT", name="iPhone 15 Battery", product_id="p-battery",
                       model_id="m-15", price=None, stock=10),
        ProductVariant(id="VAR-AIR-BAT", name="iPad Air Battery", product_id="p-battery",
                       model_id="m-air", price=60.0, stock=-2),
        ProductVariant(id="VAR-GHOST", name="Ghost Screen", product_id="p-screen",
                       model_id="m-ghost", price=10.0, stock=1),
        ProductVariant(id="VAR-LOST", name="Lost Battery", product_id="p-missing",
                       model_id="m-unknown", price=5.0, stock=1),
    )
    return CatalogSnapshot(
        brands=brands,
        series=series,
        models=models,
        products=products,
        variants=variants,
        generation=7,
    )


@pytest.fixture
def catalog_indexes(catalog_snapshot: CatalogSnapshot) -> CatalogIndexes:
    """Indexes built from the sample catalog."""
    return build_indexes(catalog_snapshot)


@pytest.fixture
def acme_indexes(acme_snapshot: CatalogSnapshot) -> CatalogIndexes:
    """Indexes built from the single-brand catalog."""
    return build_indexes(acme_snapshot)
