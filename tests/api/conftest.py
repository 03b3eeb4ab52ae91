"""Shared fixtures for API tests."""

from collections.abc import Iterator
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from catalog_explorer.api.pages import get_client
from catalog_explorer.catalog.models import CatalogSnapshot
from catalog_explorer.infrastructure.catalog_client import CatalogAPIClient
from catalog_explorer.main import app


@pytest.fixture
def catalog_client(catalog_snapshot: CatalogSnapshot) -> AsyncMock:
    """Remote catalog client serving the sample catalog."""
    client = AsyncMock(spec=CatalogAPIClient)
    client.fetch_snapshot.return_value = catalog_snapshot
    client.list_brands.return_value = list(catalog_snapshot.brands)
    client.list_series.return_value = list(catalog_snapshot.series)
    client.list_variants.return_value = list(catalog_snapshot.variants)
    return client


@pytest.fixture
def client(catalog_client: AsyncMock) -> Iterator[TestClient]:
    """Create test client backed by the mock catalog."""
    app.dependency_overrides[get_client] = lambda: catalog_client
    yield TestClient(app)
    app.dependency_overrides.clear()
