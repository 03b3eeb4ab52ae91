"""Tests for health check endpoints."""

from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from catalog_explorer.infrastructure.config import settings


def test_health_check(client: TestClient) -> None:
    """Test health endpoint returns healthy status."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "catalog-explorer"
    assert "version" in data


def test_readiness_check(client: TestClient, catalog_client: AsyncMock) -> None:
    """Service is ready when the catalog API answers."""
    catalog_client.health_check.return_value = True

    response = client.get("/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["catalog_reachable"] is True
    assert data["catalog_api_url"] == settings.catalog_api_url
    catalog_client.health_check.assert_awaited_once()


def test_readiness_check_catalog_down(
    client: TestClient, catalog_client: AsyncMock
) -> None:
    """Service is not ready while the catalog API is unreachable."""
    catalog_client.health_check.return_value = False

    response = client.get("/ready")
    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "not_ready"
    assert data["catalog_reachable"] is False
