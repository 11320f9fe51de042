"""Tests for health check endpoints."""

import pytest
from fastapi.testclient import TestClient

from storefront.api.shop import get_catalog_client
from storefront.domain import Category
from storefront.infrastructure.catalog_client import CatalogRequestError
from storefront.main import app


@pytest.fixture
def client(mock_catalog_client) -> TestClient:
    """Create test client backed by the mock catalog."""
    app.dependency_overrides[get_catalog_client] = lambda: mock_catalog_client
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_check(client: TestClient) -> None:
    """Test health endpoint returns healthy status."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "storefront"
    assert "version" in data


def test_readiness_check(client: TestClient, mock_catalog_client) -> None:
    """Test readiness endpoint returns ready when the catalog answers."""
    mock_catalog_client.list_categories.return_value = [Category(id="c1", name="Shirts")]

    response = client.get("/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ready", "catalog": "ok", "error": None}
    mock_catalog_client.list_categories.assert_awaited_once()


def test_readiness_catalog_down(client: TestClient, mock_catalog_client) -> None:
    """Test readiness endpoint returns 503 when the catalog fails."""
    mock_catalog_client.list_categories.side_effect = CatalogRequestError(
        "Cannot reach catalog API", status_code=None
    )

    response = client.get("/ready")

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "not_ready"
    assert data["catalog"] == "unavailable"
    assert data["error"] == "Cannot reach catalog API"


def test_request_id_echoed(client: TestClient) -> None:
    """Request IDs are echoed back for correlation."""
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_request_id_generated(client: TestClient) -> None:
    """A request ID is generated when none is sent."""
    response = client.get("/health")
    assert response.headers["X-Request-ID"]
