"""Tests for health check endpoints."""

from fastapi.testclient import TestClient

from storefront.main import create_app
from tests.fakes import FakeCatalogProvider


def test_health_check(client: TestClient) -> None:
    """Test health endpoint returns healthy status."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "storefront-catalog"
    assert "version" in data


def test_readiness_check(client: TestClient) -> None:
    """Test readiness endpoint returns ready status."""
    response = client.get("/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "ready"


def test_readiness_degraded(provider: FakeCatalogProvider) -> None:
    """Readiness reports degraded while serving placeholder data."""
    provider.fail_categories = True
    with TestClient(create_app(provider=provider)) as client:
        response = client.get("/ready")
    assert response.json()["status"] == "degraded"


def test_shutdown_closes_provider(provider: FakeCatalogProvider) -> None:
    """The provider is closed when the app shuts down."""
    with TestClient(create_app(provider=provider)):
        assert not provider.closed
    assert provider.closed
