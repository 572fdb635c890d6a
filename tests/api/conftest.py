"""Shared fixtures for API tests."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from storefront.main import create_app
from tests.fakes import FakeCatalogProvider


@pytest.fixture
def client(provider: FakeCatalogProvider) -> Iterator[TestClient]:
    """Create test client with the catalog published from the fake provider."""
    with TestClient(create_app(provider=provider)) as client:
        yield client
