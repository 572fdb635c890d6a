"""Shared fixtures for the storefront test suite."""

import pytest

from storefront.catalog.models import Category, Product
from storefront.catalog.normalizer import normalize_categories, normalize_products
from tests.fakes import RAW_CATEGORIES, RAW_PRODUCTS, FakeCatalogProvider


@pytest.fixture
def categories() -> list[Category]:
    """Normalized sample categories."""
    return normalize_categories(RAW_CATEGORIES)


@pytest.fixture
def products() -> list[Product]:
    """Normalized sample products."""
    return normalize_products(RAW_PRODUCTS)


@pytest.fixture
def provider() -> FakeCatalogProvider:
    """In-memory provider serving the sample catalog."""
    return FakeCatalogProvider()
