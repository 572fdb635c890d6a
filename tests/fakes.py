"""In-memory catalog data used across the test suite."""

import asyncio
from typing import Any

from storefront.catalog.models import Category, Product
from storefront.catalog.normalizer import normalize_categories, normalize_products
from storefront.errors import ProviderError

RAW_CATEGORIES: list[dict[str, Any]] = [
    {"id": "1", "name": "Honda", "productCount": 120, "description": "Japanese manufacturer"},
    {"id": "2", "name": "CBR150", "parentId": "1"},
    {"_id": "4", "name": "Yamaha", "productCount": "80"},
    {"_id": "5", "name": "NMAX", "parentId": "4", "description": "Automatic scooter"},
    {"_id": "6", "name": "R15", "parentCategory": {"_id": "4", "name": "Yamaha"}},
    {"id": "7", "name": "CB150R", "parent": "1"},
]

RAW_PRODUCTS: list[dict[str, Any]] = [
    {"id": "10", "name": "Brake Pad", "category": "2", "price": "12.50"},
    {
        "_id": "11",
        "name": "Chain Kit",
        "description": "O-ring chain with sprockets",
        "category": {"_id": "5", "name": "NMAX"},
        "price": 45,
    },
    {
        "id": "12",
        "name": "Oil Filter",
        "shortDescription": "Fits Honda single-cylinder engines",
        "category": "7",
        "images": ["oil-filter.jpg"],
    },
]


class FakeCatalogProvider:
    """In-memory CatalogProvider with switchable failures."""

    def __init__(
        self,
        categories: list[dict[str, Any]] | None = None,
        products: list[dict[str, Any]] | None = None,
    ) -> None:
        self.categories = normalize_categories(
            RAW_CATEGORIES if categories is None else categories
        )
        self.products = normalize_products(RAW_PRODUCTS if products is None else products)
        self.fail_categories = False
        self.fail_products = False
        self.fail_category_products = False
        self.category_calls: list[str] = []
        self.gates: dict[str, asyncio.Event] = {}
        self.closed = False

    async def fetch_categories(self) -> list[Category]:
        if self.fail_categories:
            raise ProviderError("fetch_categories", "Provider unavailable", status_code=503)
        return list(self.categories)

    async def fetch_products(self) -> list[Product]:
        if self.fail_products:
            raise ProviderError("fetch_products", "Provider unavailable", status_code=503)
        return list(self.products)

    async def fetch_products_by_category(self, category_id: str) -> list[Product]:
        self.category_calls.append(category_id)
        gate = self.gates.get(category_id)
        if gate is not None:
            await gate.wait()
        if self.fail_category_products:
            raise ProviderError("fetch_products_by_category", "Provider unavailable")
        return [p for p in self.products if p.category_id == category_id]

    async def close(self) -> None:
        self.closed = True
