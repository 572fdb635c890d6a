"""Catalog store.

Holds the published category hierarchy, the product corpus and the
search engine built over them. One store is owned by each page
controller; nothing here is module-level state.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING

import structlog

from storefront.catalog.hierarchy import Hierarchy, HierarchyBuilder
from storefront.catalog.models import Category, Product
from storefront.catalog.normalizer import normalize_categories
from storefront.catalog.search import CatalogSearchEngine, SearchCorpus, SearchResults
from storefront.errors import ProviderError

if TYPE_CHECKING:
    from storefront.infrastructure.provider_client import CatalogProvider

logger = structlog.get_logger()


# Placeholder brands and models published when the provider is down and
# no earlier data exists, so browsing and search stay usable.
PLACEHOLDER_CATEGORIES: list[dict] = [
    {"_id": "placeholder-honda", "name": "Honda", "productCount": 4,
     "description": "Genuine and OEM-grade parts for Honda motorcycles"},
    {"_id": "placeholder-yamaha", "name": "Yamaha", "productCount": 3,
     "description": "Parts and accessories for Yamaha motorcycles"},
    {"_id": "placeholder-suzuki", "name": "Suzuki", "productCount": 2,
     "description": "Parts and accessories for Suzuki motorcycles"},
    {"_id": "placeholder-kawasaki", "name": "Kawasaki", "productCount": 2,
     "description": "Parts and accessories for Kawasaki motorcycles"},
    {"_id": "placeholder-honda-cbr150r", "name": "CBR150R", "parentId": "placeholder-honda"},
    {"_id": "placeholder-honda-click125", "name": "Click 125i", "parentId": "placeholder-honda"},
    {"_id": "placeholder-yamaha-nmax", "name": "NMAX", "parentId": "placeholder-yamaha"},
    {"_id": "placeholder-yamaha-r15", "name": "R15", "parentId": "placeholder-yamaha"},
    {"_id": "placeholder-suzuki-raider", "name": "Raider R150", "parentId": "placeholder-suzuki"},
    {"_id": "placeholder-kawasaki-ninja", "name": "Ninja 250", "parentId": "placeholder-kawasaki"},
]


def placeholder_categories() -> list[Category]:
    """Build the placeholder category set.

    Returns:
        Normalized placeholder categories.
    """
    return normalize_categories(PLACEHOLDER_CATEGORIES)


class CatalogStore:
    """Published catalog data for one page.

    Readers get the hierarchy and search engine of the latest publish;
    both are swapped together so a search never sees a half-built forest.

    Example usage:
        store = CatalogStore()
        await store.refresh_categories(provider)
        await store.refresh_products(provider)
        results = store.search("brake")
    """

    def __init__(self, builder: HierarchyBuilder | None = None) -> None:
        """Initialize an empty store.

        Args:
            builder: Hierarchy builder to use.
        """
        self._builder = builder or HierarchyBuilder()
        self.hierarchy: Hierarchy | None = None
        self.products: list[Product] = []
        self.search_engine = CatalogSearchEngine()
        self.categories_degraded = False
        self.products_degraded = False
        self._products_loaded = False
        self._category_products: dict[str, list[Product]] = {}

    @property
    def is_loaded(self) -> bool:
        """Check whether a hierarchy has been published."""
        return self.hierarchy is not None

    @property
    def degraded(self) -> bool:
        """Check whether any data comes from fallbacks after a provider failure."""
        return self.categories_degraded or self.products_degraded

    @property
    def is_empty(self) -> bool:
        """Check for the "nothing here yet" state (loaded but no categories)."""
        return self.hierarchy is not None and len(self.hierarchy) == 0

    @property
    def roots(self) -> list[Category]:
        return self.hierarchy.roots if self.hierarchy is not None else []

    @property
    def flattened(self) -> list[Category]:
        return self.hierarchy.flattened if self.hierarchy is not None else []

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    def publish_categories(self, categories: Iterable[Category]) -> Hierarchy:
        """Build and publish a hierarchy.

        Args:
            categories: Flat normalized categories.

        Returns:
            The published hierarchy.
        """
        hierarchy = self._builder.build(categories)
        self.hierarchy = hierarchy
        self._reindex()
        return hierarchy

    def publish_products(self, products: Iterable[Product]) -> None:
        """Publish the product search corpus.

        Args:
            products: Products in catalog load order.
        """
        self.products = list(products)
        self._products_loaded = True
        self._reindex()

    def _reindex(self) -> None:
        self.search_engine = CatalogSearchEngine(
            SearchCorpus.from_hierarchy(self.hierarchy, self.products)
        )

    def search(self, term: str | None) -> SearchResults:
        """Search the published corpus.

        Args:
            term: Raw search term.

        Returns:
            SearchResults.
        """
        return self.search_engine.search(term)

    # ------------------------------------------------------------------
    # Provider refresh
    # ------------------------------------------------------------------

    async def refresh_categories(self, provider: "CatalogProvider") -> Hierarchy:
        """Fetch categories and publish a new hierarchy.

        On provider failure the last published hierarchy is kept; if there
        is none the placeholder dataset is published instead.

        Args:
            provider: Catalog data provider.

        Returns:
            The hierarchy now published.
        """
        try:
            categories = await provider.fetch_categories()
        except ProviderError as e:
            self.categories_degraded = True
            if self.hierarchy is not None:
                logger.warning(
                    "Category fetch failed, keeping last known categories",
                    error=e.message,
                )
                return self.hierarchy
            logger.warning(
                "Category fetch failed, publishing placeholder categories",
                error=e.message,
            )
            return self.publish_categories(placeholder_categories())

        self.categories_degraded = False
        if not categories:
            logger.info("Provider returned no categories")
        return self.publish_categories(categories)

    async def refresh_products(self, provider: "CatalogProvider") -> list[Product]:
        """Fetch the product catalog used for search.

        On provider failure the last product list is kept (empty if none).

        Args:
            provider: Catalog data provider.

        Returns:
            The product list now published.
        """
        try:
            products = await provider.fetch_products()
        except ProviderError as e:
            self.products_degraded = True
            logger.warning(
                "Product fetch failed, keeping last known products",
                error=e.message,
                known_products=len(self.products),
            )
            if not self._products_loaded:
                self.publish_products([])
            return self.products

        self.products_degraded = False
        self.publish_products(products)
        return self.products

    async def fetch_category_products(
        self,
        provider: "CatalogProvider",
        category_id: str,
    ) -> list[Product]:
        """Fetch products of one category.

        On provider failure the last answer for that category is returned,
        or else the catalog products that reference the category.

        Args:
            provider: Catalog data provider.
            category_id: Category ID.

        Returns:
            Products of the category.
        """
        try:
            products = await provider.fetch_products_by_category(category_id)
        except ProviderError as e:
            cached = self._category_products.get(category_id)
            if cached is None:
                cached = [p for p in self.products if p.category_id == category_id]
            logger.warning(
                "Category product fetch failed, using cached products",
                category_id=category_id,
                error=e.message,
                cached_products=len(cached),
            )
            return list(cached)

        self._category_products[category_id] = list(products)
        return products
