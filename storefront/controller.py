"""Catalog page controller.

Owns the catalog store and the navigation synchronizer for one page
visit and runs the two suspension points of the page: the category
load and the product fetch of the category being viewed.
"""

from collections.abc import Mapping

import structlog

from storefront.catalog.models import Category, Product
from storefront.catalog.search import SearchResults
from storefront.catalog.store import CatalogStore
from storefront.infrastructure.config import settings
from storefront.infrastructure.provider_client import CatalogProvider
from storefront.navigation.debounce import SearchDebouncer
from storefront.navigation.query import QueryParams, encode_query
from storefront.navigation.states import (
    NavigationAction,
    NavigationState,
    Search,
    Searching,
    ViewingProducts,
)
from storefront.navigation.synchronizer import NavigationSynchronizer

logger = structlog.get_logger()


class CatalogPage:
    """Controller behind the brand / motorcycle browser.

    Example usage:
        page = CatalogPage(provider)
        await page.open("view=products&category=42")
        page.products                 # products of category 42
        back_link = page.snapshot()   # carry to the product detail page
        page.close()
    """

    def __init__(
        self,
        provider: CatalogProvider,
        store: CatalogStore | None = None,
        debounce_delay: float | None = None,
    ) -> None:
        """Initialize page controller.

        Args:
            provider: Catalog data provider.
            store: Catalog store (a fresh one per page when omitted).
            debounce_delay: Search debounce in seconds (defaults to settings).
        """
        self.provider = provider
        self.store = store or CatalogStore()
        self.navigation = NavigationSynchronizer(self.store.hierarchy)
        if debounce_delay is None:
            debounce_delay = settings.search_debounce_ms / 1000
        self.debouncer = SearchDebouncer(self._run_debounced_search, delay=debounce_delay)
        self.products: list[Product] = []
        self.search_results = SearchResults()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self, query: str | Mapping[str, str] | None = None) -> NavigationState:
        """Enter the page, restoring navigation from a persisted query.

        Args:
            query: Persisted navigation representation.

        Returns:
            Navigation state after categories have loaded.
        """
        self.navigation.restore_from(query, provisional=self.store.categories_degraded)
        return await self.refresh()

    async def refresh(self) -> NavigationState:
        """Reload categories and products and re-sync navigation.

        Returns:
            Current navigation state.
        """
        hierarchy = await self.store.refresh_categories(self.provider)
        await self.store.refresh_products(self.provider)
        if self._closed:
            return self.navigation.state

        state = self.navigation.on_hierarchy_changed(
            hierarchy, provisional=self.store.categories_degraded
        )
        await self._sync_view()
        logger.info(
            "Catalog page loaded",
            brands=len(hierarchy.roots),
            categories=len(hierarchy),
            products=len(self.store.products),
            degraded=self.store.degraded,
            view=state.view.value,
        )
        return self.navigation.state

    def close(self) -> None:
        """Leave the page; in-flight results are discarded on arrival."""
        self._closed = True
        self.debouncer.cancel()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def get_roots(self) -> list[Category]:
        return self.store.roots

    def get_flattened(self) -> list[Category]:
        return self.store.flattened

    def search(self, term: str | None) -> SearchResults:
        return self.store.search(term)

    def current_state(self) -> NavigationState:
        return self.navigation.state

    def serialize(self) -> QueryParams:
        """Persisted representation of the current state."""
        return self.navigation.query

    def snapshot(self) -> str:
        """Capture the current state before leaving for a detail page.

        Returns:
            Query string that restores this exact view.
        """
        return encode_query(self.navigation.query)

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    async def apply_action(self, action: NavigationAction) -> NavigationState:
        """Apply a user action and load what the new view needs.

        Args:
            action: Navigation action.

        Returns:
            New navigation state.
        """
        self.debouncer.cancel()
        previous = self.navigation.state
        state = self.navigation.apply(action)
        if state != previous:
            await self._sync_view()
        return self.navigation.state

    def type_search(self, term: str) -> int:
        """Feed a keystroke into the debounced search.

        Args:
            term: Current contents of the search box.

        Returns:
            Debounce token for this input.
        """
        return self.debouncer.submit(term)

    def _run_debounced_search(self, term: str) -> None:
        if self._closed:
            return
        self.navigation.apply(Search(term))
        state = self.navigation.state
        self.products = []
        if isinstance(state, Searching):
            self.search_results = self.store.search(state.term)
        else:
            self.search_results = SearchResults()

    # ------------------------------------------------------------------
    # View loading
    # ------------------------------------------------------------------

    async def _sync_view(self) -> None:
        state = self.navigation.state
        if isinstance(state, ViewingProducts):
            self.search_results = SearchResults()
            await self._load_products(state)
        elif isinstance(state, Searching):
            self.products = []
            self.search_results = self.store.search(state.term)
        else:
            self.products = []
            self.search_results = SearchResults()

    async def _load_products(self, requested: ViewingProducts) -> bool:
        """Fetch products for a category view.

        Args:
            requested: State the fetch was started for.

        Returns:
            True if the result was applied, False if it arrived stale.
        """
        products = await self.store.fetch_category_products(
            self.provider, requested.category_id
        )
        if self._closed or self.navigation.state != requested:
            logger.info(
                "Discarding stale category products",
                category_id=requested.category_id,
                page_closed=self._closed,
            )
            return False
        self.products = products
        return True
