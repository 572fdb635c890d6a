"""Catalog data provider client.

HTTP client for the storefront backend that serves categories and
products. Responses are unwrapped and normalized here so callers only
see canonical catalog entities.
"""

from typing import Any, Protocol

import httpx
import structlog

from storefront.catalog.models import Category, Product
from storefront.catalog.normalizer import (
    normalize_categories,
    normalize_products,
    unwrap_records,
)
from storefront.errors import ProviderError
from storefront.infrastructure.config import settings

logger = structlog.get_logger()


class CatalogProvider(Protocol):
    """Source of catalog data consumed by the store and page controller."""

    async def fetch_categories(self) -> list[Category]: ...

    async def fetch_products(self) -> list[Product]: ...

    async def fetch_products_by_category(self, category_id: str) -> list[Product]: ...


class HttpCatalogProvider:
    """HTTP implementation of CatalogProvider.

    Example usage:
        provider = HttpCatalogProvider("http://localhost:5000")
        try:
            categories = await provider.fetch_categories()
        finally:
            await provider.close()
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        request_id: str | None = None,
    ) -> None:
        """Initialize provider client.

        Args:
            base_url: Provider base URL (defaults to settings).
            timeout: Request timeout in seconds (defaults to settings).
            request_id: Optional request ID for correlation.
        """
        self.base_url = (base_url or settings.provider_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.provider_timeout
        self.request_id = request_id
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self.request_id:
                headers["X-Request-ID"] = self.request_id
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get_json(
        self,
        operation: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """GET a provider endpoint and decode its JSON body.

        Args:
            operation: Operation name for errors and logs.
            path: Endpoint path.
            params: Query parameters.

        Returns:
            Decoded JSON payload.

        Raises:
            ProviderError: On transport errors, error statuses or invalid JSON.
        """
        client = await self._get_client()

        try:
            logger.debug("Calling catalog provider", operation=operation, path=path)
            response = await client.get(path, params=params)
        except httpx.TimeoutException as e:
            raise ProviderError(operation, "Request timed out") from e
        except httpx.RequestError as e:
            raise ProviderError(operation, f"Request failed: {e}") from e

        if response.status_code >= 400:
            raise ProviderError(
                operation,
                f"Provider returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(
                operation,
                "Provider returned invalid JSON",
                status_code=response.status_code,
            ) from e

    async def fetch_categories(self) -> list[Category]:
        """Fetch all categories.

        Returns:
            Normalized categories in provider order.
        """
        payload = await self._get_json("fetch_categories", "/api/categories")
        categories = normalize_categories(unwrap_records(payload, "categories"))
        logger.info("Fetched categories", count=len(categories))
        return categories

    async def fetch_products(self) -> list[Product]:
        """Fetch the product catalog used as the search corpus.

        Returns:
            Normalized products in provider order.
        """
        payload = await self._get_json("fetch_products", "/api/products")
        products = normalize_products(unwrap_records(payload, "products"))
        logger.info("Fetched products", count=len(products))
        return products

    async def fetch_products_by_category(self, category_id: str) -> list[Product]:
        """Fetch products of a single category.

        Args:
            category_id: Category ID.

        Returns:
            Normalized products in provider order.
        """
        payload = await self._get_json(
            "fetch_products_by_category",
            "/api/products",
            params={"category": category_id},
        )
        products = normalize_products(unwrap_records(payload, "products"))
        logger.info(
            "Fetched category products",
            category_id=category_id,
            count=len(products),
        )
        return products
