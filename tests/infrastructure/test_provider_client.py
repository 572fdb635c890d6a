"""Tests for the HTTP catalog provider."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from storefront.errors import MalformedProviderResponse, ProviderError
from storefront.infrastructure.provider_client import HttpCatalogProvider


@pytest.fixture
def http_client() -> MagicMock:
    """Create a mocked httpx client."""
    client = MagicMock()
    client.get = AsyncMock()
    return client


@pytest.fixture
def provider() -> HttpCatalogProvider:
    """Create provider pointed at a dummy backend."""
    return HttpCatalogProvider(base_url="http://catalog.test/", timeout=5.0)


class TestHttpCatalogProvider:
    """Tests for HttpCatalogProvider."""

    def test_base_url_normalized(self, provider: HttpCatalogProvider) -> None:
        """Trailing slashes are removed from the base URL."""
        assert provider.base_url == "http://catalog.test"
        assert provider.timeout == 5.0

    @pytest.mark.asyncio
    async def test_fetch_categories(
        self, provider: HttpCatalogProvider, http_client: MagicMock
    ) -> None:
        """Categories are unwrapped and normalized."""
        http_client.get.return_value = httpx.Response(
            200,
            json={
                "success": True,
                "data": [
                    {"_id": "1", "name": "Honda", "productCount": 3},
                    {"_id": "2", "name": "CBR150", "parentId": "1"},
                ],
            },
        )

        with patch.object(provider, "_get_client", AsyncMock(return_value=http_client)):
            categories = await provider.fetch_categories()

        http_client.get.assert_awaited_once_with("/api/categories", params=None)
        assert [(c.id, c.parent_id) for c in categories] == [("1", None), ("2", "1")]
        assert categories[0].product_count == 3

    @pytest.mark.asyncio
    async def test_fetch_products_by_category(
        self, provider: HttpCatalogProvider, http_client: MagicMock
    ) -> None:
        """Category products are requested with the category filter."""
        http_client.get.return_value = httpx.Response(
            200, json={"products": [{"id": "10", "name": "Brake Pad", "category": "2"}]}
        )

        with patch.object(provider, "_get_client", AsyncMock(return_value=http_client)):
            products = await provider.fetch_products_by_category("2")

        http_client.get.assert_awaited_once_with("/api/products", params={"category": "2"})
        assert [p.name for p in products] == ["Brake Pad"]

    @pytest.mark.asyncio
    async def test_fetch_products(
        self, provider: HttpCatalogProvider, http_client: MagicMock
    ) -> None:
        """The full product list is fetched for search."""
        http_client.get.return_value = httpx.Response(
            200, json=[{"id": "10", "name": "Brake Pad"}, {"id": "11", "name": "Chain Kit"}]
        )

        with patch.object(provider, "_get_client", AsyncMock(return_value=http_client)):
            products = await provider.fetch_products()

        assert [p.id for p in products] == ["10", "11"]

    @pytest.mark.asyncio
    async def test_error_status(
        self, provider: HttpCatalogProvider, http_client: MagicMock
    ) -> None:
        """HTTP error statuses raise ProviderError with the status code."""
        http_client.get.return_value = httpx.Response(503, json={"message": "down"})

        with patch.object(provider, "_get_client", AsyncMock(return_value=http_client)):
            with pytest.raises(ProviderError) as exc_info:
                await provider.fetch_categories()

        assert exc_info.value.status_code == 503
        assert exc_info.value.operation == "fetch_categories"

    @pytest.mark.asyncio
    async def test_timeout(self, provider: HttpCatalogProvider, http_client: MagicMock) -> None:
        """Timeouts raise ProviderError."""
        http_client.get.side_effect = httpx.ReadTimeout("slow")

        with patch.object(provider, "_get_client", AsyncMock(return_value=http_client)):
            with pytest.raises(ProviderError, match="timed out"):
                await provider.fetch_products()

    @pytest.mark.asyncio
    async def test_connection_error(
        self, provider: HttpCatalogProvider, http_client: MagicMock
    ) -> None:
        """Transport errors raise ProviderError."""
        http_client.get.side_effect = httpx.ConnectError("refused")

        with patch.object(provider, "_get_client", AsyncMock(return_value=http_client)):
            with pytest.raises(ProviderError, match="Request failed"):
                await provider.fetch_categories()

    @pytest.mark.asyncio
    async def test_invalid_json(
        self, provider: HttpCatalogProvider, http_client: MagicMock
    ) -> None:
        """Non-JSON bodies raise ProviderError."""
        http_client.get.return_value = httpx.Response(200, content=b"<html>oops</html>")

        with patch.object(provider, "_get_client", AsyncMock(return_value=http_client)):
            with pytest.raises(ProviderError, match="invalid JSON"):
                await provider.fetch_categories()

    @pytest.mark.asyncio
    async def test_non_list_payload(
        self, provider: HttpCatalogProvider, http_client: MagicMock
    ) -> None:
        """A payload without a record list is a hard failure."""
        http_client.get.return_value = httpx.Response(200, json={"categories": "none"})

        with patch.object(provider, "_get_client", AsyncMock(return_value=http_client)):
            with pytest.raises(MalformedProviderResponse):
                await provider.fetch_categories()

    @pytest.mark.asyncio
    async def test_close(self, provider: HttpCatalogProvider) -> None:
        """Closing releases the underlying client."""
        client = await provider._get_client()
        assert client.headers["Accept"] == "application/json"

        await provider.close()

        assert provider._client is None
