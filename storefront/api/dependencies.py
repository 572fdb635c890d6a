"""Request dependencies shared by the routers."""

from fastapi import Request

from storefront.catalog.store import CatalogStore
from storefront.infrastructure.provider_client import CatalogProvider


def get_store(request: Request) -> CatalogStore:
    """Catalog store published at startup."""
    return request.app.state.store


def get_provider(request: Request) -> CatalogProvider:
    """Catalog data provider configured for the app."""
    return request.app.state.provider
