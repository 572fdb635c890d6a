"""Catalog API endpoints.

Provides read access to the brand forest, the flattened category list,
multi-entity search and per-category product lists.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query, status

from storefront.api.dependencies import get_provider, get_store
from storefront.api.schemas import (
    BrandListResponse,
    CategoryProductsResponse,
    CategorySchema,
    ErrorResponse,
    FlattenedCategoryResponse,
    MotorcycleSchema,
    ProductSchema,
    SearchResponse,
)
from storefront.catalog.models import Category, Product
from storefront.catalog.store import CatalogStore
from storefront.errors import CategoryNotFoundError
from storefront.infrastructure.provider_client import CatalogProvider

logger = structlog.get_logger()

router = APIRouter(prefix="/catalog", tags=["Catalog"])

StoreDep = Annotated[CatalogStore, Depends(get_store)]
ProviderDep = Annotated[CatalogProvider, Depends(get_provider)]


# ============================================================================
# Converters
# ============================================================================


def category_to_schema(category: Category, include_children: bool = True) -> CategorySchema:
    """Convert Category entity to response schema."""
    return CategorySchema.model_validate(category.to_dict(include_children=include_children))


def product_to_schema(product: Product) -> ProductSchema:
    """Convert Product entity to response schema."""
    return ProductSchema.model_validate(product.to_dict())


def brand_list_response(store: CatalogStore) -> BrandListResponse:
    brands = [category_to_schema(c) for c in store.roots]
    return BrandListResponse(
        brands=brands,
        total=len(brands),
        empty=store.is_empty,
        degraded=store.degraded,
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "/brands",
    response_model=BrandListResponse,
    summary="List brands",
    description="Brand forest with motorcycle models nested under each brand.",
)
async def list_brands(store: StoreDep) -> BrandListResponse:
    """List root categories in display order."""
    return brand_list_response(store)


@router.get(
    "/categories",
    response_model=FlattenedCategoryResponse,
    summary="List categories",
    description="Every category in pre-order: each brand followed by its models.",
)
async def list_categories(store: StoreDep) -> FlattenedCategoryResponse:
    """List flattened categories."""
    categories = [category_to_schema(c, include_children=False) for c in store.flattened]
    return FlattenedCategoryResponse(categories=categories, total=len(categories))


@router.get(
    "/search",
    response_model=SearchResponse,
    summary="Search catalog",
    description="Case-insensitive substring search across brands, motorcycles and products.",
)
async def search_catalog(
    store: StoreDep,
    q: Annotated[str, Query(description="Search term")] = "",
) -> SearchResponse:
    """Search brands, motorcycle models and products."""
    results = store.search(q)
    return SearchResponse(
        term=results.term,
        brands=[category_to_schema(b, include_children=False) for b in results.brands],
        motorcycles=[MotorcycleSchema.model_validate(m.to_dict()) for m in results.motorcycles],
        products=[product_to_schema(p) for p in results.products],
        total=results.total,
    )


@router.get(
    "/categories/{category_id}/products",
    response_model=CategoryProductsResponse,
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
    summary="List category products",
)
async def list_category_products(
    category_id: str,
    store: StoreDep,
    provider: ProviderDep,
) -> CategoryProductsResponse:
    """List products of one category.

    Raises:
        CategoryNotFoundError: If the category is not in the published hierarchy.
    """
    category = store.hierarchy.get(category_id) if store.hierarchy is not None else None
    if category is None:
        raise CategoryNotFoundError(category_id)

    products = await store.fetch_category_products(provider, category_id)
    return CategoryProductsResponse(
        category=category_to_schema(category, include_children=False),
        products=[product_to_schema(p) for p in products],
        total=len(products),
    )


@router.post(
    "/refresh",
    response_model=BrandListResponse,
    summary="Reload catalog",
    description="Re-fetch categories and products from the provider and republish.",
)
async def refresh_catalog(store: StoreDep, provider: ProviderDep) -> BrandListResponse:
    """Refresh the published catalog."""
    await store.refresh_categories(provider)
    await store.refresh_products(provider)
    logger.info(
        "Catalog refreshed",
        categories=len(store.flattened),
        products=len(store.products),
        degraded=store.degraded,
    )
    return brand_list_response(store)
