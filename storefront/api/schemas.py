"""API schemas for the storefront catalog.

Pydantic models for request/response validation and serialization.
"""

from pydantic import BaseModel, Field

from storefront.navigation.states import ActionKind, NavigationView


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict = Field(default_factory=dict, description="Additional error details")
    request_id: str | None = Field(default=None, description="Request ID for correlation")


# ============================================================================
# Catalog Schemas
# ============================================================================


class CategorySchema(BaseModel):
    """Brand or motorcycle model."""

    id: str
    name: str
    description: str = ""
    parent_id: str | None = None
    product_count: int = 0
    slug: str | None = None
    image: str | None = None
    children: list["CategorySchema"] = Field(default_factory=list)


class MotorcycleSchema(BaseModel):
    """Motorcycle model annotated with its brand."""

    id: str
    name: str
    description: str = ""
    parent_id: str
    parent_name: str
    product_count: int = 0
    slug: str | None = None
    image: str | None = None


class ProductSchema(BaseModel):
    """Product summary."""

    id: str
    name: str
    description: str = ""
    short_description: str | None = None
    category_id: str | None = None
    price: str = Field(..., description="Decimal price as string")
    images: list[str] = Field(default_factory=list)


class BrandListResponse(BaseModel):
    """Brand forest."""

    brands: list[CategorySchema]
    total: int
    empty: bool = Field(..., description="No categories published yet")
    degraded: bool = Field(..., description="Data comes from a fallback after a provider failure")


class FlattenedCategoryResponse(BaseModel):
    """Pre-order category list."""

    categories: list[CategorySchema]
    total: int


class SearchResponse(BaseModel):
    """Multi-entity search result."""

    term: str
    brands: list[CategorySchema]
    motorcycles: list[MotorcycleSchema]
    products: list[ProductSchema]
    total: int


class CategoryProductsResponse(BaseModel):
    """Products of one category."""

    category: CategorySchema
    products: list[ProductSchema]
    total: int


# ============================================================================
# Navigation Schemas
# ============================================================================


class NavigationStateSchema(BaseModel):
    """Active navigation state."""

    view: NavigationView
    selected_brand_id: str | None = None
    category_id: str | None = None
    term: str | None = None


class NavigationActionSchema(BaseModel):
    """User action; the field matching ``type`` is required."""

    type: ActionKind
    brand_id: str | None = None
    category_id: str | None = None
    term: str | None = None


class NavigationRestoreRequest(BaseModel):
    """Persisted navigation representation to restore."""

    query: str = Field(default="", description="Query string, e.g. 'view=products&category=42'")


class NavigationActionRequest(BaseModel):
    """Action applied on top of a persisted navigation representation."""

    query: str = Field(default="", description="Current query string")
    action: NavigationActionSchema


class NavigationResponse(BaseModel):
    """Navigation state with its persisted representation."""

    state: NavigationStateSchema
    query: str
    params: dict[str, str]
