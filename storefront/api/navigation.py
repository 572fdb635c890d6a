"""Navigation API endpoints.

The server keeps no per-shopper state: every request carries the
persisted query representation, the navigation state is restored from
it against the published hierarchy, and the response carries the
representation of the resulting state.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from storefront.api.dependencies import get_store
from storefront.api.schemas import (
    ErrorResponse,
    NavigationActionRequest,
    NavigationActionSchema,
    NavigationResponse,
    NavigationRestoreRequest,
    NavigationStateSchema,
)
from storefront.catalog.store import CatalogStore
from storefront.navigation.states import (
    ActionKind,
    BackToCategories,
    ClearSearch,
    DrillInto,
    NavigationAction,
    Search,
    SelectBrand,
    state_to_dict,
)
from storefront.navigation.synchronizer import NavigationSynchronizer

router = APIRouter(prefix="/navigation", tags=["Navigation"])

StoreDep = Annotated[CatalogStore, Depends(get_store)]


# ============================================================================
# Converters
# ============================================================================


def _require(value: str | None, field: str, kind: ActionKind) -> str:
    if value is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error_code": "VALIDATION_ERROR",
                "message": f"Action '{kind.value}' requires '{field}'",
                "details": {"action": kind.value, "field": field},
            },
        )
    return value


def schema_to_action(schema: NavigationActionSchema) -> NavigationAction:
    """Convert an action request body to a navigation action.

    Args:
        schema: Action schema.

    Returns:
        Navigation action.

    Raises:
        HTTPException: If the field required by the action type is missing.
    """
    if schema.type == ActionKind.SELECT_BRAND:
        return SelectBrand(_require(schema.brand_id, "brand_id", schema.type))
    if schema.type == ActionKind.DRILL_INTO:
        return DrillInto(_require(schema.category_id, "category_id", schema.type))
    if schema.type == ActionKind.SEARCH:
        return Search(_require(schema.term, "term", schema.type))
    if schema.type == ActionKind.CLEAR_SEARCH:
        return ClearSearch()
    return BackToCategories()


def navigation_response(navigation: NavigationSynchronizer) -> NavigationResponse:
    return NavigationResponse(
        state=NavigationStateSchema.model_validate(state_to_dict(navigation.state)),
        query=navigation.query_string,
        params=navigation.query,
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.post(
    "/restore",
    response_model=NavigationResponse,
    summary="Restore navigation",
    description="Resolve a persisted query against the published categories.",
)
async def restore_navigation(
    request: NavigationRestoreRequest,
    store: StoreDep,
) -> NavigationResponse:
    """Restore navigation state from its query representation."""
    navigation = NavigationSynchronizer(store.hierarchy)
    navigation.restore_from(request.query, provisional=store.categories_degraded)
    return navigation_response(navigation)


@router.post(
    "/actions",
    response_model=NavigationResponse,
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_409_CONFLICT: {"model": ErrorResponse},
        status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ErrorResponse},
    },
    summary="Apply navigation action",
)
async def apply_navigation_action(
    request: NavigationActionRequest,
    store: StoreDep,
) -> NavigationResponse:
    """Apply a user action on top of a persisted navigation state.

    Raises:
        CategoryNotFoundError: If the action names an unknown category.
        InvalidNavigationActionError: If the restored view does not accept the action.
    """
    action = schema_to_action(request.action)
    navigation = NavigationSynchronizer(store.hierarchy)
    navigation.restore_from(request.query, provisional=store.categories_degraded)
    navigation.apply(action)
    return navigation_response(navigation)
