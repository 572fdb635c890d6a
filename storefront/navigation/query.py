"""Persisted navigation representation.

Navigation state round-trips through a flat, order-insensitive query
string so that leaving for a product page and coming back lands on the
same view:

    view=products&category=<id>   ViewingProducts(id), plus brand=<id> of
                                  the brand selected before drilling in
    search=<term>                 Searching(term)
    brand=<id>                    Browsing(id)
    (none of the above)           Browsing(default brand)

Any other keys (sort, price filters, paging) are carried through
untouched.
"""

from collections.abc import Mapping
from urllib.parse import parse_qsl, urlencode

import structlog

from storefront.catalog.hierarchy import Hierarchy
from storefront.navigation.states import (
    Browsing,
    NavigationState,
    Searching,
    ViewingProducts,
)

logger = structlog.get_logger()

VIEW_KEY = "view"
CATEGORY_KEY = "category"
SEARCH_KEY = "search"
BRAND_KEY = "brand"
PRODUCTS_VIEW = "products"

RESERVED_KEYS = frozenset({VIEW_KEY, CATEGORY_KEY, SEARCH_KEY, BRAND_KEY})

QueryParams = dict[str, str]


def parse_query(query: str | Mapping[str, str] | None) -> QueryParams:
    """Parse a query representation into a flat dictionary.

    Args:
        query: Query string (leading ``?`` allowed), mapping, or None.

    Returns:
        Key/value pairs; for repeated keys the last value wins.
    """
    if query is None:
        return {}
    if isinstance(query, Mapping):
        return {str(k): str(v) for k, v in query.items()}
    return dict(parse_qsl(query.lstrip("?")))


def encode_query(params: Mapping[str, str]) -> str:
    """Encode parameters as a query string (without leading ``?``)."""
    return urlencode(params)


def passthrough_params(params: Mapping[str, str]) -> QueryParams:
    """Keys not interpreted by navigation.

    Args:
        params: Parsed query parameters.

    Returns:
        Parameters other than the navigation keys.
    """
    return {k: v for k, v in params.items() if k not in RESERVED_KEYS}


def serialize(
    state: NavigationState,
    passthrough: Mapping[str, str] | None = None,
    brand_id: str | None = None,
) -> QueryParams:
    """Serialize a navigation state.

    Args:
        state: Navigation state.
        passthrough: Uninterpreted parameters to carry along.
        brand_id: Brand selected before drilling in; kept with a product
            view so "back to categories" survives a round trip.

    Returns:
        Query parameters representing the state.
    """
    params = passthrough_params(passthrough or {})
    if isinstance(state, ViewingProducts):
        params[VIEW_KEY] = PRODUCTS_VIEW
        params[CATEGORY_KEY] = state.category_id
        if brand_id is not None:
            params[BRAND_KEY] = brand_id
    elif isinstance(state, Searching):
        params[SEARCH_KEY] = state.term
    elif state.selected_brand_id is not None:
        params[BRAND_KEY] = state.selected_brand_id
    return params


def read_brand(query: str | Mapping[str, str] | None) -> str | None:
    """Brand ID carried by a query, if any."""
    return parse_query(query).get(BRAND_KEY, "").strip() or None


def read_target(query: str | Mapping[str, str] | None) -> NavigationState:
    """Read the state a query asks for, without checking it against data.

    ``view=products`` takes precedence over ``search`` when both appear.

    Args:
        query: Query representation.

    Returns:
        Requested state; Browsing(None) stands for "default brand".
    """
    params = parse_query(query)
    category_id = params.get(CATEGORY_KEY, "").strip()
    if params.get(VIEW_KEY) == PRODUCTS_VIEW and category_id:
        return ViewingProducts(category_id)

    term = params.get(SEARCH_KEY, "").strip()
    if term:
        return Searching(term)

    return Browsing(read_brand(params))


def resolve_target(target: NavigationState, hierarchy: Hierarchy) -> NavigationState:
    """Resolve a requested state against a loaded hierarchy.

    IDs that are no longer present fall back to Browsing(first brand).

    Args:
        target: State read from a query.
        hierarchy: Loaded hierarchy.

    Returns:
        A state valid for the hierarchy.
    """
    default = Browsing(hierarchy.first_brand_id)

    if isinstance(target, ViewingProducts):
        if target.category_id in hierarchy:
            return target
        logger.info("Restored category no longer exists", category_id=target.category_id)
        return default

    if isinstance(target, Browsing):
        if target.selected_brand_id is None:
            return default
        if hierarchy.is_brand(target.selected_brand_id):
            return target
        logger.info("Restored brand no longer exists", brand_id=target.selected_brand_id)
        return default

    return target


def restore(
    query: str | Mapping[str, str] | None,
    hierarchy: Hierarchy | None,
) -> NavigationState | None:
    """Restore a navigation state from its persisted representation.

    Args:
        query: Query representation.
        hierarchy: Loaded hierarchy, or None if categories are still loading.

    Returns:
        The restored state, or None when it depends on a hierarchy that
        has not loaded yet.
    """
    target = read_target(query)
    if isinstance(target, Searching):
        return target
    if hierarchy is None:
        return None
    return resolve_target(target, hierarchy)
