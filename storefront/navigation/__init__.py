"""Navigation state for the catalog browser.

Provides the Browsing / ViewingProducts / Searching state union, the
user actions that move between them, the query-string representation
and the synchronizer that keeps both in step.
"""

from storefront.navigation.debounce import SearchDebouncer
from storefront.navigation.query import parse_query, restore, serialize
from storefront.navigation.states import (
    ActionKind,
    BackToCategories,
    Browsing,
    ClearSearch,
    DrillInto,
    NavigationAction,
    NavigationState,
    NavigationTransition,
    NavigationView,
    Search,
    Searching,
    SelectBrand,
    ViewingProducts,
)
from storefront.navigation.synchronizer import NavigationSynchronizer

__all__ = [
    # States
    "Browsing",
    "NavigationState",
    "NavigationTransition",
    "NavigationView",
    "Searching",
    "ViewingProducts",
    # Actions
    "ActionKind",
    "BackToCategories",
    "ClearSearch",
    "DrillInto",
    "NavigationAction",
    "Search",
    "SelectBrand",
    # Query representation
    "parse_query",
    "restore",
    "serialize",
    # Synchronizer
    "NavigationSynchronizer",
    "SearchDebouncer",
]
