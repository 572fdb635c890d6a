"""Navigation states and user actions.

The browser is always in exactly one of three views:

    BROWSING(selected brand) ──── drill_into ───► VIEWING_PRODUCTS(category)
      ▲  │  ▲                                       │        │
      │  │  └──────── back_to_categories ───────────┘        │
      │  │ search                                            │ search
      │  ▼                                                   ▼
      │ SEARCHING(term) ◄────────────────────────────────────┘
      │  │
      └──┘ select_brand / clear_search / empty search

Drilling in and searching are accepted from every view.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class ActionKind(str, Enum):
    """User interactions that move the navigation state."""

    SELECT_BRAND = "select_brand"
    DRILL_INTO = "drill_into"
    SEARCH = "search"
    CLEAR_SEARCH = "clear_search"
    BACK_TO_CATEGORIES = "back_to_categories"


class NavigationView(str, Enum):
    """Tag of the active navigation state."""

    BROWSING = "browsing"
    VIEWING_PRODUCTS = "viewing_products"
    SEARCHING = "searching"

    def accepts(self, action: ActionKind) -> bool:
        """Check if the view accepts an action.

        Args:
            action: Action kind.

        Returns:
            True if the action may be applied in this view.
        """
        return action in _ACCEPTED_ACTIONS.get(self, set())

    def allowed_actions(self) -> list[ActionKind]:
        """Get the action kinds this view accepts.

        Returns:
            Accepted action kinds.
        """
        return sorted(_ACCEPTED_ACTIONS.get(self, set()), key=lambda a: a.value)


# Defined outside the enum to avoid Enum member restrictions
_ACCEPTED_ACTIONS: dict[NavigationView, set[ActionKind]] = {
    NavigationView.BROWSING: {
        ActionKind.SELECT_BRAND,
        ActionKind.DRILL_INTO,
        ActionKind.SEARCH,
    },
    NavigationView.VIEWING_PRODUCTS: {
        ActionKind.DRILL_INTO,
        ActionKind.SEARCH,
        ActionKind.BACK_TO_CATEGORIES,
    },
    NavigationView.SEARCHING: {
        ActionKind.SELECT_BRAND,
        ActionKind.DRILL_INTO,
        ActionKind.SEARCH,
        ActionKind.CLEAR_SEARCH,
    },
}


# ============================================================================
# States
# ============================================================================


@dataclass(frozen=True)
class Browsing:
    """Brand list with one brand's motorcycles shown."""

    selected_brand_id: str | None = None
    view: ClassVar[NavigationView] = NavigationView.BROWSING


@dataclass(frozen=True)
class ViewingProducts:
    """Product list of one category."""

    category_id: str
    view: ClassVar[NavigationView] = NavigationView.VIEWING_PRODUCTS


@dataclass(frozen=True)
class Searching:
    """Free-text query across brands, motorcycles and products."""

    term: str
    view: ClassVar[NavigationView] = NavigationView.SEARCHING


NavigationState = Browsing | ViewingProducts | Searching


def state_to_dict(state: NavigationState) -> dict:
    """Convert a navigation state to a JSON-friendly dictionary.

    Args:
        state: Navigation state.

    Returns:
        Dictionary with ``view`` plus the variant's field.
    """
    data: dict = {"view": state.view.value}
    if isinstance(state, Browsing):
        data["selected_brand_id"] = state.selected_brand_id
    elif isinstance(state, ViewingProducts):
        data["category_id"] = state.category_id
    else:
        data["term"] = state.term
    return data


# ============================================================================
# Actions
# ============================================================================


@dataclass(frozen=True)
class SelectBrand:
    brand_id: str
    kind: ClassVar[ActionKind] = ActionKind.SELECT_BRAND


@dataclass(frozen=True)
class DrillInto:
    category_id: str
    kind: ClassVar[ActionKind] = ActionKind.DRILL_INTO


@dataclass(frozen=True)
class Search:
    term: str
    kind: ClassVar[ActionKind] = ActionKind.SEARCH


@dataclass(frozen=True)
class ClearSearch:
    kind: ClassVar[ActionKind] = ActionKind.CLEAR_SEARCH


@dataclass(frozen=True)
class BackToCategories:
    kind: ClassVar[ActionKind] = ActionKind.BACK_TO_CATEGORIES


NavigationAction = SelectBrand | DrillInto | Search | ClearSearch | BackToCategories


@dataclass(frozen=True)
class NavigationTransition:
    """A recorded state change.

    Attributes:
        from_state: Previous state.
        to_state: New state.
        action: User action that caused it, or None for restoration.
    """

    from_state: NavigationState
    to_state: NavigationState
    action: NavigationAction | None = None
