"""Navigation state synchronizer.

Tracks the browser's current view, applies user actions, keeps the
persisted query representation in step with every change and restores
state from that representation when the shopper comes back.

Restoration is reactive: a query that names a category can only be
resolved once the hierarchy is loaded, so the target is kept pending and
re-checked each time a new hierarchy is published.
"""

from collections.abc import Mapping

import structlog

from storefront.catalog.hierarchy import Hierarchy
from storefront.errors import CategoryNotFoundError, InvalidNavigationActionError
from storefront.navigation.query import (
    QueryParams,
    encode_query,
    parse_query,
    passthrough_params,
    read_brand,
    read_target,
    resolve_target,
    restore,
    serialize,
)
from storefront.navigation.states import (
    BackToCategories,
    Browsing,
    ClearSearch,
    DrillInto,
    NavigationAction,
    NavigationState,
    NavigationTransition,
    Search,
    Searching,
    SelectBrand,
    ViewingProducts,
)

logger = structlog.get_logger()


class NavigationSynchronizer:
    """Single owner of the navigation state for one page.

    Example usage:
        nav = NavigationSynchronizer()
        nav.restore_from("view=products&category=42")   # pending
        nav.on_hierarchy_changed(hierarchy)              # ViewingProducts("42")
        nav.apply(BackToCategories())
        link_back = nav.query_string
    """

    def __init__(self, hierarchy: Hierarchy | None = None) -> None:
        """Initialize synchronizer in the default browsing state.

        Args:
            hierarchy: Already loaded hierarchy, if any.
        """
        self._hierarchy = hierarchy
        self._state: NavigationState = Browsing(
            hierarchy.first_brand_id if hierarchy is not None else None
        )
        self._pending: NavigationState | None = None
        self._last_brand_id: str | None = self._state.selected_brand_id
        self._passthrough: QueryParams = {}
        self._query: QueryParams = serialize(self._state)
        self.history: list[NavigationTransition] = []

    @property
    def state(self) -> NavigationState:
        """Current navigation state."""
        return self._state

    @property
    def pending_target(self) -> NavigationState | None:
        """Restoration target waiting for the hierarchy, if any."""
        return self._pending

    @property
    def query(self) -> QueryParams:
        """Persisted representation of the current state."""
        return dict(self._query)

    @property
    def query_string(self) -> str:
        return encode_query(self._query)

    # ------------------------------------------------------------------
    # Restoration
    # ------------------------------------------------------------------

    def restore_from(
        self,
        query: str | Mapping[str, str] | None,
        provisional: bool = False,
    ) -> NavigationState:
        """Enter the page from a persisted representation.

        Args:
            query: Query representation.
            provisional: The loaded hierarchy is fallback data; a target it
                does not contain stays pending.

        Returns:
            Current state; the default browsing state while a target is pending.
        """
        params = parse_query(query)
        self._passthrough = passthrough_params(params)
        self._last_brand_id = read_brand(params)

        target = read_target(params)
        if isinstance(target, Searching) or (self._hierarchy is not None and not provisional):
            self._pending = None
            self._set(restore(params, self._hierarchy), action=None)
        else:
            self._pending = target
            logger.debug("Navigation restoration pending", target=repr(target))
            if self._hierarchy is None:
                self._set(Browsing(), action=None)
            else:
                self.on_hierarchy_changed(self._hierarchy, provisional=True)

        if (
            self._pending is None
            and isinstance(self._state, Browsing)
            and self._state.selected_brand_id is not None
        ):
            self._last_brand_id = self._state.selected_brand_id
        self._reserialize()
        return self._state

    def on_hierarchy_changed(
        self,
        hierarchy: Hierarchy,
        provisional: bool = False,
    ) -> NavigationState:
        """Re-evaluate state after a hierarchy publish.

        Resolves a pending restoration target at most once; re-running
        after later publishes does not repeat the transition. Against a
        provisional hierarchy (placeholder or last-known-good data after a
        failed fetch) a target that misses is kept pending and retried on
        the next publish.

        Args:
            hierarchy: Newly published hierarchy.
            provisional: Whether the hierarchy is fallback data.

        Returns:
            Current state.
        """
        self._hierarchy = hierarchy

        if self._pending is not None:
            resolved = resolve_target(self._pending, hierarchy)
            if provisional and resolved != self._pending:
                logger.info(
                    "Restoration target kept until categories load",
                    target=repr(self._pending),
                )
            else:
                self._pending = None
            self._set(resolved, action=None)
        elif isinstance(self._state, Browsing) and not (
            self._state.selected_brand_id is not None
            and hierarchy.is_brand(self._state.selected_brand_id)
        ):
            self._set(Browsing(hierarchy.first_brand_id), action=None)

        self._reserialize()
        return self._state

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def apply(self, action: NavigationAction) -> NavigationState:
        """Apply a user action.

        A user action supersedes any pending restoration.

        Args:
            action: Action to apply.

        Returns:
            New current state.

        Raises:
            InvalidNavigationActionError: If the current view does not accept the action.
            CategoryNotFoundError: If the action names an unknown category.
        """
        view = self._state.view
        if not view.accepts(action.kind):
            raise InvalidNavigationActionError(
                view=view.value,
                action=action.kind.value,
                allowed_actions=[a.value for a in view.allowed_actions()],
            )

        target = self._target_for(action)
        self._pending = None
        self._set(target, action)
        self._reserialize()
        return self._state

    def _target_for(self, action: NavigationAction) -> NavigationState:
        if isinstance(action, SelectBrand):
            if self._hierarchy is not None and not self._hierarchy.is_brand(action.brand_id):
                raise CategoryNotFoundError(action.brand_id)
            return Browsing(action.brand_id)

        if isinstance(action, DrillInto):
            if self._hierarchy is not None and action.category_id not in self._hierarchy:
                raise CategoryNotFoundError(action.category_id)
            return ViewingProducts(action.category_id)

        if isinstance(action, Search):
            term = action.term.strip()
            if term:
                return Searching(term)
            return Browsing(self._default_brand_id())

        if isinstance(action, ClearSearch):
            return Browsing(self._default_brand_id())

        if isinstance(action, BackToCategories):
            last = self._last_brand_id
            if last is not None and (self._hierarchy is None or self._hierarchy.is_brand(last)):
                return Browsing(last)
            return Browsing(self._default_brand_id())

        raise TypeError(f"Unsupported navigation action: {action!r}")

    def _default_brand_id(self) -> str | None:
        return self._hierarchy.first_brand_id if self._hierarchy is not None else None

    # ------------------------------------------------------------------
    # State changes
    # ------------------------------------------------------------------

    def _set(self, state: NavigationState, action: NavigationAction | None) -> None:
        """Move to a state, recording the transition and re-serializing.

        Moving to the current state is a no-op.
        """
        if state == self._state:
            return

        transition = NavigationTransition(
            from_state=self._state,
            to_state=state,
            action=action,
        )
        self.history.append(transition)
        self._state = state
        # Fallback views shown while a target is pending do not count as a selection
        if (
            self._pending is None
            and isinstance(state, Browsing)
            and state.selected_brand_id is not None
        ):
            self._last_brand_id = state.selected_brand_id
        self._reserialize()

        logger.debug(
            "Navigation state changed",
            from_view=transition.from_state.view.value,
            to_view=state.view.value,
            action=action.kind.value if action is not None else "restore",
        )

    def _reserialize(self) -> None:
        """Re-derive the query; a pending target is kept so it survives a round trip."""
        shown = self._pending if self._pending is not None else self._state
        self._query = serialize(shown, self._passthrough, self._last_brand_id)
