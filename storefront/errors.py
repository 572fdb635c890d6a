"""Storefront exceptions.

Recoverable conditions (dangling parent references, empty corpora,
provider outages, restoration misses) are handled where they occur and
never reach callers. The classes here cover what does propagate.
"""

from typing import Any


class StorefrontError(Exception):
    """Base class for all storefront exceptions.

    All storefront errors inherit from this class so the HTTP layer can
    map them to a consistent error envelope.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize storefront error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Data Provider Errors
# ============================================================================


class ProviderError(StorefrontError):
    """Raised when the catalog data provider cannot be reached or reports failure.

    The catalog store recovers from this by keeping last-known-good data
    or falling back to the placeholder dataset.
    """

    def __init__(
        self,
        operation: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        """Initialize provider error.

        Args:
            operation: Provider operation that failed (e.g., "fetch_categories").
            message: Error description.
            status_code: HTTP status code, if the provider answered.
        """
        super().__init__(
            f"[{operation}] {message}",
            details={"operation": operation, "status_code": status_code},
        )
        self.operation = operation
        self.status_code = status_code


class MalformedProviderResponse(StorefrontError):
    """Raised when a provider payload does not contain a list of records.

    Unlike ProviderError this is not recovered: it signals a contract
    break with the provider.
    """

    def __init__(self, key: str, payload_type: str) -> None:
        """Initialize malformed response error.

        Args:
            key: Record collection that was expected (e.g., "categories").
            payload_type: Type name of what was received instead.
        """
        super().__init__(
            f"Expected a list of {key}, got {payload_type}",
            details={"key": key, "payload_type": payload_type},
        )


# ============================================================================
# Navigation Errors
# ============================================================================


class CategoryNotFoundError(StorefrontError):
    """Raised when a user action references a category that is not loaded."""

    def __init__(self, category_id: str) -> None:
        """Initialize category not found error.

        Args:
            category_id: The unknown category ID.
        """
        super().__init__(
            f"Category {category_id} not found",
            details={"category_id": category_id},
        )


class InvalidNavigationActionError(StorefrontError):
    """Raised when an action is not accepted in the current navigation view."""

    def __init__(
        self,
        view: str,
        action: str,
        allowed_actions: list[str] | None = None,
    ) -> None:
        """Initialize invalid navigation action error.

        Args:
            view: Current navigation view.
            action: Rejected action kind.
            allowed_actions: Action kinds the current view accepts.
        """
        allowed = allowed_actions or []
        super().__init__(
            f"Cannot apply '{action}' while in '{view}'. Allowed actions: {allowed}",
            details={
                "view": view,
                "action": action,
                "allowed_actions": allowed,
            },
        )
