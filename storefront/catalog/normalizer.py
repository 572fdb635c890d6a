"""Entity normalizer for raw provider records.

The data provider is loose about record shapes: ids arrive as ``id`` or
``_id``, parents as ``parentId``, ``parent`` or an embedded
``parentCategory`` object, counts may be missing or strings. Everything
is coerced here so the rest of the catalog only sees canonical entities.
"""

import re
from collections.abc import Iterable
from decimal import Decimal, InvalidOperation
from typing import Any

import structlog

from storefront.catalog.models import (
    Category,
    CategoryRef,
    InlineCategory,
    Product,
    ProductCategory,
)
from storefront.errors import MalformedProviderResponse, ProviderError

logger = structlog.get_logger()

_SLUG_STRIP = re.compile(r"[^\w-]")
_SLUG_SPACES = re.compile(r"\s+")


def slugify(name: str) -> str:
    """Derive a URL-friendly identifier from a display name.

    Args:
        name: Display name.

    Returns:
        Lower-cased slug (may be empty for names without word characters).
    """
    return _SLUG_STRIP.sub("", _SLUG_SPACES.sub("-", name.strip().lower()))


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _ref_id(value: Any) -> str | None:
    """Extract an id from a reference that may be a scalar or an embedded object."""
    if isinstance(value, dict):
        return _text(value.get("_id") or value.get("id"))
    return _text(value)


def _non_negative_int(value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return 0
    return max(number, 0)


def _price(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return Decimal("0")


# ============================================================================
# Envelopes
# ============================================================================


def unwrap_records(payload: Any, key: str) -> list[dict[str, Any]]:
    """Extract the record list from a provider response envelope.

    Accepted shapes: a bare list, ``{"<key>": [...]}``, ``{"data": [...]}``
    and ``{"data": {"<key>": [...]}}``, each optionally carrying
    ``success``.

    Args:
        payload: Decoded JSON body.
        key: Collection name ("categories" or "products").

    Returns:
        Dict records; non-dict entries are skipped.

    Raises:
        ProviderError: If the provider reported ``success: false``.
        MalformedProviderResponse: If no record list can be found.
    """
    records: Any = payload
    if isinstance(payload, dict):
        if payload.get("success") is False:
            raise ProviderError(
                f"fetch_{key}",
                str(payload.get("message") or "Provider reported failure"),
            )
        data = payload.get("data")
        if isinstance(payload.get(key), list):
            records = payload[key]
        elif isinstance(data, list):
            records = data
        elif isinstance(data, dict) and isinstance(data.get(key), list):
            records = data[key]

    if not isinstance(records, list):
        raise MalformedProviderResponse(key, type(records).__name__)

    return [r for r in records if isinstance(r, dict)]


# ============================================================================
# Categories
# ============================================================================


def normalize_category(raw: dict[str, Any]) -> Category | None:
    """Coerce a raw category record into a Category.

    Args:
        raw: Provider record.

    Returns:
        Category, or None if the record has neither id nor name.
    """
    name = _text(raw.get("name"))
    category_id = (
        _text(raw.get("id"))
        or _text(raw.get("_id"))
        or _text(raw.get("slug"))
        or (slugify(name) if name else None)
    )
    if not category_id:
        logger.debug("Dropping category record without identity", keys=sorted(raw))
        return None

    parent_id = None
    for parent_key in ("parentId", "parent", "parentCategory"):
        parent_id = _ref_id(raw.get(parent_key))
        if parent_id:
            break

    return Category(
        id=category_id,
        name=name or "Unnamed Category",
        description=_text(raw.get("description")) or "",
        parent_id=parent_id,
        product_count=_non_negative_int(raw.get("productCount", raw.get("count"))),
        slug=_text(raw.get("slug")),
        image=_text(raw.get("image") or raw.get("imageUrl")),
    )


def normalize_categories(records: Iterable[dict[str, Any]]) -> list[Category]:
    """Normalize category records, dropping unusable ones.

    Args:
        records: Raw provider records.

    Returns:
        Categories in input order.
    """
    categories = []
    for raw in records:
        category = normalize_category(raw)
        if category is not None:
            categories.append(category)
    return categories


# ============================================================================
# Products
# ============================================================================


def _product_category(value: Any) -> ProductCategory | None:
    if isinstance(value, dict):
        embedded = normalize_category(value)
        if embedded is None:
            return None
        return InlineCategory(category=embedded)
    category_id = _text(value)
    if category_id is None:
        return None
    return CategoryRef(id=category_id)


def _images(raw: dict[str, Any]) -> list[str]:
    images = raw.get("images")
    if isinstance(images, list):
        return [str(i) for i in images if _text(i)]
    for key in ("image", "imageUrl", "thumbnail"):
        single = _text(raw.get(key))
        if single:
            return [single]
    return []


def normalize_product(raw: dict[str, Any]) -> Product | None:
    """Coerce a raw product record into a Product.

    Args:
        raw: Provider record.

    Returns:
        Product, or None if the record has no id.
    """
    product_id = _text(raw.get("id")) or _text(raw.get("_id"))
    if product_id is None:
        logger.debug("Dropping product record without id", keys=sorted(raw))
        return None

    return Product(
        id=product_id,
        name=_text(raw.get("name")) or "Unnamed Product",
        description=_text(raw.get("description")) or "",
        short_description=_text(raw.get("shortDescription")),
        category=_product_category(raw.get("category")),
        price=_price(raw.get("price")),
        images=_images(raw),
    )


def normalize_products(records: Iterable[dict[str, Any]]) -> list[Product]:
    """Normalize product records, dropping unusable ones.

    Args:
        records: Raw provider records.

    Returns:
        Products in input order.
    """
    products = []
    for raw in records:
        product = normalize_product(raw)
        if product is not None:
            products.append(product)
    return products
