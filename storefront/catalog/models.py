"""Catalog entities.

Canonical shapes for categories (brands and motorcycle models) and
products after normalization of raw provider records.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Literal


@dataclass
class Category:
    """A catalog category: a brand (root) or a motorcycle model (child).

    Attributes:
        id: Stable category identifier.
        name: Display name, used for matching and sorting.
        description: Free text, used for matching.
        parent_id: ID of the parent category as received (None for roots).
        product_count: Number of products, default sort key for brands.
        slug: URL-friendly name, if the provider sent one.
        image: Opaque image reference, passed through untouched.
        children: Child categories, filled in by the hierarchy builder only.
    """

    id: str
    name: str
    description: str = ""
    parent_id: str | None = None
    product_count: int = 0
    slug: str | None = None
    image: str | None = None
    children: list["Category"] = field(default_factory=list, repr=False)

    def to_dict(self, include_children: bool = True) -> dict:
        """Convert to dictionary.

        Args:
            include_children: Whether to serialize children recursively.

        Returns:
            Dictionary representation.
        """
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "parent_id": self.parent_id,
            "product_count": self.product_count,
            "slug": self.slug,
            "image": self.image,
        }
        if include_children:
            data["children"] = [c.to_dict() for c in self.children]
        return data


@dataclass(frozen=True)
class CategoryRef:
    """Product category given as a bare category ID."""

    id: str
    kind: Literal["ref"] = "ref"


@dataclass(frozen=True)
class InlineCategory:
    """Product category given as an embedded (possibly partial) category."""

    category: Category
    kind: Literal["inline"] = "inline"

    @property
    def id(self) -> str:
        """ID of the embedded category."""
        return self.category.id


ProductCategory = CategoryRef | InlineCategory


@dataclass
class Product:
    """A sellable item.

    Attributes:
        id: Product identifier.
        name: Display name.
        description: Long description.
        short_description: Optional teaser text, also searched.
        category: Category reference resolved at normalization time.
        price: Unit price in major currency units.
        images: Ordered image references.
    """

    id: str
    name: str
    description: str = ""
    short_description: str | None = None
    category: ProductCategory | None = None
    price: Decimal = Decimal("0")
    images: list[str] = field(default_factory=list)

    @property
    def category_id(self) -> str | None:
        """ID of the product's category, whichever form it arrived in."""
        return self.category.id if self.category is not None else None

    def to_dict(self) -> dict:
        """Convert to dictionary.

        Returns:
            Dictionary representation.
        """
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "short_description": self.short_description,
            "category_id": self.category_id,
            "price": str(self.price),
            "images": list(self.images),
        }


@dataclass(frozen=True)
class Motorcycle:
    """A motorcycle model annotated with its brand, as used by search."""

    category: Category
    parent_id: str
    parent_name: str

    @property
    def id(self) -> str:
        """ID of the motorcycle category."""
        return self.category.id

    @property
    def name(self) -> str:
        """Display name of the motorcycle."""
        return self.category.name

    def to_dict(self) -> dict:
        data = self.category.to_dict(include_children=False)
        data["parent_id"] = self.parent_id
        data["parent_name"] = self.parent_name
        return data
