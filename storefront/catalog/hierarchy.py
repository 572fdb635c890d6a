"""Category hierarchy builder.

Turns the provider's flat category list into the brand -> motorcycle
forest shown by the browser:

    Honda (120 products)
      CB150R
      CBR150
    Yamaha (80 products)
      NMAX
      R15

Parent references come from untrusted data. A reference that does not
resolve (missing id, self-reference, cycle) promotes the category to a
root instead of dropping it.
"""

import unicodedata
from collections.abc import Iterable
from dataclasses import dataclass, field, replace

import structlog

from storefront.catalog.models import Category, Motorcycle

logger = structlog.get_logger()


def name_sort_key(name: str) -> str:
    """Collation key approximating a locale-aware, accent-insensitive compare.

    Args:
        name: Display name.

    Returns:
        Case-folded name with combining marks removed.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


@dataclass
class Hierarchy:
    """Published result of a hierarchy build.

    Attributes:
        roots: Brands, most products first.
        flattened: Pre-order traversal of the forest.
        by_id: Every node by category ID.
        parents: Parent node by child category ID (roots are absent).
    """

    roots: list[Category] = field(default_factory=list)
    flattened: list[Category] = field(default_factory=list)
    by_id: dict[str, Category] = field(default_factory=dict)
    parents: dict[str, Category] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.by_id)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self.by_id

    def get(self, category_id: str) -> Category | None:
        """Get a node by ID.

        Args:
            category_id: Category ID.

        Returns:
            Category if present, None otherwise.
        """
        return self.by_id.get(category_id)

    def parent_of(self, category_id: str) -> Category | None:
        """Get the resolved parent of a category.

        Args:
            category_id: Category ID.

        Returns:
            Parent node, or None for roots and unknown IDs.
        """
        return self.parents.get(category_id)

    def is_brand(self, category_id: str) -> bool:
        """Check whether the ID names a root category."""
        return category_id in self.by_id and category_id not in self.parents

    @property
    def first_brand_id(self) -> str | None:
        """ID of the default brand (first root), if any."""
        return self.roots[0].id if self.roots else None

    def motorcycles(self) -> list[Motorcycle]:
        """Non-root categories in pre-order, annotated with their parent.

        Returns:
            Motorcycle entries in flattened order.
        """
        return [
            Motorcycle(category=node, parent_id=parent.id, parent_name=parent.name)
            for node in self.flattened
            if (parent := self.parents.get(node.id)) is not None
        ]


class HierarchyBuilder:
    """Builds a category forest from a flat category list.

    Example usage:
        hierarchy = HierarchyBuilder().build(categories)
        for brand in hierarchy.roots:
            print(brand.name, [m.name for m in brand.children])
    """

    def build(self, categories: Iterable[Category]) -> Hierarchy:
        """Build the forest.

        Input categories are not modified; every node in the result is a
        shallow copy with its own children list.

        Args:
            categories: Flat categories in provider order.

        Returns:
            Hierarchy with roots, pre-order flattening and lookups.
        """
        # First pass: copy every category so any id resolves regardless of order
        by_id: dict[str, Category] = {}
        for category in categories:
            if category.id in by_id:
                logger.warning("Duplicate category id ignored", category_id=category.id)
                continue
            by_id[category.id] = replace(category, children=[])

        # Second pass: attach to parents, promote unresolvable references
        roots: list[Category] = []
        parents: dict[str, Category] = {}
        for node in by_id.values():
            parent = self._resolve_parent(node, by_id)
            if parent is None:
                roots.append(node)
            else:
                parent.children.append(node)
                parents[node.id] = parent

        for node in by_id.values():
            node.children.sort(key=lambda c: name_sort_key(c.name))

        # sorted() is stable: equal counts keep provider order
        roots = sorted(roots, key=lambda c: -c.product_count)

        hierarchy = Hierarchy(
            roots=roots,
            flattened=self._flatten(roots),
            by_id=by_id,
            parents=parents,
        )
        logger.debug(
            "Category hierarchy built",
            categories=len(by_id),
            brands=len(roots),
        )
        return hierarchy

    def _resolve_parent(
        self,
        node: Category,
        by_id: dict[str, Category],
    ) -> Category | None:
        """Find the node's parent, or None if it must be treated as a root."""
        if node.parent_id is None:
            return None

        if node.parent_id == node.id:
            logger.info("Self-referencing category promoted to root", category_id=node.id)
            return None

        parent = by_id.get(node.parent_id)
        if parent is None:
            logger.info(
                "Dangling parent reference promoted to root",
                category_id=node.id,
                parent_id=node.parent_id,
            )
            return None

        # Walk the ancestor chain; coming back to node means a cycle
        seen = {node.id}
        ancestor: Category | None = parent
        while ancestor is not None and ancestor.id not in seen:
            seen.add(ancestor.id)
            if ancestor.parent_id is None or ancestor.parent_id == ancestor.id:
                break
            ancestor = by_id.get(ancestor.parent_id)
        if ancestor is not None and ancestor.id == node.id:
            logger.info(
                "Cyclic parent reference promoted to root",
                category_id=node.id,
                parent_id=node.parent_id,
            )
            return None

        return parent

    @staticmethod
    def _flatten(roots: list[Category]) -> list[Category]:
        """Pre-order traversal with an explicit stack."""
        flattened: list[Category] = []
        stack = list(reversed(roots))
        while stack:
            node = stack.pop()
            flattened.append(node)
            stack.extend(reversed(node.children))
        return flattened
