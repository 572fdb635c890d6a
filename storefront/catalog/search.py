"""Multi-entity catalog search.

Answers a free-text query against brands, motorcycle models and
products at once with plain substring containment. Matches keep the
corpus order; there is no relevance ranking.

Normalization is ``str.strip()`` followed by ``str.lower()`` on both the
term and the searched fields. No accent folding or Unicode case folding
beyond that is applied.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from storefront.catalog.hierarchy import Hierarchy
from storefront.catalog.models import Category, Motorcycle, Product


def normalize_term(term: str | None) -> str:
    """Normalize a search term.

    Args:
        term: Raw user input.

    Returns:
        Trimmed, lower-cased term (empty string for None).
    """
    return (term or "").strip().lower()


def _contains(term: str, fields: Iterable[str | None]) -> bool:
    return any(term in value.lower() for value in fields if value)


@dataclass
class SearchResults:
    """Three independent result buckets.

    Attributes:
        term: Normalized term the results were computed for.
        brands: Matching root categories.
        motorcycles: Matching child categories with parent annotation.
        products: Matching products.
    """

    term: str = ""
    brands: list[Category] = field(default_factory=list)
    motorcycles: list[Motorcycle] = field(default_factory=list)
    products: list[Product] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Total number of matches across buckets."""
        return len(self.brands) + len(self.motorcycles) + len(self.products)

    @property
    def is_empty(self) -> bool:
        """Check whether nothing matched."""
        return self.total == 0

    def to_dict(self) -> dict:
        return {
            "term": self.term,
            "brands": [b.to_dict(include_children=False) for b in self.brands],
            "motorcycles": [m.to_dict() for m in self.motorcycles],
            "products": [p.to_dict() for p in self.products],
            "total": self.total,
        }


@dataclass
class SearchCorpus:
    """In-memory collections searched by the engine.

    Attributes:
        brands: Root categories in hierarchy order.
        motorcycles: Child categories in pre-order.
        products: Products in catalog load order.
    """

    brands: list[Category] = field(default_factory=list)
    motorcycles: list[Motorcycle] = field(default_factory=list)
    products: list[Product] = field(default_factory=list)

    @classmethod
    def from_hierarchy(
        cls,
        hierarchy: Hierarchy | None,
        products: Iterable[Product] = (),
    ) -> "SearchCorpus":
        """Create corpus from a built hierarchy and a product list.

        Args:
            hierarchy: Published hierarchy, or None before the first load.
            products: Products in load order.

        Returns:
            SearchCorpus instance.
        """
        if hierarchy is None:
            return cls(products=list(products))
        return cls(
            brands=list(hierarchy.roots),
            motorcycles=hierarchy.motorcycles(),
            products=list(products),
        )


class CatalogSearchEngine:
    """Substring search over a read-only corpus.

    Example usage:
        engine = CatalogSearchEngine(SearchCorpus.from_hierarchy(hierarchy, products))
        results = engine.search("brake")
        if results.is_empty:
            ...
    """

    def __init__(self, corpus: SearchCorpus | None = None) -> None:
        """Initialize engine.

        Args:
            corpus: Collections to search; empty when omitted.
        """
        self.corpus = corpus or SearchCorpus()

    def search(self, term: str | None) -> SearchResults:
        """Search all three collections.

        An empty term (after trimming) is a valid "no query" and yields
        empty buckets.

        Args:
            term: Raw search term.

        Returns:
            SearchResults in corpus order.
        """
        needle = normalize_term(term)
        if not needle:
            return SearchResults()

        return SearchResults(
            term=needle,
            brands=[
                b for b in self.corpus.brands
                if _contains(needle, (b.name, b.description))
            ],
            motorcycles=[
                m for m in self.corpus.motorcycles
                if _contains(needle, (m.category.name, m.category.description))
            ],
            products=[
                p for p in self.corpus.products
                if _contains(needle, (p.name, p.description, p.short_description))
            ],
        )
