"""Tests for multi-entity catalog search."""

import pytest

from storefront.catalog.hierarchy import HierarchyBuilder
from storefront.catalog.models import Category, Product
from storefront.catalog.normalizer import normalize_categories, normalize_products
from storefront.catalog.search import CatalogSearchEngine, SearchCorpus, normalize_term


@pytest.fixture
def engine(categories: list[Category], products: list[Product]) -> CatalogSearchEngine:
    """Create engine over the sample catalog."""
    hierarchy = HierarchyBuilder().build(categories)
    return CatalogSearchEngine(SearchCorpus.from_hierarchy(hierarchy, products))


class TestCatalogSearchEngine:
    """Tests for CatalogSearchEngine.search."""

    @pytest.mark.parametrize("term", ["", "   ", None])
    def test_empty_term_yields_empty_buckets(self, engine: CatalogSearchEngine, term: str | None) -> None:
        """An empty term is a valid query with no results."""
        results = engine.search(term)
        assert results.brands == []
        assert results.motorcycles == []
        assert results.products == []
        assert results.is_empty

    def test_minimal_example(self) -> None:
        """Brand and product terms land in their own buckets."""
        hierarchy = HierarchyBuilder().build(
            normalize_categories(
                [{"id": "1", "name": "Honda", "parentId": None},
                 {"id": "2", "name": "CBR150", "parentId": "1"}]
            )
        )
        products = normalize_products([{"id": "10", "name": "Brake Pad", "category": "2"}])
        engine = CatalogSearchEngine(SearchCorpus.from_hierarchy(hierarchy, products))

        honda = engine.search("honda")
        assert [b.name for b in honda.brands] == ["Honda"]
        assert honda.motorcycles == [] and honda.products == []

        brake = engine.search("brake")
        assert [p.name for p in brake.products] == ["Brake Pad"]
        assert brake.brands == [] and brake.motorcycles == []

    def test_case_and_whitespace_insensitive(self, engine: CatalogSearchEngine) -> None:
        """Terms are trimmed and lower-cased."""
        results = engine.search("  YAMAHA ")
        assert results.term == "yamaha"
        assert [b.id for b in results.brands] == ["4"]

    def test_description_matches(self, engine: CatalogSearchEngine) -> None:
        """Descriptions are searched for brands and motorcycles."""
        assert [b.name for b in engine.search("japanese").brands] == ["Honda"]
        assert [m.name for m in engine.search("scooter").motorcycles] == ["NMAX"]

    def test_short_description_matches_products(self, engine: CatalogSearchEngine) -> None:
        """Products also match on their short description."""
        results = engine.search("single-cylinder")
        assert [p.name for p in results.products] == ["Oil Filter"]

    def test_single_character_term(self, engine: CatalogSearchEngine) -> None:
        """One-character terms are searched."""
        results = engine.search("r")
        assert [m.name for m in results.motorcycles] == ["CB150R", "CBR150", "NMAX", "R15"]

    def test_motorcycles_keep_parent(self, engine: CatalogSearchEngine) -> None:
        """Motorcycle matches are annotated with their brand."""
        results = engine.search("nmax")
        assert [(m.name, m.parent_id, m.parent_name) for m in results.motorcycles] == [
            ("NMAX", "4", "Yamaha")
        ]

    def test_total(self, engine: CatalogSearchEngine) -> None:
        """Total is the sum of bucket sizes."""
        results = engine.search("honda")
        assert results.total == len(results.brands) + len(results.motorcycles) + len(results.products)
        assert results.total == 2

    @pytest.mark.parametrize(
        "shorter,longer",
        [("c", "cb"), ("cb", "cbr"), ("a", "ai"), ("o", "oil"), ("r", "r1")],
    )
    def test_monotonic(self, engine: CatalogSearchEngine, shorter: str, longer: str) -> None:
        """Extending a term never adds matches."""
        broad = engine.search(shorter)
        narrow = engine.search(longer)
        assert {b.id for b in narrow.brands} <= {b.id for b in broad.brands}
        assert {m.id for m in narrow.motorcycles} <= {m.id for m in broad.motorcycles}
        assert {p.id for p in narrow.products} <= {p.id for p in broad.products}

    def test_empty_corpus(self) -> None:
        """Searching an empty corpus returns empty buckets."""
        assert CatalogSearchEngine().search("honda").is_empty


def test_normalize_term() -> None:
    """Terms are stripped and lower-cased."""
    assert normalize_term("  Brake PAD ") == "brake pad"
    assert normalize_term(None) == ""
