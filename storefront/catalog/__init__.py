"""Storefront catalog.

Provides normalization of provider records, the brand -> motorcycle
hierarchy, multi-entity search and the per-page catalog store.
"""

from storefront.catalog.hierarchy import Hierarchy, HierarchyBuilder
from storefront.catalog.models import (
    Category,
    CategoryRef,
    InlineCategory,
    Motorcycle,
    Product,
)
from storefront.catalog.search import CatalogSearchEngine, SearchCorpus, SearchResults
from storefront.catalog.store import CatalogStore

__all__ = [
    # Models
    "Category",
    "CategoryRef",
    "InlineCategory",
    "Motorcycle",
    "Product",
    # Hierarchy
    "Hierarchy",
    "HierarchyBuilder",
    # Search
    "CatalogSearchEngine",
    "SearchCorpus",
    "SearchResults",
    # Store
    "CatalogStore",
]
