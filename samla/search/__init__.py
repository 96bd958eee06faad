"""
Catalog search: prefix filters, SQL compilation and fuzzy refinement.
"""
from .matching import fuzzy_match, subsequence_match
from .search_engine import (
    SEARCH_LIMIT,
    FilterKind,
    SearchEngine,
    SearchFilter,
    SearchQueryParser,
    SearchResult,
    SortKey,
)

__all__ = [
    "SEARCH_LIMIT",
    "FilterKind",
    "SearchEngine",
    "SearchFilter",
    "SearchQueryParser",
    "SearchResult",
    "SortKey",
    "fuzzy_match",
    "subsequence_match",
]
