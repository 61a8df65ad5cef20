"""Shared repository pieces: query builder and DuckDB cache backend."""

from app.repositories.common.cache import DuckDBCacheBackend
from app.repositories.common.query import (
    Comparison,
    Filter,
    FilterColumn,
    FilterSpec,
    Page,
    PreparedPredicate,
    PreparedQuery,
    QueryBuilder,
    SortOptions,
    build_filter_spec,
    escape_like,
)

__all__ = [
    # Cache
    "DuckDBCacheBackend",
    # Query
    "Comparison",
    "Filter",
    "FilterColumn",
    "FilterSpec",
    "Page",
    "PreparedPredicate",
    "PreparedQuery",
    "QueryBuilder",
    "SortOptions",
    "build_filter_spec",
    "escape_like",
]
