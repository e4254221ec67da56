"""Engine Layer - Search Orchestration

This module provides the core search engine layer:
- SearchOrchestrator: Main entry point for search execution
- QueryBuilder: Text/regex query construction
- SearchExecutor: Aggregation with regex fallback
- FallbackCache: Remote → local two-tier cache adapter
- SearchStrategy: Text/regex decision logic
"""

from .cache_adapter import FallbackCache, create_search_cache
from .executor import SearchExecutor, build_fallback_filter, build_search_pipeline
from .orchestrator import PageRequest, SearchOrchestrator
from .query_builder import BuiltQuery, QueryBuilder, build_base_filter, build_search_filters
from .result import SearchPage
from .strategy import SearchStrategy, resolve_sort, select_strategy

__all__ = [
    "SearchOrchestrator",
    "PageRequest",
    "QueryBuilder",
    "BuiltQuery",
    "build_base_filter",
    "build_search_filters",
    "SearchExecutor",
    "build_search_pipeline",
    "build_fallback_filter",
    "SearchPage",
    "FallbackCache",
    "create_search_cache",
    "SearchStrategy",
    "select_strategy",
    "resolve_sort",
]
