"""Search Orchestrator - 검색 파이프라인 진입점

Coordinates the search pipeline:
1. Base filter + cache key
2. Cache lookup
3. Query build (text / regex)
4. Execution (aggregate / fallback)
5. Response assembly + cache store
"""

from typing import Any, Optional, Protocol

from src.core.config import settings
from src.core.exceptions import InvalidQueryException
from src.core.logging import logger, sanitize_for_log
from src.schemas.search_schema import SearchCacheKey, SearchFilters
from src.utils.hash_utils import generate_search_cache_key
from src.utils.text_utils import normalize_search_term

from .query_builder import build_base_filter


class PageRequest(Protocol):
    """페이지네이션 협력자 인터페이스"""

    skip: int
    limit: int
    page: int

    def build_links(self, total: int) -> dict[str, Any]:
        ...


class SearchOrchestrator:
    """상품 검색 오케스트레이터

    Cache → QueryBuilder → SearchExecutor 순서로 실행합니다.
    같은 키로 동시에 들어온 요청은 둘 다 미스 후 같은 값을 기록할 수 있으며,
    캐시 값은 파생 데이터이므로 마지막 기록이 남습니다.
    """

    def __init__(
        self,
        cache,
        query_builder,
        executor,
        text_index_probe,
        cache_ttl: Optional[int] = None,
    ):
        """
        Args:
            cache: FallbackCache (async get/set)
            query_builder: QueryBuilder
            executor: SearchExecutor
            text_index_probe: supports_native_text_search() 구현체
            cache_ttl: 검색 결과 캐시 TTL (초, 기본 300)
        """
        if cache is None:
            raise ValueError("cache must not be None")
        if query_builder is None:
            raise ValueError("query_builder must not be None")
        if executor is None:
            raise ValueError("executor must not be None")
        if text_index_probe is None:
            raise ValueError("text_index_probe must not be None")

        self.cache = cache
        self.query_builder = query_builder
        self.executor = executor
        self.text_index_probe = text_index_probe
        self.cache_ttl = cache_ttl or settings.search_cache_ttl

    @staticmethod
    def build_cache_key(
        term: str,
        filters: SearchFilters,
        sort: Optional[str],
        pagination: PageRequest,
    ) -> str:
        """요청 형태로 결정적 캐시 키 생성"""
        key = SearchCacheKey(
            term=term,
            page=pagination.page,
            limit=pagination.limit,
            filters=filters,
            sort=sort,
        )
        return generate_search_cache_key(key.model_dump())

    async def search(
        self,
        term: Optional[str],
        filters: SearchFilters,
        sort: Optional[str],
        pagination: PageRequest,
    ) -> dict[str, Any]:
        """상품 검색

        Args:
            term: 원본 검색어 (q)
            filters: 적용된 필터
            sort: 사용자 지정 정렬
            pagination: skip/limit/page + build_links

        Returns:
            {success, products, query, pagination} (+ cached: True)

        Raises:
            InvalidQueryException: 검색어 없음/공백
        """
        trimmed = normalize_search_term(term)
        if not trimmed:
            raise InvalidQueryException('Search query parameter "q" is required')

        base_filter = build_base_filter(filters)
        cache_key = self.build_cache_key(trimmed, filters, sort, pagination)

        cached = await self.cache.get(cache_key)
        if cached:
            logger.debug(f"Search cache hit: query='{sanitize_for_log(trimmed)}', page={pagination.page}")
            return {**cached, "cached": True}

        supports_text = await self.text_index_probe.supports_native_text_search()
        query = await self.query_builder.build(trimmed, base_filter, supports_text, sort)
        page = await self.executor.execute(query.filter, query.sort, pagination.skip, pagination.limit)

        result: dict[str, Any] = {
            "success": True,
            "products": page.items,
            "query": trimmed,
            "pagination": pagination.build_links(page.total),
        }

        await self.cache.set(cache_key, result, self.cache_ttl)

        logger.info(
            f"Search completed: query='{sanitize_for_log(trimmed)}', strategy={query.strategy.value}, "
            f"fallback={page.used_fallback}, results={len(page.items)}, total={page.total}"
        )
        return result
