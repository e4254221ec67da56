"""Query Builder - 검색어 + 필터 → MongoDB 필터/정렬

$text 경로와 정규식 폴백 경로 중 하나를 골라 최종 필터를 만듭니다.
정규식 경로에서는 브랜드/카테고리 이름 매칭 결과도 OR 조건으로 합칩니다.
"""

import asyncio
import math
from dataclasses import dataclass
from typing import Any, Awaitable, Optional

from bson import ObjectId

from src.core.logging import logger, sanitize_for_log
from src.repositories.models import VISIBILITY_FILTER
from src.schemas.search_schema import SearchFilters
from src.utils.text_utils import escape_regex, split_words

from .strategy import SearchStrategy, resolve_sort, select_strategy


@dataclass
class BuiltQuery:
    """Query Builder 결과

    Attributes:
        filter: MongoDB 필터
        sort: 정렬 (키 순서가 우선순위)
        strategy: 선택된 검색 전략
        term: 정리된 검색어
    """

    filter: dict[str, Any]
    sort: dict[str, Any]
    strategy: SearchStrategy
    term: str


def _parse_object_id(value: Optional[str]) -> Optional[str]:
    if value and ObjectId.is_valid(value):
        return str(value)
    return None


def _parse_price(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(price) or math.isinf(price):
        return None
    return price


def build_search_filters(
    category: Optional[str] = None,
    brand: Optional[str] = None,
    min_price: Any = None,
    max_price: Any = None,
) -> SearchFilters:
    """쿼리 파라미터 → 적용 가능한 필터

    유효하지 않은 ObjectId/가격은 거부하지 않고 조용히 무시합니다.
    """
    return SearchFilters(
        category=_parse_object_id(category),
        brand=_parse_object_id(brand),
        min_price=_parse_price(min_price),
        max_price=_parse_price(max_price),
    )


def build_base_filter(filters: SearchFilters) -> dict[str, Any]:
    """노출 조건 + 선택 필터로 기본 필터 생성"""
    base: dict[str, Any] = dict(VISIBILITY_FILTER)

    if filters.category:
        base["category"] = ObjectId(filters.category)
    if filters.brand:
        base["brand"] = ObjectId(filters.brand)

    if filters.min_price is not None or filters.max_price is not None:
        price: dict[str, float] = {}
        if filters.min_price is not None:
            price["$gte"] = filters.min_price
        if filters.max_price is not None:
            price["$lte"] = filters.max_price
        base["price"] = price

    return base


def build_regex_conditions(term: str) -> list[dict[str, Any]]:
    """제목/설명 정규식 조건

    - 단어 1개: 제목 "시작" + 제목 "포함"
    - 단어 여러 개: 제목에 아무 단어나 포함
    - 설명: 아무 단어나 포함
    """
    words = [escape_regex(w) for w in split_words(term)]
    if not words:
        return []

    word_pattern = "|".join(words)
    conditions: list[dict[str, Any]] = []

    if len(words) == 1:
        conditions.append({"title": {"$regex": f"^{words[0]}", "$options": "i"}})
        conditions.append({"title": {"$regex": words[0], "$options": "i"}})
    else:
        conditions.append({"title": {"$regex": word_pattern, "$options": "i"}})

    conditions.append({"description": {"$regex": word_pattern, "$options": "i"}})
    return conditions


class QueryBuilder:
    """검색 쿼리 생성기 (상태 없음)

    Args:
        catalog_repository: find_active_brand_ids/find_active_category_ids 구현체
    """

    def __init__(self, catalog_repository):
        if catalog_repository is None:
            raise ValueError("catalog_repository must not be None")
        self.catalog = catalog_repository

    async def build(
        self,
        term: str,
        base_filter: dict[str, Any],
        supports_native_text_search: bool,
        sort: Optional[str] = None,
    ) -> BuiltQuery:
        """검색 쿼리 생성

        Args:
            term: 검색어 (내부에서 trim)
            base_filter: 노출 조건 + 선택 필터
            supports_native_text_search: 텍스트 인덱스 존재 여부
            sort: 사용자 지정 정렬 (newest | priceAsc | priceDesc | rating)

        Returns:
            BuiltQuery
        """
        trimmed = (term or "").strip()
        strategy = select_strategy(trimmed, supports_native_text_search)

        if strategy == SearchStrategy.NONE:
            return BuiltQuery(
                filter=dict(base_filter),
                sort=resolve_sort(strategy, sort),
                strategy=strategy,
                term=trimmed,
            )

        if strategy == SearchStrategy.TEXT:
            return BuiltQuery(
                filter={**base_filter, "$text": {"$search": trimmed}},
                sort=resolve_sort(strategy, sort),
                strategy=strategy,
                term=trimmed,
            )

        conditions = build_regex_conditions(trimmed)
        if not conditions:
            return BuiltQuery(
                filter=dict(base_filter),
                sort=resolve_sort(SearchStrategy.NONE, sort),
                strategy=SearchStrategy.NONE,
                term=trimmed,
            )

        pattern = escape_regex(trimmed)
        brand_ids, category_ids = await asyncio.gather(
            self._find_ids(self.catalog.find_active_brand_ids(pattern), "brands"),
            self._find_ids(self.catalog.find_active_category_ids(pattern), "categories"),
        )

        if brand_ids:
            conditions.append({"brand": {"$in": brand_ids}})
        if category_ids:
            conditions.append({"category": {"$in": category_ids}})

        logger.debug(
            f"Regex search: term='{sanitize_for_log(trimmed)}', "
            f"brands={len(brand_ids)}, categories={len(category_ids)}"
        )

        return BuiltQuery(
            filter={**base_filter, "$or": conditions},
            sort=resolve_sort(strategy, sort),
            strategy=strategy,
            term=trimmed,
        )

    @staticmethod
    async def _find_ids(lookup: Awaitable[list[Any]], label: str) -> list[Any]:
        """이름 매칭 조회 (실패 시 빈 목록)"""
        try:
            return list(await lookup)
        except Exception as e:
            logger.warning(f"Error searching {label}: {e}")
            return []
