"""Search Strategy - Text/Regex Decision Logic

검색어와 텍스트 인덱스 지원 여부로 검색 전략과 기본 정렬을 결정합니다.
"""

from enum import Enum
from typing import Any, Optional

from src.schemas.search_schema import SortOption
from src.utils.text_utils import is_rtl_text


# $text 검색을 쓰기 위한 최소 길이 (이 길이 이하는 정규식)
MIN_TEXT_SEARCH_LENGTH = 2


class SearchStrategy(str, Enum):
    """검색 전략"""

    TEXT = "text"  # MongoDB $text (relevance 정렬)
    REGEX = "regex"  # 정규식 폴백
    NONE = "none"  # 검색어 없음 (기본 필터만)


# 전략별 기본 정렬
TEXT_DEFAULT_SORT: dict[str, Any] = {"score": {"$meta": "textScore"}, "createdAt": -1}
REGEX_DEFAULT_SORT: dict[str, Any] = {"ratingsAverage": -1, "ratingsQuantity": -1, "createdAt": -1}

# 사용자 지정 정렬 (계산된 정렬을 무조건 대체)
SORT_OVERRIDES: dict[SortOption, dict[str, Any]] = {
    SortOption.NEWEST: {"createdAt": -1},
    SortOption.PRICE_ASC: {"price": 1, "createdAt": -1},
    SortOption.PRICE_DESC: {"price": -1, "createdAt": -1},
    SortOption.RATING: {"ratingsAverage": -1, "ratingsQuantity": -1, "createdAt": -1},
}


def select_strategy(term: str, supports_native_text_search: bool) -> SearchStrategy:
    """검색 전략 결정

    다음 조건을 모두 만족할 때만 $text 검색:
    - 텍스트 인덱스 존재
    - 순수 RTL(아랍어 등) 검색어가 아님
    - 길이 > 2

    Args:
        term: 앞뒤 공백이 제거된 검색어
        supports_native_text_search: 텍스트 인덱스 존재 여부

    Returns:
        SearchStrategy
    """
    if not term:
        return SearchStrategy.NONE
    if (
        supports_native_text_search
        and not is_rtl_text(term)
        and len(term) > MIN_TEXT_SEARCH_LENGTH
    ):
        return SearchStrategy.TEXT
    return SearchStrategy.REGEX


def default_sort_for(strategy: SearchStrategy) -> dict[str, Any]:
    """전략별 기본 정렬 (복사본)"""
    if strategy == SearchStrategy.TEXT:
        return dict(TEXT_DEFAULT_SORT)
    return dict(REGEX_DEFAULT_SORT)


def resolve_sort(strategy: SearchStrategy, sort: Optional[str] = None) -> dict[str, Any]:
    """최종 정렬 결정

    sort가 알려진 옵션이면 계산된 정렬을 대체하고, 알 수 없는 값은 무시합니다.
    """
    if sort:
        try:
            return dict(SORT_OVERRIDES[SortOption(sort)])
        except ValueError:
            pass
    return default_sort_for(strategy)
