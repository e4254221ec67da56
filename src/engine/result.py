"""Search Result - Executor 결과 포맷"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SearchPage:
    """검색 결과 한 페이지

    Attributes:
        total: 전체 매칭 수 (페이지 크기와 무관)
        items: 현재 페이지 상품 (JSON 직렬화 가능한 dict)
        used_fallback: 실행 시점 $text 실패로 정규식 폴백을 탔는지 여부
    """

    total: int
    items: list[dict[str, Any]] = field(default_factory=list)
    used_fallback: bool = False
