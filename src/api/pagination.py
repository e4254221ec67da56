"""페이지네이션 협력자 - 쿼리 파라미터 → skip/limit/page + 링크 생성"""
import math
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Query, Request

from src.core.config import settings
from src.schemas.search_schema import PaginationMeta


_ARABIC_LANGS = {"ar", "ar-eg", "arabic"}


def _parse_positive_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return None
    return parsed if parsed >= 1 else None


@dataclass
class Pagination:
    """요청 단위 페이지네이션 정보"""

    skip: int
    limit: int
    page: int
    base_url: str = ""
    lang: str = ""

    @classmethod
    def from_params(
        cls,
        page: Optional[str] = None,
        limit: Optional[str] = None,
        base_url: str = "",
        lang: Optional[str] = None,
    ) -> "Pagination":
        """page/limit 파싱

        - limit: 없거나 잘못되면 기본값(12), 최대 100
        - page: 없거나 1 미만이면 1
        """
        parsed_limit = _parse_positive_int(limit) or settings.pagination_default_limit
        parsed_limit = min(parsed_limit, settings.pagination_max_limit)
        parsed_page = _parse_positive_int(page) or 1

        return cls(
            skip=(parsed_page - 1) * parsed_limit,
            limit=parsed_limit,
            page=parsed_page,
            base_url=base_url,
            lang=(lang or "").lower(),
        )

    def _link(self, page: int) -> str:
        return f"{self.base_url}?page={page}&limit={self.limit}"

    def build_links(self, total: int) -> dict[str, Any]:
        """전체 개수로 페이지 메타데이터 생성 (lang=ar이면 아랍어 라벨)"""
        total_pages = math.ceil(total / self.limit) or 1
        is_arabic = self.lang in _ARABIC_LANGS

        meta = PaginationMeta(
            current_page=self.page,
            total_pages=total_pages,
            limit=self.limit,
            total=total,
            next=self._link(self.page + 1) if self.page < total_pages else None,
            prev=self._link(self.page - 1) if self.page > 1 else None,
            label_next="التالي" if is_arabic else "Next",
            label_prev="السابق" if is_arabic else "Previous",
        )
        return meta.model_dump(by_alias=True)


def get_pagination(
    request: Request,
    page: Optional[str] = Query(None, description="페이지 (1부터)"),
    limit: Optional[str] = Query(None, description="페이지 크기 (최대 100)"),
    lang: Optional[str] = Query(None, description="링크 라벨 언어 (ar/en)"),
) -> Pagination:
    """FastAPI Dependency: 페이지네이션 정보"""
    return Pagination.from_params(page=page, limit=limit, base_url=request.url.path, lang=lang)
