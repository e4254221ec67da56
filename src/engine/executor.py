"""Search Executor - 필터/정렬/페이지로 상품 조회

Primary: 단일 집계 파이프라인 ($match → $facet{docs, meta})
Fallback: 실행 시점에 $text가 거부되면 정규식 OR 필터로 count + find 재실행
"""

import asyncio
from typing import Any

from src.core.exceptions import TextSearchUnsupportedException
from src.core.logging import logger, sanitize_for_log
from src.repositories.models import BRANDS_COLLECTION, CATEGORIES_COLLECTION, SEARCH_RESULT_FIELDS
from src.schemas.search_schema import ProductSearchItem
from src.utils.text_utils import escape_regex

from .result import SearchPage


# 폴백 경로 정렬 (최신순)
FALLBACK_SORT: dict[str, Any] = {"createdAt": -1}


def _lookup_name_stages(collection: str, field: str) -> list[dict[str, Any]]:
    """참조 필드를 {_id, name}으로 치환 (참조 없음 → null, 행은 유지)"""
    return [
        {
            "$lookup": {
                "from": collection,
                "localField": field,
                "foreignField": "_id",
                "as": field,
                "pipeline": [{"$project": {"name": 1}}],
            }
        },
        {"$unwind": {"path": f"${field}", "preserveNullAndEmptyArrays": True}},
    ]


def build_search_pipeline(
    filter_: dict[str, Any],
    sort: dict[str, Any],
    skip: int,
    limit: int,
) -> list[dict[str, Any]]:
    """검색 집계 파이프라인 (총 개수 + 페이지를 한 번에)"""
    projection: dict[str, Any] = {name: 1 for name in SEARCH_RESULT_FIELDS}
    # 조인된 참조는 {_id, name}만 유지
    for field in ("category", "brand"):
        projection[f"{field}._id"] = 1
        projection[f"{field}.name"] = 1

    docs_stages: list[dict[str, Any]] = [
        {"$sort": sort},
        {"$skip": skip},
        {"$limit": limit},
        *_lookup_name_stages(CATEGORIES_COLLECTION, "category"),
        *_lookup_name_stages(BRANDS_COLLECTION, "brand"),
        {"$project": projection},
    ]

    return [
        {"$match": filter_},
        {
            "$facet": {
                "docs": docs_stages,
                "meta": [{"$count": "total"}],
            }
        },
    ]


def build_fallback_filter(filter_: dict[str, Any]) -> dict[str, Any]:
    """$text 필터 → 제목/설명 정규식 OR 필터

    $text/$or 이외의 조건(노출 조건, 카테고리/브랜드/가격)은 그대로 유지합니다.
    """
    term = (filter_.get("$text") or {}).get("$search", "")
    escaped = escape_regex(term)

    fallback = {k: v for k, v in filter_.items() if k not in ("$text", "$or")}
    fallback["$or"] = [
        {"title": {"$regex": escaped, "$options": "i"}},
        {"description": {"$regex": escaped, "$options": "i"}},
    ]
    return fallback


class SearchExecutor:
    """검색 실행기 (상태 없음)

    Args:
        product_repository: aggregate_search/count/find_page 구현체
        catalog_repository: find_names 구현체 (폴백 경로 이름 채우기)
    """

    def __init__(self, product_repository, catalog_repository):
        if product_repository is None:
            raise ValueError("product_repository must not be None")
        if catalog_repository is None:
            raise ValueError("catalog_repository must not be None")
        self.products = product_repository
        self.catalog = catalog_repository

    async def execute(
        self,
        filter_: dict[str, Any],
        sort: dict[str, Any],
        skip: int,
        limit: int,
    ) -> SearchPage:
        """검색 실행

        Raises:
            DatabaseQueryException: 폴백 대상이 아닌 오류, 또는 폴백 자체의 실패
        """
        pipeline = build_search_pipeline(filter_, sort, skip, limit)

        try:
            result = await self.products.aggregate_search(pipeline)
        except TextSearchUnsupportedException as e:
            if "$text" not in filter_:
                raise
            logger.warning(f"Text search failed, using regex fallback: {e.message}")
            return await self._execute_fallback(filter_, skip, limit)

        facet = result[0] if result else {}
        meta = facet.get("meta") or []
        total = int(meta[0].get("total", 0)) if meta else 0
        docs = facet.get("docs") or []

        return SearchPage(
            total=total,
            items=[ProductSearchItem.to_payload(doc) for doc in docs],
        )

    async def _execute_fallback(self, filter_: dict[str, Any], skip: int, limit: int) -> SearchPage:
        fallback_filter = build_fallback_filter(filter_)
        logger.debug(
            f"Fallback search: term='{sanitize_for_log(filter_['$text'].get('$search', ''))}'"
        )

        projection = {name: 1 for name in SEARCH_RESULT_FIELDS}
        projection["category"] = 1
        projection["brand"] = 1

        total = await self.products.count(fallback_filter)
        docs = await self.products.find_page(fallback_filter, projection, FALLBACK_SORT, skip, limit)
        docs = await self._populate_names(docs)

        return SearchPage(
            total=total,
            items=[ProductSearchItem.to_payload(doc) for doc in docs],
            used_fallback=True,
        )

    async def _populate_names(self, docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """category/brand 참조를 {_id, name}으로 치환 (찾지 못하면 None)"""
        category_names, brand_names = await asyncio.gather(
            self.catalog.find_names(CATEGORIES_COLLECTION, [d.get("category") for d in docs]),
            self.catalog.find_names(BRANDS_COLLECTION, [d.get("brand") for d in docs]),
        )

        populated = []
        for doc in docs:
            item = dict(doc)
            for field, names in (("category", category_names), ("brand", brand_names)):
                ref = item.get(field)
                item[field] = {"_id": ref, "name": names[ref]} if ref in names else None
            populated.append(item)
        return populated
