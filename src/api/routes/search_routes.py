"""Search Routes - 상품 검색 API

HTTP Layer는 입력 검증과 응답 변환만 하고, 검색은 SearchOrchestrator에 위임합니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from src.api.pagination import Pagination, get_pagination
from src.core.exceptions import InvalidQueryException
from src.core.logging import logger, sanitize_for_log
from src.engine import FallbackCache, SearchOrchestrator, build_search_filters
from src.schemas.search_schema import ErrorResponse, SearchResponse
from src.utils.text_utils import normalize_search_term

router = APIRouter(prefix="/api", tags=["search"])

MAX_QUERY_LENGTH = 500


def get_search_cache(request: Request) -> FallbackCache:
    """앱 시작 시 생성된 검색 캐시"""
    return request.app.state.search_cache


def get_search_orchestrator(request: Request) -> SearchOrchestrator:
    """앱 시작 시 생성된 SearchOrchestrator"""
    return request.app.state.search_orchestrator


def _error_response(status_code: int, message: str, error_code: str) -> JSONResponse:
    body = ErrorResponse(message=message, error_code=error_code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.get(
    "/search",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def search_products(
    q: Optional[str] = Query(None, description="검색어"),
    category: Optional[str] = Query(None, description="카테고리 ID"),
    brand: Optional[str] = Query(None, description="브랜드 ID"),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    sort: Optional[str] = Query(None, description="newest | priceAsc | priceDesc | rating"),
    pagination: Pagination = Depends(get_pagination),
    orchestrator: SearchOrchestrator = Depends(get_search_orchestrator),
):
    """상품 검색 API

    Flow:
        1. 검색어 검증 (없거나 공백 → 400)
        2. 필터 파싱 (잘못된 ID/가격은 무시)
        3. Orchestrator에 위임 (Cache → Query → Execute)
        4. 결과 반환 (예상치 못한 오류 → 500, 상세는 로그에만)
    """
    term = normalize_search_term(q)
    if not term:
        logger.warning("[API] Search rejected: empty query")
        return _error_response(400, 'Search query parameter "q" is required', "INVALID_QUERY")
    if len(term) > MAX_QUERY_LENGTH:
        logger.warning(f"[API] Search rejected: query too long ({len(term)})")
        return _error_response(
            400, f"Search query must be at most {MAX_QUERY_LENGTH} characters", "INVALID_QUERY"
        )

    filters = build_search_filters(category, brand, min_price, max_price)

    try:
        result = await orchestrator.search(term, filters, sort, pagination)
    except InvalidQueryException as e:
        logger.warning(f"[API] Invalid search query: {e.message}")
        return _error_response(400, e.message, e.error_code)
    except Exception:
        logger.error(f"[API] Search failed: query='{sanitize_for_log(term)}'", exc_info=True)
        return _error_response(500, "Search failed, please try again later", "INTERNAL_ERROR")

    return JSONResponse(content=result)
