"""헬스 체크 엔드포인트"""
from datetime import datetime

from fastapi import APIRouter, Depends

from src import __version__
from src.api.routes.search_routes import get_search_cache
from src.core.database import ping_db
from src.engine import FallbackCache
from src.schemas.search_schema import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(cache: FallbackCache = Depends(get_search_cache)):
    """
    헬스 체크 엔드포인트

    - MongoDB 연결 상태
    - 캐시 계층 상태 (Redis 미설정/장애 시 로컬 전용은 degraded가 아님)
    """
    db_ok = await ping_db()
    cache_stats = cache.stats()

    if not db_ok:
        status = "error"
    elif cache_stats["remote_configured"] and not cache_stats["remote_ready"]:
        status = "degraded"
    else:
        status = "ok"

    return HealthResponse(
        status=status,
        timestamp=datetime.now(),
        version=__version__,
        database=db_ok,
        cache=cache_stats,
    )


@router.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "service": "Storefront Search",
        "version": __version__,
        "docs": "/docs"
    }
