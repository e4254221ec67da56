"""FastAPI 앱 팩토리"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.database import close_db, get_database, init_db
from src.core.exceptions import StorefrontException, ValidationException
from src.core.logging import logger
from src.api import health_router, search_router
from src.engine import FallbackCache, QueryBuilder, SearchExecutor, SearchOrchestrator, create_search_cache
from src.repositories.impl import CatalogRepository, ProductRepository, TextIndexProbe


def build_search_orchestrator(db, cache: FallbackCache) -> SearchOrchestrator:
    """리포지토리/캐시를 주입해 SearchOrchestrator 조립"""
    products = ProductRepository(db)
    catalog = CatalogRepository(db)
    return SearchOrchestrator(
        cache=cache,
        query_builder=QueryBuilder(catalog),
        executor=SearchExecutor(products, catalog),
        text_index_probe=TextIndexProbe(products),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기"""
    logger.info("Starting application...")
    await init_db()
    db = get_database()

    if settings.ensure_text_index_on_startup:
        await ProductRepository(db).ensure_text_index(settings.text_index_language)

    cache = create_search_cache()
    await cache.connect()

    app.state.search_cache = cache
    app.state.search_orchestrator = build_search_orchestrator(db, cache)
    logger.info(f"Application started (cache={cache.stats()['backend']})")
    yield
    logger.info("Shutting down application...")
    await close_db()


async def storefront_exception_handler(request: Request, exc: StorefrontException) -> JSONResponse:
    """라우트에서 처리되지 않은 커스텀 예외 → 400/500"""
    status_code = 400 if isinstance(exc, ValidationException) else 500
    if status_code == 500:
        logger.error(f"Unhandled error on {request.url.path}: {exc}")
        message = "Internal server error"
    else:
        message = exc.message
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "error_code": exc.error_code},
    )


def create_app() -> FastAPI:
    """
    FastAPI 앱 생성 (Factory Pattern)

    Returns:
        FastAPI 앱 인스턴스
    """
    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StorefrontException, storefront_exception_handler)

    # 라우터 등록
    app.include_router(health_router)
    app.include_router(search_router)

    return app

# 앱 인스턴스 생성 (uvicorn이 로드할 수 있도록)
app = create_app()
