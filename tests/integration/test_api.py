"""API 통합 테스트

lifespan(MongoDB/Redis 연결)은 실행하지 않고, 의존성 오버라이드로
Fake 리포지토리 기반 Orchestrator와 로컬 캐시를 주입합니다.
"""
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

# App factory 사용
from src.app import create_app
from src.api.routes.search_routes import get_search_cache, get_search_orchestrator
from src.core.exceptions import DatabaseQueryException
from src.engine import FallbackCache
from src.services.impl.cache_service import LocalCacheBackend
from tests.fakes import FakeProductRepository, make_orchestrator
from tests.fixtures import BRAND_IDS, PRODUCT_DOCS


def _client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


@pytest.fixture
def cache() -> FallbackCache:
    return FallbackCache(local=LocalCacheBackend(max_size=100, default_ttl=300))


@pytest.fixture
def products() -> FakeProductRepository:
    return FakeProductRepository(
        docs=[PRODUCT_DOCS["galaxy_s25"], PRODUCT_DOCS["leather_bag"]],
        total=2,
    )


@pytest.fixture
def app(cache, products):
    app = create_app()
    orchestrator = make_orchestrator(products, cache=cache)
    app.dependency_overrides[get_search_cache] = lambda: cache
    app.dependency_overrides[get_search_orchestrator] = lambda: orchestrator
    yield app
    app.dependency_overrides.clear()


@pytest.mark.asyncio
class TestSearchAPI:
    """상품 검색 API 테스트"""

    async def test_search_success(self, app) -> None:
        async with _client(app) as client:
            response = await client.get("/api/search", params={"q": "galaxy"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["query"] == "galaxy"
        assert "cached" not in data
        assert [p["title"] for p in data["products"]] == ["Galaxy S25 Ultra", "شنطة جلد"]
        assert data["products"][1]["brand"] is None
        assert data["pagination"]["currentPage"] == 1
        assert data["pagination"]["totalPages"] == 1
        assert data["pagination"]["next"] is None

    async def test_second_request_is_cached(self, app, products) -> None:
        """같은 요청은 캐시에서 같은 내용 + cached: true"""
        async with _client(app) as client:
            first = await client.get("/api/search", params={"q": "galaxy", "page": "1"})
            second = await client.get("/api/search", params={"q": "galaxy", "page": "1"})

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json()["cached"] is True
        assert {k: v for k, v in second.json().items() if k != "cached"} == first.json()
        assert len(products.pipelines) == 1

    @pytest.mark.parametrize("params", [{}, {"q": ""}, {"q": "   "}])
    async def test_missing_query_returns_400(self, app, products, params) -> None:
        async with _client(app) as client:
            response = await client.get("/api/search", params=params)

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["message"] == 'Search query parameter "q" is required'
        assert products.pipelines == []

    async def test_too_long_query_returns_400(self, app) -> None:
        async with _client(app) as client:
            response = await client.get("/api/search", params={"q": "a" * 501})

        assert response.status_code == 400

    async def test_invalid_filters_ignored(self, app, products) -> None:
        """잘못된 ID/가격은 400이 아니라 무시"""
        async with _client(app) as client:
            response = await client.get(
                "/api/search",
                params={"q": "bag", "category": "nope", "minPrice": "abc", "maxPrice": "100"},
            )

        assert response.status_code == 200
        match = products.pipelines[0][0]["$match"]
        assert "category" not in match
        assert match["price"] == {"$lte": 100}

    async def test_brand_filter_applied(self, app, products) -> None:
        async with _client(app) as client:
            await client.get("/api/search", params={"q": "bag", "brand": str(BRAND_IDS["nike"])})

        assert products.pipelines[0][0]["$match"]["brand"] == BRAND_IDS["nike"]

    async def test_pagination_and_sort(self, app, products) -> None:
        async with _client(app) as client:
            response = await client.get(
                "/api/search",
                params={"q": "bag", "page": "2", "limit": "1", "sort": "priceDesc", "lang": "ar"},
            )

        data = response.json()
        assert data["pagination"]["currentPage"] == 2
        assert data["pagination"]["limit"] == 1
        assert data["pagination"]["prev"] == "/api/search?page=1&limit=1"
        assert data["pagination"]["labelNext"] == "التالي"

        docs = products.pipelines[0][1]["$facet"]["docs"]
        assert docs[0] == {"$sort": {"price": -1, "createdAt": -1}}
        assert docs[1] == {"$skip": 1}

    async def test_internal_error_returns_generic_500(self, app, products) -> None:
        """내부 오류 상세는 응답에 노출하지 않음"""
        products.error = DatabaseQueryException("aggregate", "connection reset by mongo-01")

        async with _client(app) as client:
            response = await client.get("/api/search", params={"q": "bag"})

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["message"] == "Search failed, please try again later"
        assert "mongo-01" not in response.text


@pytest.mark.asyncio
class TestHealthAPI:
    """헬스 체크 API 테스트"""

    async def test_health_check(self, app) -> None:
        """헬스 체크 엔드포인트"""
        with patch('src.api.routes.health_routes.ping_db', new=AsyncMock(return_value=True)):
            async with _client(app) as client:
                response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["database"] is True
        assert data["cache"]["backend"] == "local"
        assert "timestamp" in data
        assert "version" in data

    async def test_health_check_db_down(self, app) -> None:
        with patch('src.api.routes.health_routes.ping_db', new=AsyncMock(return_value=False)):
            async with _client(app) as client:
                response = await client.get("/health")

        assert response.json()["status"] == "error"

    async def test_root_endpoint(self, app) -> None:
        """루트 엔드포인트"""
        async with _client(app) as client:
            response = await client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert "service" in data
        assert "version" in data
