"""전역 테스트 설정

역할:
- 테스트 환경 구성
- 공통 Fake 리포지토리/캐시 주입

금지:
- 실제 MongoDB/Redis 연결
"""

import os
import sys
from pathlib import Path

import pytest


# 프로젝트 루트를 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.engine import FallbackCache  # noqa: E402
from src.services.impl.cache_service import LocalCacheBackend  # noqa: E402
from tests.fakes import FakeCatalogRepository, FakeProductRepository  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def test_env() -> None:
    """테스트 환경 변수 설정 (세션 전역)"""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["LOG_LEVEL"] = "INFO"


@pytest.fixture
def fake_catalog() -> FakeCatalogRepository:
    return FakeCatalogRepository()


@pytest.fixture
def fake_products() -> FakeProductRepository:
    return FakeProductRepository()


@pytest.fixture
def local_cache() -> FallbackCache:
    """로컬 전용 FallbackCache"""
    return FallbackCache(local=LocalCacheBackend(max_size=100, default_ttl=300))
