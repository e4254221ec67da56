"""설정 관리 - 환경 변수 로드 및 검증"""
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # MongoDB
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "storefront"
    mongodb_timeout_ms: int = 5000

    # 텍스트 인덱스
    # - ensure_text_index_on_startup: 앱 시작 시 product_fulltext 인덱스 생성 시도
    # - text_index_probe_ttl_s: 인덱스 존재 여부 확인 결과를 재사용하는 시간
    # - text_index_language: MongoDB 텍스트 인덱스 언어 ("none"은 형태소 분석 없음)
    ensure_text_index_on_startup: bool = True
    text_index_probe_ttl_s: int = 60
    text_index_language: str = "none"

    # Redis (비어 있으면 로컬 캐시만 사용)
    redis_url: str = ""
    redis_socket_timeout_s: float = 2.0
    redis_reconnect_interval_s: float = 30.0

    # 검색 캐시
    search_cache_ttl: int = 300  # 5분
    local_cache_max_size: int = 1000
    local_cache_ttl: int = 300

    # 페이지네이션
    pagination_default_limit: int = 12
    pagination_max_limit: int = 100

    # API
    api_title: str = "Storefront Search"
    api_version: str = "1.0.0"
    api_description: str = "텍스트 인덱스/정규식 폴백과 2계층 캐시로 상품을 검색합니다."

    # 로깅
    log_level: str = "INFO"

    @field_validator("search_cache_ttl", "local_cache_ttl")
    @classmethod
    def validate_cache_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("cache ttl must be positive")
        return v

    @field_validator("local_cache_max_size")
    @classmethod
    def validate_local_cache_max_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("local_cache_max_size must be positive")
        return v

    @field_validator("pagination_default_limit", "pagination_max_limit")
    @classmethod
    def validate_pagination_limits(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("pagination limits must be positive")
        return v

    @field_validator("text_index_probe_ttl_s")
    @classmethod
    def validate_probe_ttl(cls, v: int) -> int:
        if v < 0:
            raise ValueError("text_index_probe_ttl_s must be >= 0")
        return v

    @field_validator("mongodb_url")
    @classmethod
    def validate_mongodb_url(cls, v: str) -> str:
        if not v:
            raise ValueError("mongodb_url must not be empty")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
