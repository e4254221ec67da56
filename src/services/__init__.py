"""캐시 저장소 서비스 - export only."""

from .impl import CacheBackend, LocalCacheBackend, RedisCacheBackend

__all__ = ["CacheBackend", "LocalCacheBackend", "RedisCacheBackend"]
