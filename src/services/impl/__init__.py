"""Services implementation package."""

from .cache_service import CacheBackend, LocalCacheBackend, RedisCacheBackend

__all__ = ["CacheBackend", "LocalCacheBackend", "RedisCacheBackend"]
