"""Fallback Cache - 원격(Redis) → 로컬(FIFO) 2계층 캐시 어댑터

원격 계층이 설정되어 있고 연결 가능하면 먼저 사용하고, 실패하면 로컬 계층으로
조용히 강등합니다. 로컬 계층은 원격 설정 여부와 관계없이 항상 함께 기록합니다.
어떤 메서드도 캐시 오류를 호출자에게 전파하지 않습니다.
"""

import asyncio
import json
import time
from typing import Any, Callable, Optional

from src.core.config import settings
from src.core.exceptions import CacheException, CacheSerializationException
from src.core.logging import logger
from src.services.impl.cache_service import LocalCacheBackend, RedisCacheBackend


class FallbackCache:
    """2계층 캐시 (async)

    Redis 클라이언트는 동기이므로 원격 호출은 asyncio.to_thread로 실행합니다.
    """

    def __init__(
        self,
        local: Optional[LocalCacheBackend] = None,
        remote: Optional[RedisCacheBackend] = None,
        default_ttl: Optional[int] = None,
        reconnect_interval_s: Optional[float] = None,
        timer: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            local: 로컬 저장소 (없으면 설정값으로 생성)
            remote: 원격 저장소 (None이면 로컬 전용)
            default_ttl: 기본 TTL (초)
            reconnect_interval_s: 원격 연결 실패 후 재시도 최소 간격 (초)
        """
        self.local = local or LocalCacheBackend()
        self.remote = remote
        self.default_ttl = default_ttl or settings.search_cache_ttl
        self.reconnect_interval_s = (
            settings.redis_reconnect_interval_s if reconnect_interval_s is None else reconnect_interval_s
        )
        self._timer = timer
        self._remote_ready = False
        self._last_connect_attempt: Optional[float] = None

    async def connect(self) -> bool:
        """원격 계층 연결 시도 (실패해도 예외 없음)

        Returns:
            원격 계층 사용 가능 여부
        """
        if self.remote is None:
            return False
        if self._remote_ready:
            return True

        self._last_connect_attempt = self._timer()
        try:
            await asyncio.to_thread(self.remote.connect)
        except CacheException as e:
            logger.warning(f"Redis not available, using in-memory cache: {e.message}")
            return False

        self._remote_ready = True
        return True

    async def _ensure_remote(self) -> bool:
        if self.remote is None:
            return False
        if self._remote_ready:
            return True
        if (
            self._last_connect_attempt is not None
            and self._timer() - self._last_connect_attempt < self.reconnect_interval_s
        ):
            return False
        return await self.connect()

    def _mark_remote_failed(self, operation: str, error: Exception) -> None:
        logger.warning(f"Redis {operation} failed, falling back to local cache: {error}")
        self._remote_ready = False
        self._last_connect_attempt = self._timer()

    @staticmethod
    def _encode(value: Any) -> str:
        try:
            return json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise CacheSerializationException("serialize", str(e))

    @staticmethod
    def _decode(raw: str) -> Any:
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            raise CacheSerializationException("deserialize", str(e))

    async def get(self, key: str) -> Optional[Any]:
        """캐시 조회

        Returns:
            저장된 값 또는 None (미스/만료/오류)
        """
        if not key:
            return None

        if await self._ensure_remote():
            try:
                raw = await asyncio.to_thread(self.remote.get, key)
                if raw is not None:
                    return self._decode(raw)
            except CacheSerializationException as e:
                logger.warning(f"Corrupted remote cache entry: key={key}, {e.message}")
            except CacheException as e:
                self._mark_remote_failed("GET", e)

        raw = self.local.get(key)
        if raw is None:
            return None
        try:
            return self._decode(raw)
        except CacheSerializationException as e:
            logger.warning(f"Corrupted local cache entry: key={key}, {e.message}")
            self.local.delete(key)
            return None

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """캐시 저장 (원격 + 로컬)"""
        if not key:
            return

        try:
            raw = self._encode(value)
        except CacheSerializationException as e:
            logger.error(f"Cache set skipped: key={key}, {e.message}")
            return

        ttl = ttl_seconds or self.default_ttl

        if await self._ensure_remote():
            try:
                await asyncio.to_thread(self.remote.set, key, raw, ttl)
            except CacheException as e:
                self._mark_remote_failed("SET", e)

        self.local.set(key, raw, ttl)

    async def delete(self, key: str) -> None:
        """캐시 삭제 (없는 키도 오류 없음)"""
        if await self._ensure_remote():
            try:
                await asyncio.to_thread(self.remote.delete, key)
            except CacheException as e:
                self._mark_remote_failed("DEL", e)
        self.local.delete(key)

    async def clear(self) -> None:
        """전체 삭제"""
        if await self._ensure_remote():
            try:
                await asyncio.to_thread(self.remote.clear)
            except CacheException as e:
                self._mark_remote_failed("CLEAR", e)
        self.local.clear()

    def stats(self) -> dict[str, Any]:
        """헬스 체크용 상태"""
        return {
            "backend": "redis+local" if self._remote_ready else "local",
            "remote_configured": self.remote is not None,
            "remote_ready": self._remote_ready,
            "local_size": self.local.size(),
            "local_max_size": self.local.max_size,
        }


def create_search_cache() -> FallbackCache:
    """설정값으로 검색 캐시 생성 (REDIS_URL이 없으면 로컬 전용)"""
    remote = RedisCacheBackend(settings.redis_url) if settings.redis_url else None
    return FallbackCache(
        local=LocalCacheBackend(
            max_size=settings.local_cache_max_size,
            default_ttl=settings.local_cache_ttl,
        ),
        remote=remote,
        default_ttl=settings.search_cache_ttl,
    )
