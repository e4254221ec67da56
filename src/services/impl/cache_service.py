"""캐시 백엔드 - Redis(원격) / 프로세스 내 FIFO(로컬) 저장소

두 백엔드 모두 직렬화된 문자열만 다룹니다. 직렬화와 계층 간 폴백은
FallbackCache(src.engine.cache_adapter)가 담당합니다.
"""
import threading
import time
from typing import Callable, Optional, Protocol

from cachetools import FIFOCache
from redis import Redis

from src.core.config import settings
from src.core.logging import logger
from src.core.exceptions import CacheConnectionException


class CacheBackend(Protocol):
    """캐시 저장소 인터페이스"""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        ...

    def delete(self, key: str) -> bool:
        ...

    def clear(self) -> None:
        ...


class RedisCacheBackend:
    """Redis 캐시 저장소 (원격 계층)

    connect()가 성공하기 전에는 어떤 명령도 보내지 않습니다.
    모든 Redis 오류는 CacheConnectionException으로 변환됩니다.
    """

    def __init__(self, redis_url: str, namespace: str = "search:", socket_timeout: Optional[float] = None):
        if not redis_url:
            raise ValueError("redis_url must not be empty")
        self.redis_url = redis_url
        self.namespace = namespace
        self.socket_timeout = settings.redis_socket_timeout_s if socket_timeout is None else socket_timeout
        self.redis_client: Optional[Redis] = None

    def connect(self) -> None:
        """Redis 클라이언트 생성 및 연결 확인

        Raises:
            CacheConnectionException: 연결 실패
        """
        try:
            client = Redis.from_url(
                self.redis_url,
                decode_responses=True,
                socket_connect_timeout=self.socket_timeout,
                socket_timeout=self.socket_timeout,
            )
            client.ping()
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise CacheConnectionException(str(e), details={"reason": str(e)})

        self.redis_client = client
        logger.info("Redis connection established")

    @property
    def is_connected(self) -> bool:
        return self.redis_client is not None

    def _client(self) -> Redis:
        if self.redis_client is None:
            raise CacheConnectionException("Redis client is not connected")
        return self.redis_client

    def get(self, key: str) -> Optional[str]:
        """
        캐시 조회

        Args:
            key: 캐시 키

        Returns:
            저장된 문자열 또는 None
        """
        try:
            return self._client().get(key)
        except CacheConnectionException:
            raise
        except Exception as e:
            raise CacheConnectionException(f"Cache read failed: {e}", details={"key": key})

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """만료 시간과 함께 저장 (SETEX)"""
        try:
            self._client().setex(key, ttl_seconds, value)
        except CacheConnectionException:
            raise
        except Exception as e:
            raise CacheConnectionException(f"Cache write failed: {e}", details={"key": key})

    def delete(self, key: str) -> bool:
        try:
            return self._client().delete(key) > 0
        except CacheConnectionException:
            raise
        except Exception as e:
            raise CacheConnectionException(f"Cache delete failed: {e}", details={"key": key})

    def clear(self) -> None:
        """네임스페이스 키만 삭제 (FLUSHDB 사용 안 함)"""
        try:
            client = self._client()
            for key in client.scan_iter(match=f"{self.namespace}*"):
                client.delete(key)
        except CacheConnectionException:
            raise
        except Exception as e:
            raise CacheConnectionException(f"Cache clear failed: {e}")


class LocalCacheBackend:
    """프로세스 내 캐시 저장소 (로컬 계층)

    - 용량 제한 (기본 1000개), 가득 차면 가장 먼저 들어온 항목부터 제거 (FIFO, LRU 아님)
    - 항목별 만료 시간, 조회 시점에 만료된 항목을 제거 (lazy eviction)
    """

    def __init__(
        self,
        max_size: Optional[int] = None,
        default_ttl: Optional[int] = None,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.max_size = settings.local_cache_max_size if max_size is None else max_size
        self.default_ttl = settings.local_cache_ttl if default_ttl is None else default_ttl
        if self.max_size <= 0:
            raise ValueError("max_size must be positive")
        self._timer = timer
        # 값: (직렬화된 문자열, 만료 시각)
        self._store: FIFOCache = FIFOCache(maxsize=self.max_size)
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._timer() >= expires_at:
                del self._store[key]
                return None
            return value

    def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        ttl = ttl_seconds if ttl_seconds else self.default_ttl
        with self._lock:
            # 덮어쓰기는 새 항목으로 취급 (삽입 순서 맨 뒤)
            self._store.pop(key, None)
            # 용량 초과 시 FIFOCache가 가장 오래된 항목을 먼저 제거한 뒤 삽입
            self._store[key] = (value, self._timer() + ttl)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._store.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._store)
