"""FallbackCache 단위 테스트."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from src.core.exceptions import CacheConnectionException
from src.engine.cache_adapter import FallbackCache
from src.services.impl.cache_service import LocalCacheBackend


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _remote(**overrides) -> MagicMock:
    """동기 RedisCacheBackend Mock"""
    remote = MagicMock()
    remote.get.return_value = None
    for name, value in overrides.items():
        setattr(remote, name, value)
    return remote


def _local() -> LocalCacheBackend:
    return LocalCacheBackend(max_size=10, default_ttl=300)


@pytest.mark.asyncio
async def test_local_only_set_and_get():
    """원격 미설정 → 로컬 전용"""
    cache = FallbackCache(local=_local())

    assert await cache.connect() is False
    await cache.set("search:v5:k", {"success": True, "products": []}, 60)

    assert await cache.get("search:v5:k") == {"success": True, "products": []}
    assert cache.stats()["backend"] == "local"


@pytest.mark.asyncio
async def test_get_miss():
    cache = FallbackCache(local=_local())
    assert await cache.get("missing") is None


@pytest.mark.asyncio
async def test_empty_key_ignored():
    cache = FallbackCache(local=_local())
    await cache.set("", {"a": 1})
    assert await cache.get("") is None
    assert cache.local.size() == 0


@pytest.mark.asyncio
async def test_remote_hit():
    """원격 히트는 로컬보다 우선"""
    remote = _remote()
    remote.get.return_value = json.dumps({"source": "remote"})
    local = _local()
    local.set("k", json.dumps({"source": "local"}))

    cache = FallbackCache(local=local, remote=remote)
    assert await cache.connect() is True

    assert await cache.get("k") == {"source": "remote"}
    remote.get.assert_called_once_with("k")


@pytest.mark.asyncio
async def test_remote_miss_reads_local():
    local = _local()
    local.set("k", json.dumps({"source": "local"}))
    cache = FallbackCache(local=local, remote=_remote())
    await cache.connect()

    assert await cache.get("k") == {"source": "local"}


@pytest.mark.asyncio
async def test_set_writes_both_tiers():
    remote = _remote()
    cache = FallbackCache(local=_local(), remote=remote)
    await cache.connect()

    await cache.set("k", {"a": 1}, 120)

    remote.set.assert_called_once_with("k", json.dumps({"a": 1}, ensure_ascii=False), 120)
    assert cache.local.get("k") is not None


@pytest.mark.asyncio
async def test_connect_failure_uses_local():
    """Redis 연결 실패 → 예외 없이 로컬 사용"""
    remote = _remote()
    remote.connect.side_effect = CacheConnectionException("refused")
    cache = FallbackCache(local=_local(), remote=remote)

    assert await cache.connect() is False

    await cache.set("k", {"a": 1})
    assert await cache.get("k") == {"a": 1}
    remote.set.assert_not_called()
    assert cache.stats()["remote_configured"] is True
    assert cache.stats()["remote_ready"] is False


@pytest.mark.asyncio
async def test_remote_error_falls_back_to_local():
    """원격 조회 오류 → 로컬 값 반환, 원격은 비활성화"""
    remote = _remote()
    remote.get.side_effect = CacheConnectionException("timeout")
    local = _local()
    local.set("k", json.dumps({"source": "local"}))

    cache = FallbackCache(local=local, remote=remote, reconnect_interval_s=30)
    await cache.connect()

    assert await cache.get("k") == {"source": "local"}
    assert cache.stats()["remote_ready"] is False


@pytest.mark.asyncio
async def test_remote_set_error_still_writes_local():
    remote = _remote()
    remote.set.side_effect = CacheConnectionException("timeout")
    cache = FallbackCache(local=_local(), remote=remote)
    await cache.connect()

    await cache.set("k", {"a": 1})

    assert await cache.get("k") == {"a": 1}


@pytest.mark.asyncio
async def test_reconnect_throttled():
    """재연결은 최소 간격 이후에만 시도"""
    clock = FakeClock()
    remote = _remote()
    remote.connect.side_effect = CacheConnectionException("refused")
    cache = FallbackCache(local=_local(), remote=remote, reconnect_interval_s=30, timer=clock)

    await cache.connect()
    assert remote.connect.call_count == 1

    clock.now = 10
    await cache.get("k")
    assert remote.connect.call_count == 1

    clock.now = 31
    remote.connect.side_effect = None
    await cache.get("k")
    assert remote.connect.call_count == 2
    assert cache.stats()["remote_ready"] is True


@pytest.mark.asyncio
async def test_unserializable_value_skipped():
    """직렬화 실패는 호출자에게 전파하지 않음"""
    cache = FallbackCache(local=_local())

    await cache.set("k", {"bad": object()})

    assert await cache.get("k") is None


@pytest.mark.asyncio
async def test_corrupted_local_entry_removed():
    local = _local()
    local.set("k", "{not json")
    cache = FallbackCache(local=local)

    assert await cache.get("k") is None
    assert local.size() == 0


@pytest.mark.asyncio
async def test_corrupted_remote_entry_reads_local():
    remote = _remote()
    remote.get.return_value = "{not json"
    local = _local()
    local.set("k", json.dumps({"source": "local"}))
    cache = FallbackCache(local=local, remote=remote)
    await cache.connect()

    assert await cache.get("k") == {"source": "local"}
    assert cache.stats()["remote_ready"] is True


@pytest.mark.asyncio
async def test_delete_and_clear():
    remote = _remote()
    cache = FallbackCache(local=_local(), remote=remote)
    await cache.connect()
    await cache.set("a", 1)
    await cache.set("b", 2)

    await cache.delete("a")
    await cache.delete("a")
    assert await cache.get("a") is None

    await cache.clear()
    assert cache.local.size() == 0
    remote.clear.assert_called_once()


@pytest.mark.asyncio
async def test_stats():
    cache = FallbackCache(local=LocalCacheBackend(max_size=7, default_ttl=300))
    await cache.set("a", 1)

    stats = cache.stats()

    assert stats["local_size"] == 1
    assert stats["local_max_size"] == 7
    assert stats["remote_configured"] is False
