"""
Tests for the cache-aside stores (cachetools, diskcache, Redis) and backend selection.
"""

import asyncio
import sqlite3
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from config.settings import Settings
from domain.errors import CacheInfrastructureError
from infrastructure.cache import (
    DiskCacheService,
    MemoryCacheService,
    RedisCacheService,
    build_cache_service,
)

HOUR = timedelta(hours=1)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


# ---------------------------------------------------------------------------
# MemoryCacheService
# ---------------------------------------------------------------------------


class TestMemoryCacheService:
    def test_should_return_stored_value(self):
        cache = MemoryCacheService()

        asyncio.run(cache.set("k", "v", HOUR))

        assert asyncio.run(cache.get("k")) == "v"

    def test_missing_key_should_return_none(self):
        assert asyncio.run(MemoryCacheService().get("missing")) is None

    def test_entry_should_expire_after_its_own_ttl(self):
        clock = FakeClock()
        cache = MemoryCacheService(timer=clock)

        async def run():
            await cache.set("short", "a", timedelta(seconds=60))
            await cache.set("long", "b", HOUR)
            clock.now = 61
            return await cache.get("short"), await cache.get("long")

        assert asyncio.run(run()) == (None, "b")

    def test_clear_should_drop_everything(self):
        cache = MemoryCacheService()

        async def run():
            await cache.set("k", "v", HOUR)
            await cache.clear()
            return await cache.get("k")

        assert asyncio.run(run()) is None


# ---------------------------------------------------------------------------
# DiskCacheService
# ---------------------------------------------------------------------------


class TestDiskCacheService:
    def test_should_persist_between_instances(self, tmp_path):
        first = DiskCacheService(str(tmp_path))
        asyncio.run(first.set("rates:latest:EUR", '{"x": 1}', HOUR))
        asyncio.run(first.close())

        second = DiskCacheService(str(tmp_path))
        try:
            assert asyncio.run(second.get("rates:latest:EUR")) == '{"x": 1}'
        finally:
            asyncio.run(second.close())

    def test_clear_should_drop_everything(self, tmp_path):
        cache = DiskCacheService(str(tmp_path))

        async def run():
            await cache.set("k", "v", HOUR)
            await cache.clear()
            return await cache.get("k")

        try:
            assert asyncio.run(run()) is None
        finally:
            asyncio.run(cache.close())

    def test_store_error_should_raise_cache_infrastructure_error(self, tmp_path):
        cache = DiskCacheService(str(tmp_path))
        real_store = cache._cache
        cache._cache = MagicMock()
        cache._cache.get.side_effect = sqlite3.OperationalError("database is locked")

        try:
            with pytest.raises(CacheInfrastructureError):
                asyncio.run(cache.get("k"))
        finally:
            real_store.close()


# ---------------------------------------------------------------------------
# RedisCacheService
# ---------------------------------------------------------------------------


def _redis_client() -> MagicMock:
    client = MagicMock()
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock()
    client.delete = AsyncMock()
    client.aclose = AsyncMock()
    return client


class TestRedisCacheService:
    def test_set_should_prefix_key_and_pass_expiry(self):
        client = _redis_client()
        cache = RedisCacheService(client, "CurrencyConverter:")

        asyncio.run(cache.set("rates:latest:EUR", "blob", HOUR))

        client.set.assert_awaited_once_with(
            "CurrencyConverter:rates:latest:EUR", "blob", ex=HOUR
        )

    def test_get_should_read_prefixed_key(self):
        client = _redis_client()
        client.get.return_value = "blob"
        cache = RedisCacheService(client, "CurrencyConverter:")

        assert asyncio.run(cache.get("k")) == "blob"
        client.get.assert_awaited_once_with("CurrencyConverter:k")

    @pytest.mark.parametrize("operation", ["get", "set"])
    def test_redis_error_should_raise_cache_infrastructure_error(self, operation):
        client = _redis_client()
        getattr(client, operation).side_effect = RedisConnectionError("refused")
        cache = RedisCacheService(client)

        with pytest.raises(CacheInfrastructureError):
            if operation == "get":
                asyncio.run(cache.get("k"))
            else:
                asyncio.run(cache.set("k", "v", HOUR))

    def test_clear_should_only_delete_own_namespace(self):
        client = _redis_client()
        seen_patterns = []

        async def scan_iter(match):
            seen_patterns.append(match)
            for name in ("CurrencyConverter:a", "CurrencyConverter:b"):
                yield name

        client.scan_iter = scan_iter
        cache = RedisCacheService(client, "CurrencyConverter:")

        asyncio.run(cache.clear())

        assert seen_patterns == ["CurrencyConverter:*"]
        assert client.delete.await_count == 2

    def test_close_should_close_client(self):
        client = _redis_client()

        asyncio.run(RedisCacheService(client).close())

        client.aclose.assert_awaited_once()


# ---------------------------------------------------------------------------
# build_cache_service
# ---------------------------------------------------------------------------


class TestBuildCacheService:
    def test_memory_backend(self):
        cache = build_cache_service(Settings(cache_backend="memory"))

        assert isinstance(cache, MemoryCacheService)

    def test_disk_backend(self, tmp_path):
        cache = build_cache_service(Settings(cache_backend="disk", cache_dir=str(tmp_path)))

        try:
            assert isinstance(cache, DiskCacheService)
        finally:
            asyncio.run(cache.close())

    def test_redis_backend(self):
        cache = build_cache_service(
            Settings(cache_backend="redis", redis_url="redis://localhost:6379/0")
        )

        assert isinstance(cache, RedisCacheService)

    def test_unknown_backend_should_raise(self):
        with pytest.raises(ValueError, match="Unsupported CACHE_BACKEND"):
            build_cache_service(Settings(cache_backend="memcached"))
