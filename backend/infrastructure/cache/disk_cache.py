"""
Infrastructure — 磁碟快取 (diskcache)。
持久化快取，容器重啟後仍可使用。diskcache 為同步 API，
以 asyncio.to_thread 執行以免阻塞事件迴圈。
任何儲存層錯誤皆轉為 CacheInfrastructureError 拋出（不靜默略過）。
"""

import asyncio
import sqlite3
from datetime import timedelta

import diskcache

from domain.constants import DISK_CACHE_SIZE_LIMIT
from domain.errors import CacheInfrastructureError
from logging_config import get_logger

logger = get_logger(__name__)

_STORE_ERRORS = (OSError, sqlite3.Error, diskcache.Timeout)


class DiskCacheService:
    """Cache-aside store on a local diskcache directory."""

    def __init__(self, directory: str, size_limit: int = DISK_CACHE_SIZE_LIMIT):
        self._cache = diskcache.Cache(directory, size_limit=size_limit)

    async def get(self, key: str) -> str | None:
        try:
            return await asyncio.to_thread(self._cache.get, key)
        except _STORE_ERRORS as e:
            logger.error("Disk cache read failed for %s: %s", key, e)
            raise CacheInfrastructureError(f"Disk cache read failed: {e}") from e

    async def set(self, key: str, value: str, ttl: timedelta) -> None:
        try:
            await asyncio.to_thread(
                self._cache.set, key, value, expire=ttl.total_seconds()
            )
        except _STORE_ERRORS as e:
            logger.error("Disk cache write failed for %s: %s", key, e)
            raise CacheInfrastructureError(f"Disk cache write failed: {e}") from e
        logger.debug("Cached %s with expiry %s", key, ttl)

    async def clear(self) -> None:
        try:
            await asyncio.to_thread(self._cache.clear)
        except _STORE_ERRORS as e:
            raise CacheInfrastructureError(f"Disk cache clear failed: {e}") from e

    async def close(self) -> None:
        self._cache.close()
