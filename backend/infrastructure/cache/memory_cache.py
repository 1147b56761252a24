"""
Infrastructure — 記憶體快取 (cachetools)。
Process-local store for single-worker deployments and tests. Each entry
carries its own time-to-use, so latest and historical results can share one
cache with different TTLs.
"""

import time
from datetime import timedelta

from cachetools import TLRUCache

from domain.constants import MEMORY_CACHE_MAXSIZE


def _entry_expiry(_key: str, entry: tuple[str, float], now: float) -> float:
    return now + entry[1]


class MemoryCacheService:
    """Cache-aside store on an in-process ``TLRUCache``."""

    def __init__(self, maxsize: int = MEMORY_CACHE_MAXSIZE, timer=time.monotonic):
        self._cache: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_entry_expiry, timer=timer)

    async def get(self, key: str) -> str | None:
        entry = self._cache.get(key)
        return entry[0] if entry is not None else None

    async def set(self, key: str, value: str, ttl: timedelta) -> None:
        self._cache[key] = (value, ttl.total_seconds())

    async def clear(self) -> None:
        self._cache.clear()

    async def close(self) -> None:
        self._cache.clear()
