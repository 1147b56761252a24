"""infrastructure.cache sub-package — cache-aside stores (diskcache, Redis, cachetools)."""

from config.settings import Settings
from domain.constants import (
    CACHE_BACKEND_DISK,
    CACHE_BACKEND_MEMORY,
    CACHE_BACKEND_REDIS,
)
from domain.protocols import CacheService
from infrastructure.cache.disk_cache import DiskCacheService
from infrastructure.cache.memory_cache import MemoryCacheService
from infrastructure.cache.redis_cache import RedisCacheService


def build_cache_service(settings: Settings) -> CacheService:
    """Create the cache store selected by ``settings.cache_backend``."""
    if settings.cache_backend == CACHE_BACKEND_DISK:
        return DiskCacheService(settings.cache_dir)
    if settings.cache_backend == CACHE_BACKEND_REDIS:
        return RedisCacheService.from_url(
            settings.redis_url, settings.redis_instance_name
        )
    if settings.cache_backend == CACHE_BACKEND_MEMORY:
        return MemoryCacheService()
    raise ValueError(f"Unsupported CACHE_BACKEND '{settings.cache_backend}'")


__all__ = [
    "DiskCacheService",
    "MemoryCacheService",
    "RedisCacheService",
    "build_cache_service",
]
