"""
Infrastructure — Redis 分散式快取。
Keys are namespaced with the configured instance name so several services can
share one Redis database.
"""

from datetime import timedelta

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from domain.constants import REDIS_INSTANCE_NAME, REDIS_SOCKET_TIMEOUT
from domain.errors import CacheInfrastructureError
from logging_config import get_logger

logger = get_logger(__name__)


class RedisCacheService:
    """Cache-aside store on Redis; expiry is delegated to ``SET ... EX``."""

    def __init__(self, client: aioredis.Redis, instance_name: str = REDIS_INSTANCE_NAME):
        self._client = client
        self._prefix = instance_name

    @classmethod
    def from_url(cls, url: str, instance_name: str = REDIS_INSTANCE_NAME) -> "RedisCacheService":
        client = aioredis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            socket_timeout=REDIS_SOCKET_TIMEOUT,
        )
        return cls(client, instance_name)

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> str | None:
        try:
            value = await self._client.get(self._key(key))
        except RedisError as e:
            logger.error("Redis read failed for %s: %s", key, e)
            raise CacheInfrastructureError(f"Redis read failed: {e}") from e
        if value is not None:
            logger.debug("Retrieved from cache: %s", key)
        return value

    async def set(self, key: str, value: str, ttl: timedelta) -> None:
        try:
            await self._client.set(self._key(key), value, ex=ttl)
        except RedisError as e:
            logger.error("Redis write failed for %s: %s", key, e)
            raise CacheInfrastructureError(f"Redis write failed: {e}") from e
        logger.debug("Cached %s with expiry %s", key, ttl)

    async def clear(self) -> None:
        try:
            async for name in self._client.scan_iter(match=f"{self._prefix}*"):
                await self._client.delete(name)
        except RedisError as e:
            raise CacheInfrastructureError(f"Redis clear failed: {e}") from e

    async def close(self) -> None:
        await self._client.aclose()
