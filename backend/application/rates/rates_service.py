"""
Application — 匯率查詢服務（cache-aside）。

每個查詢的流程：
  驗證 → 快取查詢 → 命中則回傳；未命中則透過工廠取得提供者 → 呼叫上游
  → 寫入快取 → 回傳。

驗證失敗時不會觸及快取或提供者。提供者錯誤不寫入快取、原樣拋出，
本層不重試（重試屬於傳輸層）。請求被取消時 asyncio.CancelledError
直接向上傳遞，因此不會寫入任何人都不會讀取的結果。
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import date, timedelta
from decimal import Decimal
from typing import TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from application.rates.queries import (
    ConvertQuery,
    HistoricalRatesQuery,
    LatestRatesQuery,
)
from config.settings import Settings
from domain.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from domain.entities import HistoricalRateSet, RateSnapshot
from domain.errors import ValidationError
from domain.protocols import CacheService, RateProvider
from infrastructure.providers import ProviderFactory
from logging_config import get_logger

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


class RatesQueryService:
    """Latest rates, conversion and historical rates behind one cache."""

    def __init__(
        self,
        provider_factory: ProviderFactory,
        cache: CacheService,
        settings: Settings,
        today: Callable[[], date] = date.today,
    ):
        self._provider_factory = provider_factory
        self._cache = cache
        self._settings = settings
        self._today = today

    async def get_latest_rates(self, base_currency: str) -> RateSnapshot:
        query = LatestRatesQuery(base_currency)
        self._validate(query)

        async def fetch(provider: RateProvider) -> RateSnapshot:
            return await provider.get_latest_rates(query.base_currency)

        return await self._cache_aside(
            query.cache_key(), self._settings.latest_rates_ttl, RateSnapshot, fetch
        )

    async def convert(
        self, from_currency: str, to_currency: str, amount: Decimal
    ) -> RateSnapshot:
        query = ConvertQuery(from_currency, to_currency, amount)
        self._validate(query)

        async def fetch(provider: RateProvider) -> RateSnapshot:
            return await provider.convert(
                query.from_currency, query.to_currency, query.amount
            )

        return await self._cache_aside(
            query.cache_key(), self._settings.conversion_ttl, RateSnapshot, fetch
        )

    async def get_historical_rates(
        self,
        base_currency: str,
        start_date: date,
        end_date: date,
        page: int = DEFAULT_PAGE,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> HistoricalRateSet:
        query = HistoricalRatesQuery(base_currency, start_date, end_date, page, page_size)
        self._validate(query)

        async def fetch(provider: RateProvider) -> HistoricalRateSet:
            return await provider.get_historical_rates(
                query.base_currency,
                query.start_date,
                query.end_date,
                query.page,
                query.page_size,
            )

        return await self._cache_aside(
            query.cache_key(),
            self._settings.historical_rates_ttl,
            HistoricalRateSet,
            fetch,
        )

    # -- internals ----------------------------------------------------------

    def _validate(self, query: LatestRatesQuery | ConvertQuery | HistoricalRatesQuery) -> None:
        errors = query.validate(self._today())
        if errors:
            logger.info("Rejected %s: %s", type(query).__name__, errors)
            raise ValidationError(errors)

    async def _cache_aside(
        self,
        key: str,
        ttl: timedelta,
        model: type[M],
        fetch: Callable[[RateProvider], Awaitable[M]],
    ) -> M:
        try:
            cached = await self._cache.get(key)
            if cached is not None:
                hit = _decode(model, key, cached)
                if hit is not None:
                    logger.info("Cache hit for %s", key)
                    return hit

            logger.debug("Cache miss for %s, calling provider %s", key, self._settings.active_provider)
            provider = self._provider_factory.create_provider(self._settings.active_provider)
            result = await fetch(provider)
            await self._cache.set(key, result.model_dump_json(), ttl)
        except asyncio.CancelledError:
            logger.info("Request for %s cancelled before completion", key)
            raise
        return result


def _decode(model: type[M], key: str, blob: str) -> M | None:
    try:
        return model.model_validate_json(blob)
    except PydanticValidationError:
        logger.warning("Discarding unreadable cache entry %s", key)
        return None
