from datetime import date, timedelta
from decimal import Decimal
from typing import Protocol, runtime_checkable

from domain.entities import HistoricalRateSet, RateSnapshot


@runtime_checkable
class RateProvider(Protocol):
    """Interface for exchange-rate providers (Frankfurter, etc.)."""

    async def get_latest_rates(self, base_currency: str) -> RateSnapshot:
        """Latest rates for one base currency, excluded codes removed."""
        ...

    async def convert(
        self, from_currency: str, to_currency: str, amount: Decimal
    ) -> RateSnapshot:
        """Converted amount of from_currency expressed in to_currency."""
        ...

    async def get_historical_rates(
        self,
        base_currency: str,
        start_date: date,
        end_date: date,
        page: int,
        page_size: int,
    ) -> HistoricalRateSet:
        """One page of dated rates within [start_date, end_date]."""
        ...


@runtime_checkable
class CacheService(Protocol):
    """String-keyed blob store with a per-entry expiry."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl: timedelta) -> None: ...

    async def clear(self) -> None: ...

    async def close(self) -> None: ...
