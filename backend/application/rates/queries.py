"""
Application — 匯率查詢物件。
每個查詢負責自身的參數驗證與快取鍵（固定欄位順序、ISO 日期格式）。
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from domain.constants import (
    CACHE_KEY_CONVERT,
    CACHE_KEY_HISTORICAL,
    CACHE_KEY_LATEST,
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
)
from domain.rates import format_amount
from domain.validation import (
    check_amount,
    check_currency_code,
    check_date_range,
    check_pagination,
    check_supported_currencies,
)


@dataclass(frozen=True)
class LatestRatesQuery:
    base_currency: str

    def validate(self, today: date) -> list[str]:
        return check_currency_code(self.base_currency, "Base currency")

    def cache_key(self) -> str:
        return f"{CACHE_KEY_LATEST}:{self.base_currency}"


@dataclass(frozen=True)
class ConvertQuery:
    from_currency: str
    to_currency: str
    amount: Decimal

    def validate(self, today: date) -> list[str]:
        return [
            *check_currency_code(self.from_currency, "From currency"),
            *check_currency_code(self.to_currency, "To currency"),
            *check_supported_currencies(self.from_currency, self.to_currency),
            *check_amount(self.amount),
        ]

    def cache_key(self) -> str:
        return (
            f"{CACHE_KEY_CONVERT}:{self.from_currency}:{self.to_currency}:"
            f"{format_amount(self.amount)}"
        )


@dataclass(frozen=True)
class HistoricalRatesQuery:
    base_currency: str
    start_date: date
    end_date: date
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE

    def validate(self, today: date) -> list[str]:
        return [
            *check_currency_code(self.base_currency, "Base currency"),
            *check_date_range(self.start_date, self.end_date, today),
            *check_pagination(self.page, self.page_size),
        ]

    def cache_key(self) -> str:
        return (
            f"{CACHE_KEY_HISTORICAL}:{self.base_currency}:"
            f"{self.start_date.isoformat()}:"
            f"{self.end_date.isoformat()}:"
            f"{self.page}:{self.page_size}"
        )
