"""
Domain — 匯率資料純函式。
Currency exclusion, amount formatting and historical pagination.
不依賴任何外部服務或框架。
"""

from collections.abc import Mapping
from datetime import date
from decimal import Decimal

from domain.constants import EXCLUDED_CURRENCIES


def is_excluded_currency(code: str | None) -> bool:
    return (code or "").strip().upper() in EXCLUDED_CURRENCIES


def strip_excluded(rates: Mapping[str, Decimal]) -> dict[str, Decimal]:
    """Return a copy of ``rates`` without the excluded currency codes."""
    return {ccy: rate for ccy, rate in rates.items() if ccy not in EXCLUDED_CURRENCIES}


def format_amount(amount: Decimal) -> str:
    """
    Canonical text form of a monetary amount.

    Logically equal amounts give the same string (``100``, ``100.00`` and
    ``1E+2`` all give ``"100"``), so it is safe to use in cache keys and
    upstream query strings.
    """
    return format(amount.normalize(), "f")


def page_historical_rates(
    rates: Mapping[date, Mapping[str, Decimal]],
    start_date: date,
    end_date: date,
    page: int,
    page_size: int,
) -> dict[date, dict[str, Decimal]]:
    """
    Cut one page out of a dated rate series.

    Keeps dates within [start_date, end_date], sorts them ascending, skips
    ``(page - 1) * page_size`` entries, keeps ``page_size`` of the rest and
    strips excluded currencies from each kept day.
    """
    in_window = sorted(d for d in rates if start_date <= d <= end_date)
    offset = (page - 1) * page_size
    return {d: strip_excluded(rates[d]) for d in in_window[offset : offset + page_size]}
