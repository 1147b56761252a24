"""
Domain — 請求參數驗證規則。
Each rule returns a list of human-readable messages; an empty list means the
value is acceptable. Callers collect the messages and raise
``ValidationError`` once, so a client sees every problem at the same time.
"""

import re
from datetime import date
from decimal import Decimal

from domain.constants import (
    CURRENCY_CODE_PATTERN,
    EXCLUDED_CURRENCIES_MESSAGE,
    MAX_PAGE_SIZE,
)
from domain.rates import is_excluded_currency

_CURRENCY_RE = re.compile(CURRENCY_CODE_PATTERN)


def check_currency_code(value: str | None, field: str) -> list[str]:
    if not value:
        return [f"{field} is required."]
    if not _CURRENCY_RE.fullmatch(value):
        return [f"{field} must be a valid 3-letter ISO code."]
    return []


def check_supported_currencies(*codes: str | None) -> list[str]:
    if any(is_excluded_currency(code) for code in codes):
        return [EXCLUDED_CURRENCIES_MESSAGE]
    return []


def check_amount(amount: Decimal | None) -> list[str]:
    if amount is None or not amount.is_finite() or amount <= 0:
        return ["Amount must be positive."]
    return []


def check_date_range(start_date: date, end_date: date, today: date) -> list[str]:
    if start_date > today or end_date > today:
        return ["Dates cannot be in the future."]
    if end_date < start_date:
        return ["EndDate must be greater than or equal to StartDate."]
    return []


def check_pagination(page: int, page_size: int) -> list[str]:
    errors = []
    if page < 1:
        errors.append("Page must be a positive integer.")
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        errors.append(f"Page size must be between 1 and {MAX_PAGE_SIZE}.")
    return errors
