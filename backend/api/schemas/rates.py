"""
API — 匯率 Response Schemas。
Amounts and rates are emitted as decimal strings ("1.0323") so clients
receive exactly the digits upstream returned.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel


class RateSnapshotResponse(BaseModel):
    """GET /api/v1/rates/latest 與 /convert 回應。"""

    amount: Decimal
    base: str
    date: date
    rates: dict[str, Decimal]


class HistoricalRatesResponse(BaseModel):
    """GET /api/v1/rates/historical 回應。"""

    amount: Decimal
    base: str
    start_date: date
    end_date: date
    page: int
    page_size: int
    total_records: int
    total_pages: int
    rates: dict[date, dict[str, Decimal]]
