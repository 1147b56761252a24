"""
Domain — 匯率實體。
Frozen pydantic models so the same object can be returned to callers and
stored in the cache as JSON without losing decimal precision.
"""

import datetime
import math
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, computed_field


class RateSnapshot(BaseModel):
    """Rates for one base currency on one day (latest lookup or conversion)."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal = Decimal("1")
    base_currency: str
    date: datetime.date
    rates: dict[str, Decimal] = Field(default_factory=dict)


class HistoricalRateSet(BaseModel):
    """One page of a dated rate series."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal = Decimal("1")
    base_currency: str
    start_date: datetime.date
    end_date: datetime.date
    page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    # Count reported by upstream, before the date window and pagination.
    total_records: int = Field(ge=0)
    rates: dict[datetime.date, dict[str, Decimal]] = Field(default_factory=dict)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_records / self.page_size)
