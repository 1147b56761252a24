"""application.rates sub-package — exchange-rate query handlers."""

from application.rates.queries import ConvertQuery, HistoricalRatesQuery, LatestRatesQuery
from application.rates.rates_service import RatesQueryService

__all__ = ["ConvertQuery", "HistoricalRatesQuery", "LatestRatesQuery", "RatesQueryService"]
