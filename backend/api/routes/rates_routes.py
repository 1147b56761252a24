"""
API — 匯率查詢路由。
Latest rates and conversion need the User or Admin role; historical rates
need Admin. Currency codes are trimmed and upper-cased before validation.
"""

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_rates_service, require_admin, require_user
from api.rate_limit import limiter
from api.schemas import HistoricalRatesResponse, RateSnapshotResponse
from application.rates import RatesQueryService
from domain.constants import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    RATES_RATE_LIMIT,
)
from domain.entities import HistoricalRateSet, RateSnapshot

router = APIRouter(prefix="/rates", tags=["Rates"])


# ---------------------------------------------------------------------------
# Mapping Helpers
# ---------------------------------------------------------------------------


def _normalize_code(code: str | None) -> str:
    return (code or "").strip().upper()


def _to_snapshot_response(s: RateSnapshot) -> RateSnapshotResponse:
    return RateSnapshotResponse(
        amount=s.amount, base=s.base_currency, date=s.date, rates=s.rates
    )


def _to_historical_response(h: HistoricalRateSet) -> HistoricalRatesResponse:
    return HistoricalRatesResponse(
        amount=h.amount,
        base=h.base_currency,
        start_date=h.start_date,
        end_date=h.end_date,
        page=h.page,
        page_size=h.page_size,
        total_records=h.total_records,
        total_pages=h.total_pages,
        rates=h.rates,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/latest",
    response_model=RateSnapshotResponse,
    summary="Latest exchange rates for a base currency",
    dependencies=[Depends(require_user)],
)
@limiter.limit(RATES_RATE_LIMIT)
async def get_latest_rates(
    request: Request,
    base_currency: str | None = None,
    service: RatesQueryService = Depends(get_rates_service),
) -> RateSnapshotResponse:
    """
    取得指定基準幣別的最新匯率。

    Currencies TRY, PLN, THB, MXN are never returned.
    """
    result = await service.get_latest_rates(_normalize_code(base_currency))
    return _to_snapshot_response(result)


@router.get(
    "/convert",
    response_model=RateSnapshotResponse,
    summary="Convert an amount between two currencies",
    dependencies=[Depends(require_user)],
)
@limiter.limit(RATES_RATE_LIMIT)
async def convert_currency(
    request: Request,
    from_currency: str | None = None,
    to_currency: str | None = None,
    amount: Decimal | None = None,
    service: RatesQueryService = Depends(get_rates_service),
) -> RateSnapshotResponse:
    """
    以最新匯率換算金額。

    Currencies TRY, PLN, THB, MXN are rejected with 400.
    """
    result = await service.convert(
        _normalize_code(from_currency), _normalize_code(to_currency), amount
    )
    return _to_snapshot_response(result)


@router.get(
    "/historical",
    response_model=HistoricalRatesResponse,
    summary="Paged historical exchange rates",
    dependencies=[Depends(require_admin)],
)
@limiter.limit(RATES_RATE_LIMIT)
async def get_historical_rates(
    request: Request,
    start_date: date,
    end_date: date,
    base_currency: str | None = None,
    page: int = DEFAULT_PAGE,
    page_size: int = DEFAULT_PAGE_SIZE,
    service: RatesQueryService = Depends(get_rates_service),
) -> HistoricalRatesResponse:
    """
    取得日期區間內的歷史匯率（依日期升冪排序並分頁）。

    Query Parameters:
    - page: 頁碼，從 1 開始（預設 1）
    - page_size: 每頁筆數 1–100（預設 10）
    """
    result = await service.get_historical_rates(
        _normalize_code(base_currency), start_date, end_date, page, page_size
    )
    return _to_historical_response(result)
