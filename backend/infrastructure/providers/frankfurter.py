"""
Infrastructure — Frankfurter 匯率 API 適配器。
負責外部 API 呼叫、回應解析、排除幣別過濾與歷史資料分頁。
含 tenacity 重試（僅 HTTP 429 與傳輸層錯誤）與連續失敗斷路器。
任何無法使用的回應皆以 UpstreamError 拋出，不在此層降級或快取。
"""

import time
from datetime import date
from decimal import Decimal

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from domain.constants import (
    UPSTREAM_CIRCUIT_BREAKER_COOLDOWN,
    UPSTREAM_CIRCUIT_BREAKER_THRESHOLD,
    UPSTREAM_RETRY_ATTEMPTS,
    UPSTREAM_RETRY_WAIT_MAX,
    UPSTREAM_RETRY_WAIT_MIN,
)
from domain.entities import HistoricalRateSet, RateSnapshot
from domain.errors import UpstreamError
from domain.rates import format_amount, page_historical_rates, strip_excluded
from logging_config import get_logger

logger = get_logger(__name__)

_INVALID_RESPONSE = "Invalid response from Frankfurter API"


# ---------------------------------------------------------------------------
# Upstream payloads
# ---------------------------------------------------------------------------


class _LatestPayload(BaseModel):
    amount: Decimal
    base: str
    date: date
    rates: dict[str, Decimal]


class _RangePayload(BaseModel):
    amount: Decimal
    base: str
    start_date: date | None = None
    end_date: date | None = None
    rates: dict[date, dict[str, Decimal]]


# ---------------------------------------------------------------------------
# Retry policy：僅對 429 與暫時性網路錯誤重試
# ---------------------------------------------------------------------------


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code == httpx.codes.TOO_MANY_REQUESTS
    return isinstance(exc, httpx.TransportError)


def _counts_as_outage(exc: httpx.HTTPError) -> bool:
    """4xx answers other than 408/429 are caused by the request, not by upstream health."""
    if isinstance(exc, httpx.HTTPStatusError):
        code = exc.response.status_code
        return (
            code >= 500
            or code == httpx.codes.REQUEST_TIMEOUT
            or code == httpx.codes.TOO_MANY_REQUESTS
        )
    return True


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    logger.warning(
        "Frankfurter retry %d after %.2fs due to %s",
        state.attempt_number,
        state.next_action.sleep if state.next_action else 0.0,
        exc,
    )


class FrankfurterProvider:
    """Rate provider backed by https://www.frankfurter.app."""

    name = "frankfurter"

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        retry_attempts: int = UPSTREAM_RETRY_ATTEMPTS,
        retry_wait_min: float = UPSTREAM_RETRY_WAIT_MIN,
        retry_wait_max: float = UPSTREAM_RETRY_WAIT_MAX,
        breaker_threshold: int = UPSTREAM_CIRCUIT_BREAKER_THRESHOLD,
        breaker_cooldown: float = UPSTREAM_CIRCUIT_BREAKER_COOLDOWN,
    ):
        self._client = client
        self._retry_attempts = retry_attempts
        self._retry_wait_min = retry_wait_min
        self._retry_wait_max = retry_wait_max
        self._breaker_threshold = breaker_threshold
        self._breaker_cooldown = breaker_cooldown
        self._consecutive_failures = 0
        self._circuit_open_until = 0.0

    # -- public API ---------------------------------------------------------

    async def get_latest_rates(self, base_currency: str) -> RateSnapshot:
        data = await self._get_json("latest", {"from": base_currency})
        payload = _parse(_LatestPayload, data)
        return _to_snapshot(payload)

    async def convert(
        self, from_currency: str, to_currency: str, amount: Decimal
    ) -> RateSnapshot:
        params = {
            "from": from_currency,
            "to": to_currency,
            "amount": format_amount(amount),
        }
        data = await self._get_json("latest", params)
        payload = _parse(_LatestPayload, data)
        return _to_snapshot(payload)

    async def get_historical_rates(
        self,
        base_currency: str,
        start_date: date,
        end_date: date,
        page: int,
        page_size: int,
    ) -> HistoricalRateSet:
        path = f"{start_date.isoformat()}..{end_date.isoformat()}"
        data = await self._get_json(path, {"from": base_currency})
        payload = _parse(_RangePayload, data)

        # Frankfurter has no pagination; the window, sort and page are applied here.
        return HistoricalRateSet(
            amount=payload.amount,
            base_currency=base_currency,
            start_date=start_date,
            end_date=end_date,
            page=page,
            page_size=page_size,
            total_records=len(payload.rates),
            rates=page_historical_rates(
                payload.rates, start_date, end_date, page, page_size
            ),
        )

    # -- circuit breaker ----------------------------------------------------

    def is_available(self) -> bool:
        """Returns False while the circuit breaker is open."""
        return time.monotonic() >= self._circuit_open_until

    def _record_success(self) -> None:
        self._consecutive_failures = 0

    def _record_failure(self) -> None:
        self._consecutive_failures += 1
        if self._consecutive_failures >= self._breaker_threshold:
            self._circuit_open_until = time.monotonic() + self._breaker_cooldown
            logger.warning(
                "Frankfurter circuit breaker opened after %d failures (cooldown=%ss)",
                self._consecutive_failures,
                self._breaker_cooldown,
            )

    # -- HTTP ---------------------------------------------------------------

    async def _get_json(self, path: str, params: dict[str, str]) -> object:
        if not self.is_available():
            logger.debug("Frankfurter circuit breaker open, skipping %s", path)
            raise UpstreamError("Frankfurter API circuit breaker is open")

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._retry_attempts),
                wait=wait_exponential(
                    min=self._retry_wait_min, max=self._retry_wait_max
                ),
                retry=retry_if_exception(_is_retryable),
                before_sleep=_log_retry,
                reraise=True,
            ):
                with attempt:
                    resp = await self._client.get(path, params=params)
                    resp.raise_for_status()
            data = resp.json(parse_float=Decimal)
        except httpx.HTTPError as e:
            if _counts_as_outage(e):
                self._record_failure()
            logger.warning("Frankfurter %s request failed: %s", path, e)
            raise UpstreamError(f"Frankfurter API request failed: {e}") from e
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError (non-UTF-8 body)
            self._record_failure()
            logger.warning("Frankfurter %s returned non-JSON body", path)
            raise UpstreamError(_INVALID_RESPONSE) from e

        if data is None:
            self._record_failure()
            raise UpstreamError(_INVALID_RESPONSE)

        self._record_success()
        return data


def _parse(model: type[BaseModel], data: object):
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        logger.warning("Frankfurter response did not match %s: %s", model.__name__, e)
        raise UpstreamError(_INVALID_RESPONSE) from e


def _to_snapshot(payload: _LatestPayload) -> RateSnapshot:
    return RateSnapshot(
        amount=payload.amount,
        base_currency=payload.base,
        date=payload.date,
        rates=strip_excluded(payload.rates),
    )
