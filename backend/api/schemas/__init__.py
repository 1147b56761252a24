"""API response schemas."""

from api.schemas.common import CacheClearResponse, ErrorResponse, HealthResponse  # noqa: F401
from api.schemas.rates import HistoricalRatesResponse, RateSnapshotResponse  # noqa: F401
