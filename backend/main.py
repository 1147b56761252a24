"""
Currency Converter — FastAPI 應用程式進入點。
負責建立 App、註冊路由、錯誤對應與管理生命週期。
所有業務邏輯位於 application/rates。
"""

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from api.dependencies import get_cache_service, require_admin
from api.middleware import request_logging_middleware
from api.rate_limit import limiter
from api.routes.rates_routes import router as rates_router
from api.schemas import CacheClearResponse, ErrorResponse, HealthResponse
from application.rates import RatesQueryService
from config.settings import init_settings
from domain.constants import (
    ADMIN_RATE_LIMIT,
    API_PREFIX,
    ERROR_CACHE_UNAVAILABLE,
    ERROR_UNSUPPORTED_PROVIDER,
    ERROR_UPSTREAM,
    ERROR_VALIDATION,
    GENERIC_CACHE_ERROR,
    GENERIC_UPSTREAM_ERROR,
)
from domain.errors import (
    CacheInfrastructureError,
    UnsupportedProviderError,
    UpstreamError,
    ValidationError,
)
from domain.protocols import CacheService
from infrastructure.cache import build_cache_service
from infrastructure.providers import build_provider_factory
from logging_config import get_logger

# Load environment variables from .env file
load_dotenv()
settings = init_settings()

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Lifespan: 建立上游 HTTP client、快取與查詢服務
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info(
        "Currency converter starting (provider=%s, cache=%s)",
        settings.active_provider,
        settings.cache_backend,
    )
    async with httpx.AsyncClient(
        base_url=settings.frankfurter_base_url, timeout=settings.upstream_timeout
    ) as client:
        cache = build_cache_service(settings)
        app.state.cache = cache
        app.state.rates_service = RatesQueryService(
            build_provider_factory(client), cache, settings
        )
        try:
            yield
        finally:
            logger.info("Currency converter shutting down...")
            await cache.close()


# ---------------------------------------------------------------------------
# App Factory
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Currency Converter API",
    description="Exchange rates, conversion and paged historical rates with caching.",
    version="1.0.0",
    lifespan=lifespan,
    # Auth applied per-route, NOT globally (health must be exempt)
)

# Register rate limiter state and exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.middleware("http")(request_logging_middleware)

# CORS middleware for browser clients
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ALLOW_ORIGIN", "http://localhost:3000").split(","),
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["X-API-Key", "X-Request-ID", "Content-Type"],
)


# ---------------------------------------------------------------------------
# Error Handlers — 服務層錯誤原樣拋出，於此對應 HTTP 狀態碼
# ---------------------------------------------------------------------------


def _error(status_code: int, error_code: str, detail: str, errors=None) -> JSONResponse:
    body = ErrorResponse(error_code=error_code, detail=detail, errors=errors or [])
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(ValidationError)
async def validation_error_handler(_request: Request, exc: ValidationError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, ERROR_VALIDATION, str(exc), exc.errors)


@app.exception_handler(UnsupportedProviderError)
async def unsupported_provider_handler(
    _request: Request, exc: UnsupportedProviderError
) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, ERROR_UNSUPPORTED_PROVIDER, str(exc))


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    logger.error("Upstream failure on %s: %s", request.url.path, exc)
    return _error(status.HTTP_502_BAD_GATEWAY, ERROR_UPSTREAM, GENERIC_UPSTREAM_ERROR)


@app.exception_handler(CacheInfrastructureError)
async def cache_error_handler(
    request: Request, exc: CacheInfrastructureError
) -> JSONResponse:
    logger.error("Cache failure on %s: %s", request.url.path, exc)
    return _error(
        status.HTTP_503_SERVICE_UNAVAILABLE, ERROR_CACHE_UNAVAILABLE, GENERIC_CACHE_ERROR
    )


# ---------------------------------------------------------------------------
# Health Check
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse, summary="Health check")
def health_check() -> dict:
    """Health check endpoint - NO auth (Docker healthcheck must access without key)."""
    return {
        "status": "ok",
        "service": "currency-converter",
        "provider": settings.active_provider,
        "cache_backend": settings.cache_backend,
    }


@app.post(
    "/admin/cache/clear",
    response_model=CacheClearResponse,
    summary="Clear every cached rate response",
    dependencies=[Depends(require_admin)],
)
@limiter.limit(ADMIN_RATE_LIMIT)
async def clear_cache(
    request: Request, cache: CacheService = Depends(get_cache_service)
) -> dict:
    """Admin endpoint - WITH auth and rate limiting."""
    await cache.clear()
    logger.info("Cleared rate cache (%s)", settings.cache_backend)
    return {"status": "ok", "cache_backend": settings.cache_backend}


# ---------------------------------------------------------------------------
# 註冊路由
# ---------------------------------------------------------------------------

app.include_router(rates_router, prefix=API_PREFIX)
