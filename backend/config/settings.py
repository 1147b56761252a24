"""
Config — 從環境變數建立執行期設定。
在應用程式啟動時呼叫一次 init_settings()，並將回傳的 Settings
明確傳入各服務（不依賴全域可變狀態）。
"""

import os
from dataclasses import dataclass
from datetime import timedelta

from domain import constants


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the rates service."""

    active_provider: str = constants.DEFAULT_ACTIVE_PROVIDER
    frankfurter_base_url: str = constants.FRANKFURTER_BASE_URL
    upstream_timeout: float = constants.UPSTREAM_REQUEST_TIMEOUT
    cache_backend: str = constants.DEFAULT_CACHE_BACKEND
    cache_dir: str = constants.DISK_CACHE_DIR
    redis_url: str = constants.REDIS_URL
    redis_instance_name: str = constants.REDIS_INSTANCE_NAME
    latest_rates_ttl: timedelta = timedelta(seconds=constants.LATEST_RATES_CACHE_TTL)
    conversion_ttl: timedelta = timedelta(seconds=constants.CONVERSION_CACHE_TTL)
    historical_rates_ttl: timedelta = timedelta(
        seconds=constants.HISTORICAL_RATES_CACHE_TTL
    )


def _env_seconds(name: str, default: int) -> timedelta:
    return timedelta(seconds=int(os.getenv(name, default)))


def init_settings() -> Settings:
    """Override domain constants from environment and build Settings. Call once at startup."""
    data_dir = os.getenv("DATA_DIR")
    if data_dir:
        constants.DATA_DIR = data_dir
        constants.DISK_CACHE_DIR = os.path.join(data_dir, "rates_cache")

    return Settings(
        active_provider=os.getenv("ACTIVE_PROVIDER", constants.DEFAULT_ACTIVE_PROVIDER),
        frankfurter_base_url=os.getenv(
            "FRANKFURTER_BASE_URL", constants.FRANKFURTER_BASE_URL
        ),
        upstream_timeout=float(
            os.getenv("UPSTREAM_REQUEST_TIMEOUT", constants.UPSTREAM_REQUEST_TIMEOUT)
        ),
        cache_backend=os.getenv("CACHE_BACKEND", constants.DEFAULT_CACHE_BACKEND)
        .strip()
        .lower(),
        cache_dir=os.getenv("CACHE_DIR", constants.DISK_CACHE_DIR),
        redis_url=os.getenv("REDIS_URL", constants.REDIS_URL),
        redis_instance_name=os.getenv(
            "REDIS_INSTANCE_NAME", constants.REDIS_INSTANCE_NAME
        ),
        latest_rates_ttl=_env_seconds(
            "LATEST_RATES_CACHE_TTL", constants.LATEST_RATES_CACHE_TTL
        ),
        conversion_ttl=_env_seconds(
            "CONVERSION_CACHE_TTL", constants.CONVERSION_CACHE_TTL
        ),
        historical_rates_ttl=_env_seconds(
            "HISTORICAL_RATES_CACHE_TTL", constants.HISTORICAL_RATES_CACHE_TTL
        ),
    )
