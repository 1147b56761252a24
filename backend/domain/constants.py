"""
Domain — 集中管理所有常數與閾值。
避免散落在各模組中的 magic numbers / magic strings。
"""

import os as _os

# ---------------------------------------------------------------------------
# Currency Rules
# ---------------------------------------------------------------------------
CURRENCY_CODE_PATTERN = r"^[A-Z]{3}$"
# Never returned in any rates mapping, and rejected as conversion inputs.
EXCLUDED_CURRENCIES: frozenset[str] = frozenset({"TRY", "PLN", "THB", "MXN"})
EXCLUDED_CURRENCIES_MESSAGE = "Currencies TRY, PLN, THB, MXN are not supported."

# ---------------------------------------------------------------------------
# Historical Pagination
# ---------------------------------------------------------------------------
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# ---------------------------------------------------------------------------
# Cache Configuration
# ---------------------------------------------------------------------------
LATEST_RATES_CACHE_TTL = 3600  # 1 hour
CONVERSION_CACHE_TTL = 3600  # 1 hour
HISTORICAL_RATES_CACHE_TTL = 86400  # 24 hours

CACHE_KEY_LATEST = "rates:latest"
CACHE_KEY_CONVERT = "convert"
CACHE_KEY_HISTORICAL = "historical"

CACHE_BACKEND_DISK = "disk"
CACHE_BACKEND_REDIS = "redis"
CACHE_BACKEND_MEMORY = "memory"
DEFAULT_CACHE_BACKEND = CACHE_BACKEND_DISK

# ---------------------------------------------------------------------------
# Persistent Data Directory — root for all app-written state files
# ---------------------------------------------------------------------------
DATA_DIR = _os.getenv("DATA_DIR", "/app/data")

# ---------------------------------------------------------------------------
# Disk Cache — 持久化快取，容器重啟後仍可使用
# ---------------------------------------------------------------------------
DISK_CACHE_DIR = "/app/data/rates_cache"
DISK_CACHE_SIZE_LIMIT = 100 * 1024 * 1024  # 100 MB

# ---------------------------------------------------------------------------
# Memory Cache
# ---------------------------------------------------------------------------
MEMORY_CACHE_MAXSIZE = 1024

# ---------------------------------------------------------------------------
# Redis Cache
# ---------------------------------------------------------------------------
REDIS_URL = "redis://localhost:6379/0"
REDIS_INSTANCE_NAME = "CurrencyConverter:"
REDIS_SOCKET_TIMEOUT = 5.0

# ---------------------------------------------------------------------------
# Upstream Provider (Frankfurter)
# ---------------------------------------------------------------------------
PROVIDER_FRANKFURTER = "frankfurter"
DEFAULT_ACTIVE_PROVIDER = PROVIDER_FRANKFURTER
FRANKFURTER_BASE_URL = "https://api.frankfurter.dev/v1/"
UPSTREAM_REQUEST_TIMEOUT = 10.0  # seconds

# Retry (429 / transport errors only)
UPSTREAM_RETRY_ATTEMPTS = 3
UPSTREAM_RETRY_WAIT_MIN = 1  # seconds
UPSTREAM_RETRY_WAIT_MAX = 8  # seconds

# Circuit breaker
UPSTREAM_CIRCUIT_BREAKER_THRESHOLD = 5  # consecutive failures
UPSTREAM_CIRCUIT_BREAKER_COOLDOWN = 60  # seconds

# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------
API_PREFIX = "/api/v1"
ROLE_USER = "User"
ROLE_ADMIN = "Admin"
RATES_RATE_LIMIT = _os.getenv("RATES_RATE_LIMIT", "100/minute")
ADMIN_RATE_LIMIT = "10/minute"
REQUEST_ID_HEADER = "X-Request-ID"

# ---------------------------------------------------------------------------
# Error Codes
# ---------------------------------------------------------------------------
ERROR_VALIDATION = "VALIDATION_ERROR"
ERROR_UNSUPPORTED_PROVIDER = "UNSUPPORTED_PROVIDER"
ERROR_UPSTREAM = "UPSTREAM_ERROR"
ERROR_CACHE_UNAVAILABLE = "CACHE_UNAVAILABLE"

GENERIC_UPSTREAM_ERROR = "The exchange-rate provider is unavailable. Please try again later."
GENERIC_CACHE_ERROR = "The rate cache is unavailable. Please try again later."
