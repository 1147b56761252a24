"""
Shared test fixtures — TestClient, in-memory cache, scripted rate provider.
"""

import os
import tempfile

# Set environment variables BEFORE any app imports to avoid /app filesystem access
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "rates_test_logs"))
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ["CACHE_BACKEND"] = "memory"
os.environ["ACTIVE_PROVIDER"] = "fake"

import domain.constants  # noqa: E402

domain.constants.DISK_CACHE_DIR = os.path.join(
    tempfile.gettempdir(), "rates_test_cache"
)

from collections.abc import Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from api.dependencies import get_cache_service, get_rates_service  # noqa: E402
from api.rate_limit import limiter  # noqa: E402
from application.rates import RatesQueryService  # noqa: E402
from config.settings import Settings  # noqa: E402
from infrastructure.cache import MemoryCacheService  # noqa: E402
from infrastructure.providers import ProviderFactory  # noqa: E402
from main import app  # noqa: E402
from tests.fakes import FakeRateProvider  # noqa: E402

TEST_SETTINGS = Settings(active_provider="fake", cache_backend="memory")


@pytest.fixture(autouse=True)
def _no_api_keys(monkeypatch):
    """Start every test in dev mode (auth disabled); tests opt in via patch.dict."""
    monkeypatch.delenv("RATES_API_KEY_USER", raising=False)
    monkeypatch.delenv("RATES_API_KEY_ADMIN", raising=False)


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture()
def fake_provider() -> FakeRateProvider:
    return FakeRateProvider()


@pytest.fixture()
def memory_cache() -> MemoryCacheService:
    return MemoryCacheService()


@pytest.fixture()
def rates_service(fake_provider, memory_cache) -> RatesQueryService:
    factory = ProviderFactory({"fake": fake_provider})
    return RatesQueryService(factory, memory_cache, TEST_SETTINGS)


@pytest.fixture()
def client(rates_service, memory_cache) -> Generator[TestClient, None, None]:
    """TestClient wired to the fake provider and the in-memory cache."""
    app.dependency_overrides[get_rates_service] = lambda: rates_service
    app.dependency_overrides[get_cache_service] = lambda: memory_cache

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
