"""
Infrastructure — 匯率提供者工廠。
Registry is fixed when the factory is built at startup; lookups are
case-insensitive.
"""

from collections.abc import Mapping

from domain.errors import UnsupportedProviderError
from domain.protocols import RateProvider
from logging_config import get_logger

logger = get_logger(__name__)


class ProviderFactory:
    """Resolves a provider name to one of the registered providers."""

    def __init__(self, providers: Mapping[str, RateProvider]):
        self._providers = {
            name.strip().lower(): provider for name, provider in providers.items()
        }

    @property
    def available(self) -> list[str]:
        return sorted(self._providers)

    def create_provider(self, name: str) -> RateProvider:
        provider = self._providers.get((name or "").strip().lower())
        if provider is None:
            logger.warning(
                "Unknown rate provider %r (available: %s)", name, self.available
            )
            raise UnsupportedProviderError(name)
        return provider
