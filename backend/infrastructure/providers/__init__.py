"""infrastructure.providers sub-package — upstream exchange-rate providers.

``build_provider_factory`` wires the provider registry at startup.
"""

import httpx

from domain.constants import PROVIDER_FRANKFURTER
from infrastructure.providers.factory import ProviderFactory
from infrastructure.providers.frankfurter import FrankfurterProvider


def build_provider_factory(client: httpx.AsyncClient) -> ProviderFactory:
    """Register every provider this service ships with."""
    return ProviderFactory({PROVIDER_FRANKFURTER: FrankfurterProvider(client)})


__all__ = ["FrankfurterProvider", "ProviderFactory", "build_provider_factory"]
