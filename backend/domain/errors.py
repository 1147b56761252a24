"""
Domain — 錯誤分類。
Service layers raise these unchanged; only the API layer maps them to HTTP
status codes. Cancellation is not modelled here: it surfaces as
``asyncio.CancelledError``.
"""


class CurrencyServiceError(Exception):
    """Base class for every error the rates pipeline raises on purpose."""


class ValidationError(CurrencyServiceError):
    """Request parameters failed validation. Client fault."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class UnsupportedProviderError(CurrencyServiceError):
    """No rate provider is registered under the requested name."""

    def __init__(self, provider_name: str):
        self.provider_name = provider_name
        super().__init__(f"Provider {provider_name} not supported.")


class UpstreamError(CurrencyServiceError):
    """The upstream provider failed, or answered with something unusable."""


class CacheInfrastructureError(CurrencyServiceError):
    """The cache store could not be read or written."""
