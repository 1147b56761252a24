"""
Rate limiter instance — shared across all routes to avoid circular imports.
"""

import hashlib

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import configured_keys, resolve_role


def client_key(request: Request) -> str:
    """
    Budget per configured API key; everyone else is budgeted per client IP.

    Unknown keys, and any key while auth is disabled, fall back to the IP so
    rotating the header value never buys a fresh budget.
    """
    api_key = request.headers.get("X-API-Key")
    if api_key and resolve_role(api_key, configured_keys()) is not None:
        return "key:" + hashlib.sha256(api_key.encode()).hexdigest()[:16]
    return "ip:" + get_remote_address(request)


# Shared limiter instance used by main.py and route decorators
limiter = Limiter(key_func=client_key)
