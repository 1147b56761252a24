"""
API authentication and service dependencies for the rates backend.
"""

import hmac
import os
from collections.abc import Callable
from typing import Annotated

from fastapi import Header, HTTPException, Request, status

from application.rates import RatesQueryService
from domain.constants import ROLE_ADMIN, ROLE_USER
from domain.protocols import CacheService


def configured_keys() -> list[tuple[str, str]]:
    """(api_key, role) pairs read from the environment on every request."""
    keys = []
    user_key = os.getenv("RATES_API_KEY_USER")
    admin_key = os.getenv("RATES_API_KEY_ADMIN")
    if user_key:
        keys.append((user_key, ROLE_USER))
    if admin_key:
        keys.append((admin_key, ROLE_ADMIN))
    return keys


def resolve_role(x_api_key: str, keys: list[tuple[str, str]]) -> str | None:
    role = None
    # Compare against every key so timing does not reveal which one matched.
    for expected, key_role in keys:
        if hmac.compare_digest(x_api_key.encode(), expected.encode()):
            role = key_role
    return role


def require_roles(*roles: str) -> Callable[..., None]:
    """
    Build a dependency that admits callers whose X-API-Key maps to one of ``roles``.

    Graceful dev-mode fallback: if neither RATES_API_KEY_USER nor
    RATES_API_KEY_ADMIN is set, auth is disabled.

    Raises:
        HTTPException: 401 if the key is missing or unknown, 403 if its role
        is not allowed (when auth is enabled)
    """

    def dependency(
        x_api_key: Annotated[str | None, Header()] = None,
    ) -> None:
        keys = configured_keys()

        # Dev mode: auth disabled when no key is configured
        if not keys:
            return

        if not x_api_key:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Missing X-API-Key header",
            )

        role = resolve_role(x_api_key, keys)
        if role is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid API key",
            )
        if role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {' or '.join(roles)}",
            )

    return dependency


require_user = require_roles(ROLE_USER, ROLE_ADMIN)
require_admin = require_roles(ROLE_ADMIN)


def get_rates_service(request: Request) -> RatesQueryService:
    """Service instance built in the application lifespan."""
    return request.app.state.rates_service


def get_cache_service(request: Request) -> CacheService:
    """Cache store built in the application lifespan."""
    return request.app.state.cache
