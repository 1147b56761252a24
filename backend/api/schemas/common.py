"""
API — 共用/通用 Response Schemas。
"""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """GET /health 回應。"""

    status: str
    service: str
    provider: str
    cache_backend: str


class ErrorResponse(BaseModel):
    """錯誤回應（驗證失敗、上游或快取不可用）。"""

    error_code: str
    detail: str
    errors: list[str] = []


class CacheClearResponse(BaseModel):
    """POST /admin/cache/clear 回應。"""

    status: str
    cache_backend: str
