"""
API — 請求關聯 ID 與存取日誌中介層。
Sets ``request_id_var`` for every log record emitted while serving the
request, echoes it in the ``X-Request-ID`` response header and logs one line
per request with method, path, client IP, status and duration.
"""

import time
import uuid

from fastapi import Request
from starlette.responses import Response

from domain.constants import REQUEST_ID_HEADER
from logging_config import get_logger, request_id_var

logger = get_logger("api.access")


async def request_logging_middleware(request: Request, call_next) -> Response:
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    token = request_id_var.set(request_id)
    client_ip = request.client.host if request.client else "-"
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "Request: %s %s from %s failed", request.method, request.url.path, client_ip
        )
        raise
    else:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "Request: %s %s from %s returned %d in %.1fms",
            request.method,
            request.url.path,
            client_ip,
            response.status_code,
            elapsed_ms,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
    finally:
        request_id_var.reset(token)
