"""
HTTP middleware: request correlation IDs and timing logs.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response

from backend_altscore.altscore_logging import bind_request

REQUEST_ID_HEADER = "X-Request-ID"


async def log_requests(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """Bind a request id (client-supplied or generated) and log method, path, status, duration."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    log = bind_request(request_id)
    start = time.perf_counter()
    response = await call_next(request)
    log.info(
        "http_request",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    response.headers[REQUEST_ID_HEADER] = request_id
    return response
