"""Request logging middleware with request ID correlation."""

import time
import uuid

from fastapi import Request, Response

from patchpoint.utils.logger import bind_request_id, get_logger

log = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


async def logging_middleware(request: Request, call_next) -> Response:
    """Bind a request ID, time the request and log its outcome."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    bind_request_id(request_id)

    start = time.perf_counter()
    log.debug("request started", method=request.method, path=request.url.path)

    response = await call_next(request)

    duration_ms = round((time.perf_counter() - start) * 1000, 2)
    response.headers[REQUEST_ID_HEADER] = request_id
    log.info(
        "request completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=duration_ms,
    )
    return response
