"""Request logging middleware.

Logs every HTTP request with method, path, status code, latency, a short
request ID and the caller's correlation ID. The request_id is injected into
request.state so router handlers can include it in ApiResponse; the
correlation ID (taken from X-Correlation-ID or generated) is echoed back.

Log format:
    INFO [POST] /api/v1/trading/orders → 201 (23ms) req_a1b2c3d4e5f6 corr=…
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("tp.request")

CORRELATION_HEADER = "X-Correlation-ID"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.request_id = f"req_{uuid.uuid4().hex[:12]}"
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        response.headers[CORRELATION_HEADER] = correlation_id
        logger.info(
            "[%s] %s → %d (%.0fms) %s corr=%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request.state.request_id,
            correlation_id,
        )
        return response
