# =============================================================================
# app/middleware.py - Request Correlation Middleware
# =============================================================================
# Reads `X-Request-ID` (or generates one), binds it to the logging context,
# reflects it in the response and logs one line per request with latency.
# =============================================================================

from __future__ import annotations

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.logging_utils import request_id_var

logger = logging.getLogger("scholarstream.request")

# Allow simple, safe request-id tokens coming from clients
_ALLOWED_CHARS = re.compile(r"^[A-Za-z0-9._\-]{1,200}$")

REQUEST_ID_HEADER = "X-Request-ID"


def _coerce_request_id(raw: str | None) -> str:
    """Use the client's request id when it is a safe token, else generate one."""
    if raw and _ALLOWED_CHARS.match(raw):
        return raw
    return uuid.uuid4().hex


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a correlation id to every request and its log records."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rid = _coerce_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = rid
        request_id_var.set(rid)

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = int((time.perf_counter() - start) * 1000)

        response.headers[REQUEST_ID_HEADER] = rid
        logger.info(
            "%s %s -> %s (%dms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={"request_id": rid},
        )
        return response
