"""Request logging middleware."""
import re
import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
# Accept an upstream id only if it looks like one
REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._-]{8,64}$")
SLOW_REQUEST_MS = 1000


def resolve_request_id(request: Request) -> str:
    incoming = request.headers.get(REQUEST_ID_HEADER, "")
    if REQUEST_ID_RE.match(incoming):
        return incoming
    return str(uuid.uuid4())


class LoggingMiddleware(BaseHTTPMiddleware):
    """Binds a request id (and tenant domain, when given) to every log line of a request."""

    def __init__(self, app: ASGIApp, slow_request_ms: int = SLOW_REQUEST_MS):
        super().__init__(app)
        self.slow_request_ms = slow_request_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request)
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_host=request.client.host if request.client else None,
        )
        domain = request.query_params.get("domain")
        if domain:
            structlog.contextvars.bind_contextvars(domain=domain.strip().lower())

        start = time.perf_counter()
        logger.info("request_started")

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "request_failed",
                exception=str(exc),
                exception_type=type(exc).__name__,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            raise

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        response.headers[REQUEST_ID_HEADER] = request_id

        log = logger.warning if duration_ms >= self.slow_request_ms else logger.info
        log("request_completed", status_code=response.status_code, duration_ms=duration_ms)
        return response
