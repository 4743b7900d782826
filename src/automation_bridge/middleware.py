"""Request ID and access-log middleware."""

import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from automation_bridge.utils.logging import log_request, set_request_id

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind the caller's X-Request-ID (or a fresh one) to the logging context."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        set_request_id(request_id)
        try:
            response = await call_next(request)
        finally:
            set_request_id(None)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class TimingMiddleware(BaseHTTPMiddleware):
    """
    Write one access-log line per request.

    Webhook requests carry the event type the route parsed from the body, so
    retries of a failing subscribe can be told apart from execute traffic.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        log_request(
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
            client_ip=request.client.host if request.client else None,
            event_type=getattr(request.state, "event_type", None),
        )
        response.headers["X-Process-Time"] = f"{duration_ms:.2f}ms"
        return response


def setup_middleware(app: FastAPI) -> None:
    """Register middleware. RequestID is added last so it wraps the access log."""
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
