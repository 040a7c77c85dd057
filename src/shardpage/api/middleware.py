"""Pure ASGI middleware for correlation IDs and request logging."""

import time

import structlog
from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from shardpage.common.logging import reset_request_context, set_correlation_id

logger = structlog.get_logger()

CORRELATION_HEADER = "X-Correlation-ID"
_CORRELATION_HEADER_KEY = CORRELATION_HEADER.lower().encode("latin-1")


def _incoming_correlation_id(scope: Scope) -> str | None:
    for header_name, header_value in scope.get("headers", []):
        if header_name == _CORRELATION_HEADER_KEY:
            return header_value.decode("latin-1")
    return None


class CorrelationIdMiddleware:
    """Starts a fresh log context per HTTP request and echoes its correlation ID.

    An incoming ``X-Correlation-ID`` is reused so a client paging through a
    listing can tie all of its page requests together in the logs.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        reset_request_context()
        cid = set_correlation_id(_incoming_correlation_id(scope))

        async def send_with_cid(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).append(CORRELATION_HEADER, cid)
            await send(message)

        await self.app(scope, receive, send_with_cid)


class RequestLoggingMiddleware:
    """Logs one ``http_request`` line per request with status and latency."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        status_code = 0

        async def send_with_status(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        await self.app(scope, receive, send_with_status)

        log = logger.info if status_code < 400 else logger.warning
        log(
            "http_request",
            method=scope["method"],
            path=scope["path"],
            status_code=status_code,
            latency_ms=round((time.perf_counter() - start) * 1000, 1),
        )
