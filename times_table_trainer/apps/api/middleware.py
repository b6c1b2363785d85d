"""HTTP middleware that scopes log context to one request."""

from __future__ import annotations

import time
import uuid

from times_table_trainer.core.logging import get_logger, log_context

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
# Accepted inbound so upstream proxies can keep their own id.
_INBOUND_ID_HEADERS = (b"x-request-id", b"x-correlation-id")


class RequestContextMiddleware:  # pylint: disable=too-few-public-methods
    """Bind a request id and client address for the request's log records.

    The id is taken from the inbound headers when present, otherwise generated,
    and echoed back as ``X-Request-ID``.
    """

    def __init__(self, app) -> None:  # type: ignore[no-untyped-def]
        self.app = app

    async def __call__(self, scope, receive, send):  # type: ignore[no-untyped-def]
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        request_id = _inbound_request_id(scope.get("headers", []))
        client = scope.get("client")
        status_code = 500
        started = time.perf_counter()

        async def send_with_request_id(message):  # type: ignore[no-untyped-def]
            nonlocal status_code
            if message.get("type") == "http.response.start":
                status_code = int(message.get("status") or 500)
                headers = list(message.get("headers", []))
                if not any(key.lower() == b"x-request-id" for key, _ in headers):
                    headers.append((REQUEST_ID_HEADER.encode(), request_id.encode()))
                message["headers"] = headers
            await send(message)

        with log_context(request_id=request_id, client_ip=client[0] if client else None):
            try:
                await self.app(scope, receive, send_with_request_id)
            finally:
                logger.info(
                    "%s %s -> %d in %.1fms",
                    scope.get("method", ""),
                    scope.get("path", ""),
                    status_code,
                    (time.perf_counter() - started) * 1000.0,
                )


def _inbound_request_id(raw_headers) -> str:  # type: ignore[no-untyped-def]
    found = {key.lower(): value for key, value in raw_headers if key.lower() in _INBOUND_ID_HEADERS}
    for name in _INBOUND_ID_HEADERS:
        value = found.get(name, b"").decode("latin-1").strip()
        if value:
            return value
    return uuid.uuid4().hex


__all__ = ["RequestContextMiddleware", "REQUEST_ID_HEADER"]
