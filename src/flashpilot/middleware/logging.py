"""Per-request logging context and access log."""

import time
import uuid

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from flashpilot.core.logging import bind_request, get_logger

REQUEST_ID_HEADER = "x-request-id"


class RequestIDMiddleware:
    """
    Outermost layer: opens the logging context for a request.

    Reuses the caller's X-Request-ID when present, otherwise mints one, and
    echoes it on the response. Logs ``request.start`` on entry and
    ``request.complete`` (status, redirect target, duration) when the
    response starts, after the flash queue and session were flushed.
    """

    def __init__(self, app: ASGIApp):
        self.app = app
        self.logger = get_logger(__name__)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        bind_request(request_id, scope["method"], scope["path"])
        started = time.perf_counter()

        self.logger.info("request.start")

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((REQUEST_ID_HEADER.encode(), request_id.encode("latin-1")))
                message["headers"] = headers

                location = Headers(raw=headers).get("location")
                self.logger.info(
                    "request.complete",
                    status_code=message["status"],
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                    **({"location": location} if location else {}),
                )

            await send(message)

        await self.app(scope, receive, send_with_request_id)
