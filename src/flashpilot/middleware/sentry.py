"""Sentry context middleware to capture request context in error reports."""

import sentry_sdk
from starlette.types import ASGIApp, Receive, Scope, Send

from flashpilot.core.logging import get_request_id, session_log_id
from flashpilot.middleware.session import SESSION_ID_SCOPE_KEY


class SentryContextMiddleware:
    """
    Middleware to inject structured context into Sentry error reports.

    Captures:
    - request_id: Unique request identifier (set by RequestIDMiddleware)
    - session_id: Server-side session ID (set by ServerSessionMiddleware)
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = get_request_id()
        session_id = scope.get(SESSION_ID_SCOPE_KEY)

        sentry_sdk.set_tag("request_id", request_id)
        if session_id:
            sentry_sdk.set_tag("session_id", session_log_id(session_id))

        sentry_sdk.set_context(
            "request",
            {
                "method": scope.get("method"),
                "path": scope.get("path"),
                "request_id": request_id,
            },
        )

        await self.app(scope, receive, send)
