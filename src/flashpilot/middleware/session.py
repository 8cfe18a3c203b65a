"""Server-side session middleware backed by a pluggable SessionStore."""

import copy
import secrets
from typing import Sequence

from starlette.datastructures import MutableHeaders
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from flashpilot.core.errors import SessionStoreError
from flashpilot.core.logging import bind_session, get_logger
from flashpilot.sessions.store import SessionStore

# Scope key carrying the active session ID for downstream middleware
SESSION_ID_SCOPE_KEY = "session_id"


def generate_session_id() -> str:
    """Random, URL-safe session identifier."""
    return secrets.token_urlsafe(32)


class ServerSessionMiddleware:
    """
    Load the session record named by the session cookie into ``scope["session"]``.

    The record lives in the store; the cookie only carries its ID. On
    ``http.response.start`` the record is written back when it is new or was
    changed during the request, and a cookie is issued for new sessions.
    Unknown or stale IDs are replaced by a fresh one.

    Paths in ``transient_paths`` get an empty, throwaway record: nothing is
    read from or written to the store and no cookie is issued.
    """

    def __init__(
        self,
        app: ASGIApp,
        store: SessionStore,
        session_cookie: str = "id",
        path: str = "/",
        same_site: str = "lax",
        https_only: bool = False,
        max_age: int | None = None,
        transient_paths: Sequence[str] = (),
    ):
        self.app = app
        self.store = store
        self.session_cookie = session_cookie
        self.path = path
        self.max_age = max_age
        self.transient_paths = frozenset(transient_paths)
        self.security_flags = "httponly; samesite=" + same_site
        if https_only:
            self.security_flags += "; secure"
        self.logger = get_logger(__name__)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        if scope["path"] in self.transient_paths:
            scope["session"] = {}
            await self.app(scope, receive, send)
            return

        connection = HTTPConnection(scope)
        session_id = connection.cookies.get(self.session_cookie)
        record = await self.store.get(session_id) if session_id else None

        is_new = record is None
        if is_new:
            session_id = generate_session_id()
            record = {}
        original = copy.deepcopy(record)

        scope["session"] = record
        scope[SESSION_ID_SCOPE_KEY] = session_id
        bind_session(session_id)

        async def send_with_session(message: Message) -> None:
            if message["type"] == "http.response.start":
                session = scope["session"]
                if is_new or session != original:
                    await self._save(session_id, session, is_new)
                if is_new:
                    headers = MutableHeaders(scope=message)
                    headers.append("Set-Cookie", self._cookie_header(session_id))

            await send(message)

        await self.app(scope, receive, send_with_session)

    async def _save(self, session_id: str, session: dict, is_new: bool) -> None:
        # Runs inside the send wrapper, outside the app's exception handlers
        try:
            await self.store.put(session_id, dict(session))
        except SessionStoreError:
            self.logger.exception("session.save_failed", new=is_new)
            return

        self.logger.info("session.created" if is_new else "session.updated", keys=sorted(session))

    def _cookie_header(self, session_id: str) -> str:
        max_age = f"Max-Age={self.max_age}; " if self.max_age else ""
        return f"{self.session_cookie}={session_id}; path={self.path}; {max_age}{self.security_flags}"
