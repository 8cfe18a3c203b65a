"""Flash message manager middleware and request accessors."""

from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from flashpilot.core.errors import MessagesNotLoadedError
from flashpilot.core.logging import get_logger
from flashpilot.messages.queue import Messages

# Scope key holding the request's Messages queue
MESSAGES_SCOPE_KEY = "flash_messages"


class MessagesManagerMiddleware:
    """
    Expose the session's flash message queue for the lifetime of a request.

    On entry the queue is loaded from ``scope["session"]``. When the response
    starts (after every inner middleware and the handler have run) the
    remaining queue is written back to the session and the in-context queue
    is cleared. Must be installed inside a session middleware.
    """

    def __init__(self, app: ASGIApp):
        self.app = app
        self.logger = get_logger(__name__)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        session = scope.get("session")
        if session is None:
            raise RuntimeError(
                "MessagesManagerMiddleware must be installed inside ServerSessionMiddleware"
            )

        messages = Messages.from_session(session)
        loaded = len(messages)
        scope[MESSAGES_SCOPE_KEY] = messages

        async def send_with_flush(message: Message) -> None:
            if message["type"] == "http.response.start":
                if loaded or messages.is_modified:
                    messages.save(session)
                    self.logger.info(
                        "messages.flushed",
                        loaded=loaded,
                        remaining=len(messages),
                    )
                messages.clear()

            await send(message)

        await self.app(scope, receive, send_with_flush)


def get_messages(request: Request) -> Messages:
    """FastAPI dependency returning the current request's message queue."""
    messages = request.scope.get(MESSAGES_SCOPE_KEY)
    if messages is None:
        raise MessagesNotLoadedError()
    return messages
