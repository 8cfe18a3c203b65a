"""
Response-rewriting middleware.

Handlers may annotate their response with a ``ResponseAnnotation`` asking a
later layer to fold the pending flash messages into the page. Rewriters run
in a fixed order after the handler, each checking for its own annotation.
Without a matching annotation a rewriter returns the response untouched and
leaves the queue alone.
"""

import enum
from typing import Sequence

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from flashpilot.core.logging import get_logger
from flashpilot.messages.models import Message
from flashpilot.messages.queue import Messages
from flashpilot.middleware.messages import get_messages

logger = get_logger(__name__)


class ResponseAnnotation(enum.Enum):
    """Marker a handler attaches to its response for the rewriters."""

    NONE = "none"
    ERROR_PAGE = "error_page"
    RENDER_PAGE = "render_page"


def annotate_response(request: Request, annotation: ResponseAnnotation) -> None:
    """Attach an annotation to the response produced for ``request``."""
    request.state.response_annotation = annotation


def get_response_annotation(request: Request) -> ResponseAnnotation:
    return getattr(request.state, "response_annotation", ResponseAnnotation.NONE)


class ResponseRewriter:
    """Base rewriter: acts only when the response carries ``annotation``."""

    annotation: ResponseAnnotation = ResponseAnnotation.NONE

    async def rewrite(self, request: Request, response: Response, messages: Messages) -> Response:
        pending = messages.peek()
        if get_response_annotation(request) is not self.annotation:
            return response

        consumed = messages.consume()
        logger.info(
            "rewrite.applied",
            rewriter=type(self).__name__,
            pending=len(pending),
            consumed=len(consumed),
        )
        return await self.render(request, response, consumed)

    async def render(self, request: Request, response: Response, messages: list[Message]) -> Response:
        """Build the rewritten response. Page generation is not implemented yet."""
        return response


class ErrorPageRewriter(ResponseRewriter):
    annotation = ResponseAnnotation.ERROR_PAGE


class RenderPageRewriter(ResponseRewriter):
    annotation = ResponseAnnotation.RENDER_PAGE


def default_rewriters() -> list[ResponseRewriter]:
    """Error page first (closest to the handler), then page rendering."""
    return [ErrorPageRewriter(), RenderPageRewriter()]


class ResponseRewriteMiddleware(BaseHTTPMiddleware):
    """Run each rewriter, in order, over the handler's response."""

    def __init__(self, app: ASGIApp, rewriters: Sequence[ResponseRewriter] | None = None):
        super().__init__(app)
        self.rewriters = tuple(default_rewriters() if rewriters is None else rewriters)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)

        messages = get_messages(request)
        for rewriter in self.rewriters:
            response = await rewriter.rewrite(request, response, messages)
        return response
