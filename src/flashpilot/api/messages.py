"""Flash message demonstration routes."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse, RedirectResponse

from flashpilot.core.logging import get_logger
from flashpilot.messages.models import format_messages
from flashpilot.messages.queue import Messages
from flashpilot.middleware.messages import get_messages

logger = get_logger(__name__)

router = APIRouter(tags=["messages"])

NO_MESSAGES = "No messages yet!"


@router.get("/", response_class=RedirectResponse, status_code=status.HTTP_302_FOUND)
async def set_messages(messages: Messages = Depends(get_messages)) -> RedirectResponse:
    """Queue two messages and redirect to the reader."""
    messages.info("Hello, world!").debug("This is a debug message.")
    logger.info("messages.queued", count=len(messages))

    return RedirectResponse(url="/read-messages", status_code=status.HTTP_302_FOUND)


@router.get("/read-messages", response_class=PlainTextResponse)
async def read_messages(messages: Messages = Depends(get_messages)) -> str:
    """Consume queued messages as ``"level: text"`` pairs."""
    text = format_messages(messages)
    return text or NO_MESSAGES
