"""Flash messages package."""

from flashpilot.messages.models import Level, Message, format_messages
from flashpilot.messages.queue import SESSION_KEY, Messages

__all__ = [
    "Level",
    "Message",
    "Messages",
    "SESSION_KEY",
    "format_messages",
]
