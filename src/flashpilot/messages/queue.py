"""
Request-scoped flash message queue.

A ``Messages`` object is built from the session at the start of a request,
handed to handlers and middleware, and written back to the session when the
response starts. Appending never fails; reading drains the queue.
"""

from collections import deque
from collections.abc import MutableMapping
from typing import Any, Iterable, Iterator

from pydantic import ValidationError as PydanticValidationError

from flashpilot.core.logging import get_logger
from flashpilot.messages.models import Level, Message

logger = get_logger(__name__)

# Reserved session key holding the serialized queue
SESSION_KEY = "flashpilot.messages"


class Messages:
    """Ordered, appendable, consumable queue of flash messages."""

    def __init__(self, messages: Iterable[Message] = ()) -> None:
        self._queue: deque[Message] = deque(messages)
        self._modified = False

    @classmethod
    def from_session(cls, session: MutableMapping[str, Any]) -> "Messages":
        """Load the queue stored in a session, skipping malformed entries."""
        loaded = []
        for entry in session.get(SESSION_KEY) or []:
            try:
                loaded.append(Message.model_validate(entry))
            except PydanticValidationError as exc:
                logger.warning(
                    "messages.entry_dropped",
                    entry=repr(entry)[:200],
                    errors=exc.error_count(),
                )
        return cls(loaded)

    def save(self, session: MutableMapping[str, Any]) -> None:
        """Write the remaining queue to the session, or drop the key when empty."""
        if self._queue:
            session[SESSION_KEY] = [message.to_session() for message in self._queue]
        else:
            session.pop(SESSION_KEY, None)

    @property
    def is_modified(self) -> bool:
        return self._modified

    def push(self, level: Level | str, message: str) -> "Messages":
        """Append a message; returns self so calls can be chained."""
        self._queue.append(Message(level=Level.parse(level), message=message))
        self._modified = True
        return self

    def debug(self, message: str) -> "Messages":
        return self.push(Level.DEBUG, message)

    def info(self, message: str) -> "Messages":
        return self.push(Level.INFO, message)

    def success(self, message: str) -> "Messages":
        return self.push(Level.SUCCESS, message)

    def warning(self, message: str) -> "Messages":
        return self.push(Level.WARNING, message)

    def error(self, message: str) -> "Messages":
        return self.push(Level.ERROR, message)

    def peek(self) -> list[Message]:
        """Snapshot of the queue without consuming it."""
        return list(self._queue)

    def consume(self) -> list[Message]:
        """Drain and return every queued message in insertion order."""
        return list(self)

    def clear(self) -> None:
        """Empty the in-memory queue without touching the session."""
        self._queue.clear()

    def __iter__(self) -> Iterator[Message]:
        return self

    def __next__(self) -> Message:
        if not self._queue:
            raise StopIteration
        self._modified = True
        return self._queue.popleft()

    def __len__(self) -> int:
        return len(self._queue)

    def __repr__(self) -> str:
        return f"Messages({self.peek()!r})"
