# File: src/flashpilot/messages/models.py
"""Flash message value types."""

import enum
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict

from flashpilot.core.errors import InvalidMessageLevelError


class Level(str, enum.Enum):
    """Message severity, lowest first."""

    DEBUG = "debug"
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: "Level | str") -> "Level":
        """Accept a Level or its case-insensitive name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidMessageLevelError(str(value)) from None


class Message(BaseModel):
    """A single flash message. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    level: Level
    message: str

    def __str__(self) -> str:
        return self.message

    def render(self) -> str:
        """Format as ``"level: text"``."""
        return f"{self.level.value}: {self.message}"

    def to_session(self) -> dict[str, Any]:
        return {"level": self.level.value, "message": self.message}


def format_messages(messages: Iterable[Message]) -> str:
    """Join rendered messages with ``", "``; empty input gives an empty string."""
    return ", ".join(message.render() for message in messages)
