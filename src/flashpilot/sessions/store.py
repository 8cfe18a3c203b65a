"""
Session storage backends.

A store maps an opaque session ID to a record: a JSON-compatible dict of
arbitrary keys. The session middleware only talks to the ``SessionStore``
protocol, so any backend with async get/put/delete can be plugged in.
"""

import asyncio
import json
from typing import Any, Optional, Protocol

from flashpilot.core.errors import SessionStoreError
from flashpilot.core.logging import get_logger

logger = get_logger(__name__)

SessionData = dict[str, Any]


class SessionStore(Protocol):
    """Capability interface for session persistence."""

    async def get(self, session_id: str) -> Optional[SessionData]:
        """Return a copy of the record, or None if the ID is unknown."""
        ...

    async def put(self, session_id: str, data: SessionData) -> None:
        """Create or overwrite the record for a session ID."""
        ...

    async def delete(self, session_id: str) -> None:
        """Remove a record; unknown IDs are ignored."""
        ...


class MemoryStore:
    """
    Process-local session store.

    Records are serialized to JSON on write, so callers never share mutable
    state with the store or with each other. A single lock covers the whole
    map; concurrent writes to the same session are last-writer-wins.
    """

    def __init__(self) -> None:
        self._records: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def get(self, session_id: str) -> Optional[SessionData]:
        async with self._lock:
            raw = self._records.get(session_id)
        if raw is None:
            return None
        return json.loads(raw)

    async def put(self, session_id: str, data: SessionData) -> None:
        try:
            raw = json.dumps(data)
        except (TypeError, ValueError) as exc:
            raise SessionStoreError(
                "Session data is not JSON serializable",
                details={"error": str(exc)},
            ) from exc

        async with self._lock:
            self._records[session_id] = raw

    async def delete(self, session_id: str) -> None:
        async with self._lock:
            self._records.pop(session_id, None)

    async def count(self) -> int:
        """Number of live sessions (used by the health check)."""
        async with self._lock:
            return len(self._records)
