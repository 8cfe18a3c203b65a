# File: tests/conftest.py
"""Pytest configuration and fixtures."""

import pytest
import pytest_asyncio
from fastapi import Depends, FastAPI, Request
from fastapi.responses import PlainTextResponse
from httpx import ASGITransport, AsyncClient

from flashpilot.core.config import Settings
from flashpilot.main import create_app
from flashpilot.messages.queue import Messages
from flashpilot.middleware.messages import get_messages
from flashpilot.middleware.rewrite import ResponseAnnotation, annotate_response
from flashpilot.sessions.store import MemoryStore

BASE_URL = "http://test"


@pytest.fixture
def settings() -> Settings:
    """Default settings, independent of the caller's environment."""
    return Settings(log_level="WARNING")


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def captured() -> list[Messages]:
    """Message queues seen by the /capture route, in request order."""
    return []


@pytest.fixture
def app(settings: Settings, store: MemoryStore, captured: list[Messages]) -> FastAPI:
    """App under test plus a few probe routes used by the middleware tests."""
    app = create_app(settings=settings, store=store)

    @app.get("/push/{text}", response_class=PlainTextResponse)
    async def push(text: str, messages: Messages = Depends(get_messages)) -> str:
        messages.info(text)
        return "queued"

    @app.get("/capture", response_class=PlainTextResponse)
    async def capture(messages: Messages = Depends(get_messages)) -> str:
        messages.warning("captured")
        captured.append(messages)
        return str(len(messages))

    @app.get("/annotated/{kind}", response_class=PlainTextResponse)
    async def annotated(kind: str, request: Request) -> str:
        annotate_response(request, ResponseAnnotation(kind))
        return "page"

    return app


@pytest_asyncio.fixture
async def client(app: FastAPI):
    """Async test client with its own cookie jar (one browser session)."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL) as ac:
        yield ac


@pytest_asyncio.fixture
async def other_client(app: FastAPI):
    """Second client on the same app, holding a separate session."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL) as ac:
        yield ac
