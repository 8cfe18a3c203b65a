# File: src/flashpilot/main.py
"""FastAPI application factory wiring sessions, flash messages and rewriters."""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI

from flashpilot.core.config import Settings
from flashpilot.core.logging import configure_logging, get_logger
from flashpilot.sessions.store import MemoryStore, SessionStore

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for startup and shutdown events."""
    start_time = datetime.now()
    logger.info("app.startup", message="FlashPilot starting up", timestamp=start_time.isoformat())

    from flashpilot.api.health import set_app_start_time

    set_app_start_time(start_time)

    yield

    logger.info("app.shutdown", message="FlashPilot shutting down")


def _setup_middleware(app: FastAPI, settings: Settings, store: SessionStore) -> None:
    """Configure all middleware in correct order."""
    # Last added = outermost. Request order:
    # RequestID -> Session -> SentryContext -> MessagesManager -> ResponseRewrite -> route
    from flashpilot.middleware.logging import RequestIDMiddleware
    from flashpilot.middleware.messages import MessagesManagerMiddleware
    from flashpilot.middleware.rewrite import ResponseRewriteMiddleware
    from flashpilot.middleware.sentry import SentryContextMiddleware
    from flashpilot.middleware.session import ServerSessionMiddleware

    app.add_middleware(ResponseRewriteMiddleware)
    app.add_middleware(MessagesManagerMiddleware)
    app.add_middleware(SentryContextMiddleware)
    app.add_middleware(
        ServerSessionMiddleware,
        store=store,
        session_cookie=settings.session_cookie_name,
        same_site=settings.session_same_site,
        https_only=settings.session_cookie_secure,
        transient_paths=["/health"],
    )
    app.add_middleware(RequestIDMiddleware)


def _register_routers(app: FastAPI) -> None:
    """Register all routers."""
    from flashpilot.api.health import router as health_router
    from flashpilot.api.messages import router as messages_router

    app.include_router(health_router)
    app.include_router(messages_router)


def create_app(settings: Settings | None = None, store: SessionStore | None = None) -> FastAPI:
    """Application factory for FlashPilot."""
    settings = settings or Settings.from_env()
    store = store if store is not None else MemoryStore()

    configure_logging(settings.log_level, json_output=settings.environment != "development")

    from flashpilot.core.sentry import init_sentry

    init_sentry(settings)

    app = FastAPI(
        title="FlashPilot",
        description="Session flash messages with response-rewriting middleware",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session_store = store

    from flashpilot.core.exception_handlers import register_exception_handlers

    register_exception_handlers(app)

    _setup_middleware(app, settings, store)
    _register_routers(app)

    logger.info("app.configured", message="FastAPI application created successfully")

    return app


def run() -> None:
    """Serve the app; bind or serve failures exit the process non-zero."""
    settings = Settings.from_env()
    uvicorn.run(
        "flashpilot.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
