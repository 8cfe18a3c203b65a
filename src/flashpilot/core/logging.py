"""
structlog setup for FlashPilot.

Per-request fields (request ID, method, path, session prefix) live in
structlog's contextvars, so every event emitted while a request is in flight
carries them, including ``messages.flushed`` and ``session.*`` events.
"""

import logging
import logging.config

import structlog

NO_REQUEST_ID = "no-request-id"

# Characters of the session ID that may appear in logs and error reports
SESSION_LOG_PREFIX = 8


def configure_logging(level: str = "DEBUG", json_output: bool = True) -> None:
    """Configure structlog and route stdlib logging (uvicorn) through it.

    Events below ``level`` are dropped for both structlog and stdlib loggers.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.DEBUG

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processor": renderer,
                },
            },
            "handlers": {
                "stdout": {
                    "level": numeric_level,
                    "class": "logging.StreamHandler",
                    "formatter": "structlog",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"handlers": ["stdout"], "level": numeric_level},
        }
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def bind_request(request_id: str, method: str, path: str) -> None:
    """Start a fresh logging context for one HTTP request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)


def set_request_id(request_id: str) -> None:
    structlog.contextvars.bind_contextvars(request_id=request_id)


def get_request_id() -> str:
    """Request ID bound for the current context, or ``NO_REQUEST_ID``."""
    return structlog.contextvars.get_contextvars().get("request_id", NO_REQUEST_ID)


def session_log_id(session_id: str) -> str:
    """Shortened session ID safe to put in logs; the full ID is a credential."""
    return session_id[:SESSION_LOG_PREFIX]


def bind_session(session_id: str) -> None:
    structlog.contextvars.bind_contextvars(session=session_log_id(session_id))
