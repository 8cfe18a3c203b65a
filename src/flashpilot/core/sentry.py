"""Sentry error tracking configuration and initialization."""

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.utils import BadDsn

from flashpilot.core.config import Settings
from flashpilot.core.logging import get_logger

logger = get_logger(__name__)

# Guard against multiple initializations
_sentry_initialized = False

# Name of the session cookie scrubbed from events; set by init_sentry()
_session_cookie_name = "id"


def init_sentry(settings: Settings) -> None:
    """
    Initialize Sentry SDK for error tracking.

    Only initializes if a DSN is configured and looks like a URL, so local
    runs and CI placeholders stay untracked. Performance tracing is off and
    the session cookie is stripped from every event.
    """
    global _sentry_initialized, _session_cookie_name

    if _sentry_initialized:
        return

    if not settings.sentry_dsn:
        logger.info("sentry.disabled", message="Sentry DSN not found, error tracking disabled")
        return

    dsn = settings.sentry_dsn.strip()
    if not dsn.startswith(("https://", "http://")):
        logger.info(
            "sentry.disabled",
            message="Sentry DSN appears to be invalid or placeholder, error tracking disabled",
            dsn_preview=dsn[:20] + "..." if len(dsn) > 20 else dsn,
        )
        return

    _session_cookie_name = settings.session_cookie_name

    try:
        sentry_sdk.init(
            dsn=dsn,
            environment=settings.environment,
            traces_sample_rate=0.0,
            send_default_pii=False,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                LoggingIntegration(level=None, event_level=None),  # structlog owns logs
            ],
            before_send=_scrub_session_cookie,
        )

        _sentry_initialized = True
        logger.info(
            "sentry.initialized",
            message="Sentry error tracking enabled",
            environment=settings.environment,
        )
    except BadDsn as exc:
        logger.warning(
            "sentry.init_failed",
            message="Failed to initialize Sentry due to invalid DSN, error tracking disabled",
            error=str(exc),
        )


def _scrub_session_cookie(event: dict, hint: dict) -> dict:
    """Remove the session cookie from request data attached to an event."""
    request = event.get("request")
    if not isinstance(request, dict):
        return event

    cookies = request.get("cookies")
    if isinstance(cookies, dict) and _session_cookie_name in cookies:
        cookies[_session_cookie_name] = "[Filtered]"

    headers = request.get("headers")
    if isinstance(headers, dict):
        for key in list(headers):
            if key.lower() == "cookie":
                headers[key] = "[Filtered]"

    return event
