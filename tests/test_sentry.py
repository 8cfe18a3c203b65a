"""Tests for Sentry initialization and event scrubbing."""

from unittest.mock import patch

from flashpilot.core import sentry
from flashpilot.core.config import Settings


class TestInitSentry:
    def test_no_dsn_skips_init(self):
        with patch.object(sentry.sentry_sdk, "init") as init:
            sentry.init_sentry(Settings())

        init.assert_not_called()

    def test_placeholder_dsn_skips_init(self):
        with patch.object(sentry.sentry_sdk, "init") as init:
            sentry.init_sentry(Settings(sentry_dsn="xxx"))

        init.assert_not_called()


class TestScrubSessionCookie:
    def test_session_cookie_and_cookie_header_are_filtered(self):
        event = {
            "request": {
                "cookies": {"id": "secret-session", "theme": "dark"},
                "headers": {"Cookie": "id=secret-session", "Accept": "*/*"},
            }
        }

        result = sentry._scrub_session_cookie(event, {})

        assert result["request"]["cookies"] == {"id": "[Filtered]", "theme": "dark"}
        assert result["request"]["headers"] == {"Cookie": "[Filtered]", "Accept": "*/*"}

    def test_event_without_request_is_unchanged(self):
        event = {"message": "boom"}

        assert sentry._scrub_session_cookie(event, {}) == {"message": "boom"}
