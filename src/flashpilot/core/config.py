"""Runtime settings read from the environment."""

import os
from typing import Literal

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "t", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


class Settings(BaseModel):
    """Application settings.

    Defaults match the demonstration setup: loopback listener on port 3000
    and a session cookie without the secure flag, which is only suitable
    for plain-HTTP local use.
    """

    host: str = "127.0.0.1"
    port: int = Field(3000, ge=1, le=65535)
    environment: str = "development"
    log_level: str = "DEBUG"
    session_cookie_name: str = "id"
    session_cookie_secure: bool = False
    session_same_site: Literal["lax", "strict", "none"] = "lax"
    sentry_dsn: str | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        defaults = cls()
        return cls(
            host=os.getenv("HOST", defaults.host),
            port=int(os.getenv("PORT", defaults.port)),
            environment=os.getenv("ENVIRONMENT", defaults.environment),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
            session_cookie_name=os.getenv("SESSION_COOKIE_NAME", defaults.session_cookie_name),
            session_cookie_secure=_env_flag("SESSION_COOKIE_SECURE", defaults.session_cookie_secure),
            sentry_dsn=os.getenv("SENTRY_DSN") or None,
        )
