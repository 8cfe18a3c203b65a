"""
Health check endpoint for monitoring and orchestration.

Reports uptime and whether the session store answers.
"""

import time
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from flashpilot.core.logging import get_logger
from flashpilot.sessions.store import SessionStore

logger = get_logger(__name__)

router = APIRouter(tags=["health"])

# Global app start time (set in lifespan)
_app_start_time: datetime | None = None


def set_app_start_time(start_time: datetime) -> None:
    """Called by lifespan to track when app started."""
    global _app_start_time
    _app_start_time = start_time


def get_uptime_seconds() -> int:
    """Calculate seconds since app start."""
    if _app_start_time is None:
        return 0
    return int((datetime.now() - _app_start_time).total_seconds())


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


async def check_session_store(store: SessionStore) -> dict[str, Any]:
    """
    Probe the session store with a lookup of an ID that never exists.

    Returns: {"status": "ok"|"down", "response_time_ms": N, "error": str (if down)}
    """
    start = time.time()
    try:
        await store.get("health-check")
        result: dict[str, Any] = {"status": "ok"}
        count = getattr(store, "count", None)
        if count is not None:
            result["sessions"] = await count()
    except Exception as e:
        logger.warning("health.session_store_down", error=str(e))
        result = {"status": "down", "error": str(type(e).__name__)}

    result["response_time_ms"] = int((time.time() - start) * 1000)
    return result


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description=(
        "Returns API health status including uptime and session store status. "
        "Returns 200 regardless of degraded dependencies."
    ),
)
async def health_check(store: SessionStore = Depends(get_session_store)) -> JSONResponse:
    """
    Example response (healthy):
        {
            "status": "ok",
            "uptime_seconds": 3600,
            "checks": {
                "session_store": {"status": "ok", "sessions": 2, "response_time_ms": 0}
            }
        }
    """
    store_check = await check_session_store(store)
    overall_status = "ok" if store_check["status"] == "ok" else "degraded"

    return JSONResponse(
        content={
            "status": overall_status,
            "uptime_seconds": get_uptime_seconds(),
            "checks": {"session_store": store_check},
        },
        status_code=status.HTTP_200_OK,
    )
