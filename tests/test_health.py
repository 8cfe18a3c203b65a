"""Tests for the health check endpoint."""
from datetime import datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from flashpilot.api.health import check_session_store, get_uptime_seconds, set_app_start_time
from flashpilot.core.config import Settings
from flashpilot.main import create_app
from flashpilot.sessions.store import MemoryStore


class UnreachableStore(MemoryStore):
    """Store whose lookups fail, as a broken backend would."""

    async def get(self, session_id):
        raise ConnectionError("store unreachable")


class TestHealthCheckEndpoint:
    """Test suite for /health endpoint."""

    @pytest.mark.asyncio
    async def test_health_endpoint_returns_ok(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert "application/json" in response.headers["content-type"]
        data = response.json()
        assert data["status"] == "ok"
        assert data["uptime_seconds"] >= 0
        assert data["checks"]["session_store"]["status"] == "ok"
        assert isinstance(data["checks"]["session_store"]["response_time_ms"], int)

    @pytest.mark.asyncio
    async def test_health_reports_session_count(self, client: AsyncClient, other_client) -> None:
        await client.get("/")
        await other_client.get("/")

        response = await client.get("/health")

        # /health itself never opens a session
        assert response.json()["checks"]["session_store"]["sessions"] == 2

    @pytest.mark.asyncio
    async def test_health_polls_do_not_create_sessions(
        self, client: AsyncClient, store: MemoryStore
    ) -> None:
        for _ in range(5):
            response = await client.get("/health")
            assert response.status_code == 200
            assert "set-cookie" not in response.headers

        assert await store.count() == 0
        assert response.json()["checks"]["session_store"]["sessions"] == 0

    @pytest.mark.asyncio
    async def test_health_degraded_when_store_fails(self) -> None:
        app = create_app(settings=Settings(log_level="WARNING"), store=UnreachableStore())

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            response = await ac.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["checks"]["session_store"]["status"] == "down"
        assert data["checks"]["session_store"]["error"] == "ConnectionError"

    @pytest.mark.asyncio
    async def test_check_session_store_without_count(self) -> None:
        class BareStore:
            async def get(self, session_id):
                return None

            async def put(self, session_id, data):
                pass

            async def delete(self, session_id):
                pass

        result = await check_session_store(BareStore())

        assert result["status"] == "ok"
        assert "sessions" not in result

    def test_health_endpoint_uptime_tracking(self) -> None:
        """Test that uptime increases over time."""
        one_hour_ago = datetime.now() - timedelta(hours=1)
        set_app_start_time(one_hour_ago)

        uptime = get_uptime_seconds()

        assert 3590 <= uptime <= 3610, f"Expected ~3600 seconds, got {uptime}"
