"""API tests for health endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient

from entityhub.api.main import app
from entityhub.config import reset_settings
from entityhub.infrastructure.storage.sqlite import close_pool


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestHealthEndpoints:
    async def test_health(self, client: AsyncClient):
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["uptime_seconds"] >= 0

    async def test_root_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_db_health(self, client: AsyncClient):
        try:
            response = await client.get("/api/health/db")
        finally:
            await close_pool()

        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"]["available"] is True

    async def test_notifications_health_log(self, client: AsyncClient):
        response = await client.get("/api/health/notifications")

        data = response.json()
        assert data["status"] == "healthy"
        assert data["notifications"]["name"] == "log"

    async def test_notifications_health_missing_key(self, client: AsyncClient, monkeypatch):
        monkeypatch.setenv("NOTIFY_PROVIDER", "brevo")
        reset_settings()

        response = await client.get("/api/health/notifications")

        data = response.json()
        assert data["status"] == "degraded"
        assert data["notifications"]["available"] is False
