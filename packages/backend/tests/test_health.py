"""Health endpoint tests."""

import pytest


@pytest.mark.asyncio
async def test_health_returns_ok(client):
    resp = await client.get("/api/v1/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["server"] == "ok"
    assert data["database"] == "ok"
    assert "version" in data


@pytest.mark.asyncio
async def test_health_is_degraded_without_redis(client):
    data = (await client.get("/api/v1/health")).json()
    assert data["redis"].startswith("error")
    assert data["status"] == "degraded"
