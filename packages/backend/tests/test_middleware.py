"""Tests for HTTP middleware — security headers, request IDs, rate limiting.

Learn: Redis isn't running in tests, so the rate limiter normally lets
everything through. The limit itself is tested against a tiny in-memory
stand-in patched in for get_redis().
"""

import pytest

from peoplehub.middleware import rate_limit


@pytest.mark.asyncio
async def test_security_headers_on_health(client):
    r = await client.get("/api/v1/health")
    assert r.status_code == 200
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["Referrer-Policy"] == "no-referrer"
    assert "Cache-Control" not in r.headers


@pytest.mark.asyncio
async def test_credential_responses_are_not_cached(client, superadmin):
    r = await client.post(
        "/api/v1/auth/login", json={"email": "nobody@peoplehub.test", "password": "x"}
    )
    assert r.headers["Cache-Control"] == "no-store"


@pytest.mark.asyncio
async def test_request_id_generated(client):
    r1 = await client.get("/api/v1/health")
    r2 = await client.get("/api/v1/health")
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    r = await client.get("/api/v1/health", headers={"X-Request-ID": "trace-12345"})
    assert r.headers["X-Request-ID"] == "trace-12345"


@pytest.mark.asyncio
async def test_no_hsts_on_http(client):
    r = await client.get("/api/v1/health")
    assert "Strict-Transport-Security" not in r.headers


class FakeRedis:
    def __init__(self):
        self.counts: dict[str, int] = {}

    async def incr(self, key: str) -> int:
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    async def expire(self, key: str, seconds: int) -> bool:
        return True


@pytest.mark.asyncio
async def test_credential_endpoints_are_rate_limited(client, monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(rate_limit, "get_redis", lambda: fake)

    body = {"email": "nobody@peoplehub.test", "password": "guess"}
    statuses = [
        (await client.post("/api/v1/auth/login", json=body)).status_code
        for _ in range(11)
    ]
    assert statuses[:10] == [401] * 10
    assert statuses[10] == 429

    r = await client.post("/api/v1/auth/login", json=body)
    assert r.json()["code"] == "rate_limited"
    assert r.headers["Retry-After"] == "60"

    # Other endpoints draw from the general bucket
    r = await client.get("/api/v1/health")
    assert r.status_code == 200
    assert r.headers["X-RateLimit-Limit"] == "100"
