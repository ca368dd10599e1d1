"""
test_rate_limit.py — Rate limiting on the browser-backed endpoints.

Verifies that:
  1. The island-stats endpoints remain accessible under the limit (200 OK).
  2. Exceeding the limit returns HTTP 429 before any extraction is attempted.
  3. The pure forecast endpoint is not rate limited.

Strategy for 429 test:
  Patch `limiter._limiter.hit` to return False, which tells slowapi
  that the moving-window bucket is full → raises RateLimitExceeded → 429.
  This avoids needing to send real bursts of requests in tests.
"""

from unittest.mock import patch

from factories import make_daily
from islandstats.core.rate_limit import limiter

CODE = "1234-5678-9012"


class TestRateLimitNormal:

    async def test_stats_under_limit(self, client):
        r = await client.get("/api/v1/island-stats", params={"code": CODE})
        assert r.status_code == 200

    async def test_forecast_endpoint_under_limit(self, client):
        r = await client.get(f"/api/v1/island-stats/{CODE}/forecast")
        assert r.status_code == 200


class TestRateLimitExceeded:

    async def test_stats_returns_429(self, client, stub_extractor):
        with patch.object(limiter._limiter, "hit", return_value=False):
            r = await client.get("/api/v1/island-stats", params={"code": CODE})
        assert r.status_code == 429
        assert "error" in r.json()
        assert stub_extractor.calls == []

    async def test_island_forecast_returns_429(self, client, stub_extractor):
        with patch.object(limiter._limiter, "hit", return_value=False):
            r = await client.get(f"/api/v1/island-stats/{CODE}/forecast")
        assert r.status_code == 429
        assert stub_extractor.calls == []

    async def test_posted_forecast_not_limited(self, client):
        body = {"historicalData": [d.model_dump(by_alias=True) for d in make_daily(days=7)]}
        with patch.object(limiter._limiter, "hit", return_value=False):
            r = await client.post("/api/v1/forecast", json=body)
        assert r.status_code == 200
