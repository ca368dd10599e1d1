"""
test_island_routes.py — /api/v1/island-stats endpoints.

Verifies:
  1. Successful extraction returns camelCase stats; unrequested series are omitted.
  2. history / yearly flags reach the extractor.
  3. Every extraction error kind maps to its HTTP status with a {"detail"} body.
  4. The forecast endpoint extracts both series and returns stats + forecast + summary.
"""

import pytest

from factories import make_daily, make_monthly
from islandstats.core.errors import (
    ExtractionTimeout,
    MapNotFound,
    NetworkFailure,
    StatsNotFound,
    UnknownExtractionError,
)

CODE = "1234-5678-9012"


class TestIslandStats:

    async def test_returns_snapshot(self, client, stub_extractor):
        response = await client.get("/api/v1/island-stats", params={"code": CODE})

        assert response.status_code == 200
        data = response.json()
        assert data["mapCode"] == CODE
        assert data["playerCount"] == 4321
        assert data["title"] == "Stub Island"
        assert data["tags"] == ["PvP"]
        assert data["scrapedAt"].startswith("2026-10-19T12:00:00")
        assert "historicalData" not in data
        assert "monthlyData" not in data
        assert "rank" not in data
        assert stub_extractor.calls == [(CODE, False, False)]

    async def test_history_and_yearly_flags(self, client, stub_extractor):
        stub_extractor.daily = make_daily(days=3)
        stub_extractor.monthly = make_monthly(("October 2026", 10, 5))

        response = await client.get(
            "/api/v1/island-stats", params={"code": CODE, "history": "true", "yearly": "true"}
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data["historicalData"]) == 3
        assert data["historicalData"][0]["gainPercent"] == 0.0
        assert data["monthlyData"][0]["month"] == "October 2026"
        assert stub_extractor.calls == [(CODE, True, True)]

    async def test_failed_series_omitted(self, client, stub_extractor):
        response = await client.get("/api/v1/island-stats", params={"code": CODE, "history": "true"})
        assert response.status_code == 200
        assert "historicalData" not in response.json()

    async def test_missing_code_is_400(self, client, stub_extractor):
        response = await client.get("/api/v1/island-stats")
        assert response.status_code == 400
        assert "required" in response.json()["detail"]
        assert stub_extractor.calls == []

    async def test_malformed_code_is_400(self, client):
        response = await client.get("/api/v1/island-stats", params={"code": "12-34"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid map code format. Expected format: XXXX-XXXX-XXXX"

    @pytest.mark.parametrize(
        "error, status, kind",
        [
            (MapNotFound(), 404, "not_found"),
            (StatsNotFound(), 404, "stats_not_found"),
            (ExtractionTimeout(), 408, "timeout"),
            (NetworkFailure(), 503, "network_failure"),
            (UnknownExtractionError(), 500, "unknown"),
        ],
    )
    async def test_error_status_mapping(self, client, stub_extractor, error, status, kind):
        stub_extractor.error = error
        response = await client.get("/api/v1/island-stats", params={"code": CODE})

        assert response.status_code == status
        body = response.json()
        assert body["detail"] == error.message
        assert body["kind"] == kind


class TestIslandForecast:

    async def test_stats_forecast_and_summary(self, client, stub_extractor):
        stub_extractor.daily = make_daily(days=30)
        stub_extractor.monthly = make_monthly(("October 2026", 1100, 550), ("September 2026", 1000, 500))

        response = await client.get(f"/api/v1/island-stats/{CODE}/forecast")

        assert response.status_code == 200
        data = response.json()
        assert data["stats"]["playerCount"] == 4321
        assert len(data["forecast"]["forecastedDays"]) == 30
        assert data["forecast"]["forecastedMonth"]["totalDays"] == 30
        assert data["summary"]["days"] == 30
        assert data["summary"]["months"] == 2
        assert stub_extractor.calls == [(CODE, True, True)]

    async def test_no_history_gives_null_forecast(self, client, stub_extractor):
        response = await client.get(f"/api/v1/island-stats/{CODE}/forecast")

        assert response.status_code == 200
        data = response.json()
        assert data["forecast"] is None
        assert data["summary"]["days"] == 0
        assert data["summary"]["thirtyDayAverage"] is None

    async def test_malformed_code_is_400(self, client):
        response = await client.get("/api/v1/island-stats/not-a-code/forecast")
        assert response.status_code == 400

    async def test_map_not_found_is_404(self, client, stub_extractor):
        stub_extractor.error = MapNotFound()
        response = await client.get(f"/api/v1/island-stats/{CODE}/forecast")
        assert response.status_code == 404
