"""
pytest configuration and shared fixtures for the Island Stats API tests.

Key concern: tests must never launch a real browser or hit the network.
We achieve this by:
  1. Overriding the get_page_extractor dependency with a StubExtractor that
     validates the code like the real one, then returns (or raises) whatever
     the test configured.
  2. Resetting the in-memory rate limiter before every test so request
     counts don't bleed between tests.

Extractor behaviour against a page is covered separately in
test_page_extractor.py, using the in-memory FakePage from fake_browser.py.
"""

import os
from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

# Set env vars BEFORE importing the app so Settings picks them up correctly
os.environ.setdefault("ENVIRONMENT", "test")

from islandstats.models.island import IslandSnapshot  # noqa: E402
from islandstats.services.page_extractor import ExtractionOutput, validate_map_code  # noqa: E402


class StubExtractor:
    """Drop-in for PageExtractor in route tests."""

    max_sessions = 2

    def __init__(self):
        self.active_sessions = 0
        self.calls = []
        self.error = None
        self.daily = None
        self.monthly = None

    async def extract(self, code, include_daily=False, include_monthly=False):
        code = validate_map_code(code)
        self.calls.append((code, include_daily, include_monthly))
        if self.error is not None:
            raise self.error
        return ExtractionOutput(
            snapshot=IslandSnapshot(
                map_code=code, player_count=4321, title="Stub Island", tags=("PvP",)
            ),
            scraped_at=datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
            daily=self.daily if include_daily else None,
            monthly=self.monthly if include_monthly else None,
        )


@pytest.fixture(autouse=True)
def reset_rate_limits():
    from islandstats.core.rate_limit import limiter

    limiter.reset()
    yield


@pytest.fixture()
def stub_extractor():
    from islandstats.main import app
    from islandstats.services.page_extractor import get_page_extractor

    stub = StubExtractor()
    app.dependency_overrides[get_page_extractor] = lambda: stub
    yield stub
    app.dependency_overrides.pop(get_page_extractor, None)


@pytest.fixture()
async def client(stub_extractor):  # noqa: ARG001 (override must be in place first)
    """
    HTTPX async test client wired to the FastAPI app.

    Usage:
        async def test_something(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    from islandstats.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
