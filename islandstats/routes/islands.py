"""
islands.py — Island statistics endpoints (headless-browser backed).

Routes:
  GET /api/v1/island-stats?code=XXXX-XXXX-XXXX&history=true&yearly=true
    Live player count + metadata; optional 1-month daily and 1-year
    monthly series.
  GET /api/v1/island-stats/{code}/forecast
    Same extraction with both series, plus a 30-day forecast and summary.

Both launch a Chromium session per request and are rate limited per client
IP. Extraction failures surface as ExtractionError subclasses and are
rendered by the handler registered in main.py.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from islandstats.core.config import settings
from islandstats.core.rate_limit import limiter
from islandstats.models.forecast import IslandForecastResponse
from islandstats.models.island import IslandStatsResponse
from islandstats.routes.forecast import forecast_with_summary
from islandstats.services.page_extractor import PageExtractor, get_page_extractor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/island-stats", tags=["islands"])


@router.get(
    "",
    response_model=IslandStatsResponse,
    response_model_exclude_none=True,
    status_code=200,
)
@limiter.limit(settings.stats_rate_limit)
async def get_island_stats(
    request: Request,
    code: Optional[str] = Query(default=None, description="Map code, XXXX-XXXX-XXXX"),
    history: bool = Query(default=False, description="Include the 1-month daily series"),
    yearly: bool = Query(default=False, description="Include the 1-year monthly series"),
    extractor: PageExtractor = Depends(get_page_extractor),
):
    """
    Scrape current stats for one island.

    A missing or malformed code is a 400 (checked before any browser
    launches). Series that fail to load are omitted, not errors.
    """
    output = await extractor.extract(code, include_daily=history, include_monthly=yearly)
    return output.to_response()


@router.get("/{code}/forecast", response_model=IslandForecastResponse, status_code=200)
@limiter.limit(settings.stats_rate_limit)
async def get_island_forecast(
    request: Request,
    code: str,
    extractor: PageExtractor = Depends(get_page_extractor),
):
    """Extract both series and forecast the next 30 days for the island."""
    output = await extractor.extract(code, include_daily=True, include_monthly=True)
    forecast, summary = forecast_with_summary(output.daily, output.monthly)
    return IslandForecastResponse(stats=output.to_response(), forecast=forecast, summary=summary)
