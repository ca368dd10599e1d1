"""
forecast.py — Forecasting from caller-supplied series.

Route:
  POST /api/v1/forecast
    Body: { historicalData: DailyRecord[], monthlyData?: MonthlyRecord[] }
    Returns { forecast: ForecastResult | null, summary: SeriesSummary }.

No browser is involved, so this endpoint is not rate limited. `forecast`
is null (not an error) when fewer than 7 days of history are supplied.
"""

import logging
import random
from typing import Optional, Sequence

from fastapi import APIRouter

from islandstats.core.config import settings
from islandstats.models.forecast import ForecastRequest, ForecastResponse, ForecastResult, SeriesSummary
from islandstats.models.island import DailyRecord, MonthlyRecord
from islandstats.services.forecaster import forecast_player_data
from islandstats.services.series_summary import summarize_series

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/forecast", tags=["forecast"])


def forecast_with_summary(
    daily: Optional[Sequence[DailyRecord]],
    monthly: Optional[Sequence[MonthlyRecord]],
) -> tuple[Optional[ForecastResult], SeriesSummary]:
    """Shared by both forecast endpoints. Seeds jitter from FORECAST_SEED when set."""
    rng = random.Random(settings.forecast_seed)
    forecast = forecast_player_data(daily, monthly, rng=rng)
    if forecast is None:
        logger.info("Not enough history to forecast (%d days)", len(daily or []))
    return forecast, summarize_series(daily, monthly)


@router.post("", response_model=ForecastResponse, status_code=200)
async def forecast_series(payload: ForecastRequest) -> ForecastResponse:
    """Project the next 30 days and next month from the posted series."""
    forecast, summary = forecast_with_summary(payload.historical_data, payload.monthly_data)
    return ForecastResponse(forecast=forecast, summary=summary)
