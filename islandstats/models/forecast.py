"""
forecast.py — Pydantic schemas for player-count forecasting.

ForecastRequest   — caller-supplied series for POST /api/v1/forecast
ForecastResult    — 30 forecasted days + next month + methodology
SeriesSummary     — headline aggregates of the historical series
ForecastResponse  — { forecast, summary } (forecast is null when history is short)
"""

from typing import Literal, Optional

from pydantic import Field

from islandstats.models.base import CamelModel, FrozenCamelModel
from islandstats.models.island import DailyRecord, IslandStatsResponse, MonthlyRecord

Confidence = Literal["high", "medium", "low"]


# ── Building blocks ───────────────────────────────────────────────────────────

class MetricPair(FrozenCamelModel):
    peak: float
    average: float


class RollingAverageBase(FrozenCamelModel):
    """Rounded 7-day means the forecast is built on."""
    peak: int
    average: int


class MonthlyTrend(FrozenCamelModel):
    """Month-over-month change in percent, each clamped to ±50."""
    peak_trend_percent: float = 0.0
    average_trend_percent: float = 0.0


class RecentTrend(FrozenCamelModel):
    """Decayed day-over-day trend as a small signed fraction (0.02 = +2 %/day)."""
    peak_trend: float = 0.0
    average_trend: float = 0.0


class CyclicalPatterns(FrozenCamelModel):
    day_of_week_multipliers: dict[str, MetricPair]
    weekly_variation: float = Field(ge=0.0)


# ── Forecast output ───────────────────────────────────────────────────────────

class ForecastedDay(FrozenCamelModel):
    date: str                 # "Mon, Oct 20"
    predicted_peak: int = Field(ge=0)
    predicted_average: int = Field(ge=0)
    confidence: Confidence
    is_forecasted: bool = True


class ForecastedMonth(FrozenCamelModel):
    month: str                # "November 2026"
    predicted_peak: int = Field(ge=0)
    predicted_average: int = Field(ge=0)
    total_days: int


class Methodology(FrozenCamelModel):
    rolling_average_base: RollingAverageBase
    monthly_trend_adjustment: MonthlyTrend
    recent_trend: RecentTrend
    cyclical_patterns: CyclicalPatterns
    confidence: str           # human-readable rationale


class ForecastResult(FrozenCamelModel):
    forecasted_days: tuple[ForecastedDay, ...]
    forecasted_month: ForecastedMonth
    methodology: Methodology
    confidence: Confidence


# ── Summary ───────────────────────────────────────────────────────────────────

class SeriesSummary(FrozenCamelModel):
    days: int = 0
    thirty_day_average: Optional[int] = None
    highest_peak: Optional[int] = None
    latest_peak: Optional[int] = None
    latest_average: Optional[int] = None
    months: int = 0
    monthly_average: Optional[int] = None


# ── Request / response ────────────────────────────────────────────────────────

class ForecastRequest(CamelModel):
    """Payload for POST /api/v1/forecast."""
    historical_data: list[DailyRecord] = Field(default_factory=list, max_length=400)
    monthly_data: Optional[list[MonthlyRecord]] = Field(default=None, max_length=120)


class ForecastResponse(CamelModel):
    forecast: Optional[ForecastResult] = None
    summary: SeriesSummary


class IslandForecastResponse(CamelModel):
    """Response body for GET /api/v1/island-stats/{code}/forecast."""
    stats: IslandStatsResponse
    forecast: Optional[ForecastResult] = None
    summary: SeriesSummary
