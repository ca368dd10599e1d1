"""
forecaster.py — 30-day and next-month player-count projection.

Pure, synchronous, no shared state: safe to call from any number of
requests at once. The only non-determinism is the jitter, which comes from
an injected random.Random so tests can seed it.

USAGE
─────
    from islandstats.services.forecaster import forecast_player_data

    result = forecast_player_data(daily_records, monthly_records)
    if result is None:
        ...  # fewer than 7 days of history: nothing to forecast

HOW A DAY IS PROJECTED
──────────────────────
For forecast day i (1..30, counted from today):

    baseline   rounded mean of the 7 most recent days
  × weekday    cyclical multiplier for that day's weekday      [0.5, 2.0]
  × monthly    1 + (monthly % / 100) × 0.3                     [0.5, 2.0]
  × recent     1 + recent_trend × e^(−i/21) × 0.2              [0.5, 2.0]
  × jitter     U(0.95, 1.05), drawn separately per metric
  → rounded, then clamped to [max(1, 10 % of baseline), 3 × baseline]

The monthly signal is damped to 30 % so a single swing between two months
doesn't swamp the projection, and the recent trend fades over ~3 weeks.
Peak is then forced to stay ≥ average.

CONFIDENCE
──────────
Overall: medium by default, high with a usable month-over-month trend, low
without monthly history; then nudged by weekly-rhythm strength. Per day it
decays: base through day 14, one level lower for days 15–21, low after.
"""

from __future__ import annotations

import logging
import math
import random
from datetime import date, timedelta
from statistics import fmean
from typing import Optional, Sequence

from islandstats.models.forecast import (
    Confidence,
    CyclicalPatterns,
    ForecastedDay,
    ForecastedMonth,
    ForecastResult,
    Methodology,
    MonthlyTrend,
    RecentTrend,
    RollingAverageBase,
)
from islandstats.models.island import DailyRecord, MonthlyRecord
from islandstats.services.cyclical import analyze_cyclical_patterns, pattern_strength, weekday_name
from islandstats.services.series_normalizer import sort_most_recent_first
from islandstats.services.trends import calculate_monthly_trend, calculate_recent_trend, clamp

logger = logging.getLogger(__name__)

# ── Tunables ──────────────────────────────────────────────────────────────────

FORECAST_DAYS = 30
MIN_HISTORY_DAYS = 7
ROLLING_WINDOW_DAYS = 7
TREND_WINDOW_DAYS = 14

MULTIPLIER_MIN, MULTIPLIER_MAX = 0.5, 2.0
MONTHLY_DAMPING = 0.3
RECENT_DAMPING = 0.2
TREND_DECAY_DAYS = 21.0
JITTER_MIN, JITTER_MAX = 0.95, 1.05
PEAK_BUFFER_MIN, PEAK_BUFFER_MAX = 1.05, 1.15
FLOOR_FRACTION = 0.1
CEILING_FACTOR = 3

STRONG_VARIATION = 0.3
WEAK_VARIATION = 0.1

_LEVELS: tuple[Confidence, ...] = ("low", "medium", "high")


# ── Small helpers ─────────────────────────────────────────────────────────────

def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _downgrade(level: Confidence) -> Confidence:
    return _LEVELS[max(0, _LEVELS.index(level) - 1)]


def prediction_bounds(baseline: int) -> tuple[int, int]:
    """[max(1, ⌈10 % of baseline⌉), 3 × baseline]."""
    return max(1, math.ceil(baseline * FLOOR_FRACTION)), baseline * CEILING_FACTOR


def _bounded(value: int, baseline: int) -> int:
    low, high = prediction_bounds(baseline)
    return max(low, min(high, value))


def _multiplier(value: float) -> float:
    return clamp(value, MULTIPLIER_MIN, MULTIPLIER_MAX)


def rolling_average_base(daily_most_recent_first: Sequence[DailyRecord]) -> RollingAverageBase:
    window = daily_most_recent_first[:ROLLING_WINDOW_DAYS]
    return RollingAverageBase(
        peak=round_half_up(fmean(d.peak for d in window)),
        average=round_half_up(fmean(d.average for d in window)),
    )


# ── Confidence ────────────────────────────────────────────────────────────────

def overall_confidence(
    monthly: Optional[Sequence[MonthlyRecord]],
    monthly_trend: Optional[MonthlyTrend],
    weekly_variation: float,
) -> Confidence:
    if monthly and len(monthly) >= 2:
        confidence: Confidence = "high" if monthly_trend is not None else "medium"
    else:
        confidence = "low"

    if weekly_variation > STRONG_VARIATION:
        confidence = "high" if confidence == "high" else "medium"
    elif weekly_variation < WEAK_VARIATION:
        confidence = _downgrade(confidence)
    return confidence


def day_confidence(base: Confidence, day_index: int) -> Confidence:
    if day_index > 21:
        return "low"
    if day_index > 14:
        return _downgrade(base)
    return base


def _rationale(confidence: Confidence, monthly_trend: Optional[MonthlyTrend], variation: float) -> str:
    source = "monthly trend data" if monthly_trend is not None else "rolling average only"
    return f"{confidence} confidence based on {source} and {pattern_strength(variation)} cyclical patterns"


# ── Labels ────────────────────────────────────────────────────────────────────

def day_label(day: date) -> str:
    return f"{day:%a}, {day:%b} {day.day}"


def next_month_label(today: date) -> str:
    year, month = today.year + today.month // 12, today.month % 12 + 1
    return date(year, month, 1).strftime("%B %Y")


# ── Projection ────────────────────────────────────────────────────────────────

def _project_day(
    day_index: int,
    forecast_date: date,
    base: RollingAverageBase,
    patterns: CyclicalPatterns,
    monthly_trend: MonthlyTrend,
    recent_trend: RecentTrend,
    confidence: Confidence,
    rng: random.Random,
) -> ForecastedDay:
    weekday = patterns.day_of_week_multipliers.get(weekday_name(forecast_date))
    weekday_peak = weekday.peak if weekday else 1.0
    weekday_avg = weekday.average if weekday else 1.0

    decay = math.exp(-day_index / TREND_DECAY_DAYS)

    peak_factor = (
        _multiplier(weekday_peak)
        * _multiplier(1 + monthly_trend.peak_trend_percent / 100 * MONTHLY_DAMPING)
        * _multiplier(1 + recent_trend.peak_trend * decay * RECENT_DAMPING)
        * rng.uniform(JITTER_MIN, JITTER_MAX)
    )
    avg_factor = (
        _multiplier(weekday_avg)
        * _multiplier(1 + monthly_trend.average_trend_percent / 100 * MONTHLY_DAMPING)
        * _multiplier(1 + recent_trend.average_trend * decay * RECENT_DAMPING)
        * rng.uniform(JITTER_MIN, JITTER_MAX)
    )

    predicted_peak = _bounded(round_half_up(base.peak * peak_factor), base.peak)
    predicted_average = _bounded(round_half_up(base.average * avg_factor), base.average)

    if predicted_peak < predicted_average:
        buffered = round_half_up(predicted_average * rng.uniform(PEAK_BUFFER_MIN, PEAK_BUFFER_MAX))
        _, peak_ceiling = prediction_bounds(base.peak)
        # Peak ≥ average wins over the peak ceiling when the two disagree.
        predicted_peak = max(predicted_average, min(peak_ceiling, buffered))

    return ForecastedDay(
        date=day_label(forecast_date),
        predicted_peak=predicted_peak,
        predicted_average=predicted_average,
        confidence=day_confidence(confidence, day_index),
    )


def forecast_player_data(
    daily: Optional[Sequence[DailyRecord]],
    monthly: Optional[Sequence[MonthlyRecord]] = None,
    *,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> Optional[ForecastResult]:
    """
    Project the next 30 days and the next calendar month.

    Returns None when fewer than 7 daily records are available; that is the
    normal state for a young island, not an error.
    """
    if not daily or len(daily) < MIN_HISTORY_DAYS:
        return None

    rng = rng or random.Random()
    today = today or date.today()

    sorted_daily = sort_most_recent_first(daily, today)
    sorted_monthly = sort_most_recent_first(monthly, today) if monthly else []

    patterns = analyze_cyclical_patterns(sorted_daily, today)
    base = rolling_average_base(sorted_daily)
    recent_trend = calculate_recent_trend(sorted_daily, TREND_WINDOW_DAYS)
    monthly_trend = calculate_monthly_trend(sorted_monthly)
    confidence = overall_confidence(sorted_monthly, monthly_trend, patterns.weekly_variation)

    logger.debug(
        "Forecast inputs: %d days, %d months, base=%s, variation=%.3f, confidence=%s",
        len(sorted_daily), len(sorted_monthly), base, patterns.weekly_variation, confidence,
    )

    applied_monthly = monthly_trend or MonthlyTrend()
    days = tuple(
        _project_day(
            i, today + timedelta(days=i), base, patterns,
            applied_monthly, recent_trend, confidence, rng,
        )
        for i in range(1, FORECAST_DAYS + 1)
    )

    month = ForecastedMonth(
        month=next_month_label(today),
        predicted_peak=max(d.predicted_peak for d in days),
        predicted_average=round_half_up(fmean(d.predicted_average for d in days)),
        total_days=len(days),
    )

    return ForecastResult(
        forecasted_days=days,
        forecasted_month=month,
        methodology=Methodology(
            rolling_average_base=base,
            monthly_trend_adjustment=applied_monthly,
            recent_trend=recent_trend,
            cyclical_patterns=patterns,
            confidence=_rationale(confidence, monthly_trend, patterns.weekly_variation),
        ),
        confidence=confidence,
    )
