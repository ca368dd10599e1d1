"""
trends.py — Recent (daily) and month-over-month trend signals.

Both functions expect series sorted most-recent-first; the forecaster does
that sort by parsed date before calling in.

Recent trend
  Weighted mean of day-over-day relative changes inside a window, weight
  1/i for the i-th most recent transition. Each change is clamped to ±50 %
  so one viral spike cannot dominate.

Monthly trend
  Percent change between the two latest months, clamped to ±50 points.
  None when there are fewer than two months or the older one is empty.
"""

from __future__ import annotations

from typing import Optional, Sequence

from islandstats.models.forecast import MonthlyTrend, RecentTrend
from islandstats.models.island import DailyRecord, MonthlyRecord

DEFAULT_WINDOW_DAYS = 14
MAX_DAILY_CHANGE = 0.5
MAX_MONTHLY_CHANGE_PERCENT = 50.0


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def calculate_recent_trend(
    daily: Sequence[DailyRecord],
    days: int = DEFAULT_WINDOW_DAYS,
) -> RecentTrend:
    if len(daily) < days or days < 2:
        return RecentTrend()

    window = daily[:days]
    peak_sum = avg_sum = weight_sum = 0.0

    for i in range(1, len(window)):
        weight = 1 / i
        newer, older = window[i - 1], window[i]

        # Zero on the older day would divide by zero; treat it as 1 player.
        peak_change = (newer.peak - older.peak) / (older.peak or 1)
        avg_change = (newer.average - older.average) / (older.average or 1)

        peak_sum += clamp(peak_change, -MAX_DAILY_CHANGE, MAX_DAILY_CHANGE) * weight
        avg_sum += clamp(avg_change, -MAX_DAILY_CHANGE, MAX_DAILY_CHANGE) * weight
        weight_sum += weight

    return RecentTrend(peak_trend=peak_sum / weight_sum, average_trend=avg_sum / weight_sum)


def calculate_monthly_trend(monthly: Optional[Sequence[MonthlyRecord]]) -> Optional[MonthlyTrend]:
    if not monthly or len(monthly) < 2:
        return None

    latest, previous = monthly[0], monthly[1]
    if previous.peak <= 0 or previous.average <= 0:
        return None

    raw_peak = (latest.peak - previous.peak) / previous.peak * 100
    raw_avg = (latest.average - previous.average) / previous.average * 100

    return MonthlyTrend(
        peak_trend_percent=clamp(raw_peak, -MAX_MONTHLY_CHANGE_PERCENT, MAX_MONTHLY_CHANGE_PERCENT),
        average_trend_percent=clamp(raw_avg, -MAX_MONTHLY_CHANGE_PERCENT, MAX_MONTHLY_CHANGE_PERCENT),
    )
