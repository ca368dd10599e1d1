"""
cyclical.py — Day-of-week pattern analysis for a daily series.

Island traffic has a strong weekly rhythm (weekends and Friday evenings run
hot). This module measures it:

  multiplier(day)  = mean of that weekday's values / mean of all values
  weekly_variation = Σ over 7 days of |peak_mult − 1| + |avg_mult − 1|, ÷ 14

Weekdays with no observations get a neutral 1.0. weekly_variation is only a
confidence signal for the forecaster: the bigger it is, the more the weekly
shape is worth trusting.
"""

from __future__ import annotations

from datetime import date
from statistics import fmean
from typing import Optional, Sequence

from islandstats.models.forecast import CyclicalPatterns, MetricPair
from islandstats.models.island import DailyRecord
from islandstats.services.series_normalizer import parse_day_label

# Sunday-first, matching how the dashboard lists them.
WEEKDAYS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def weekday_name(day: date) -> str:
    return day.strftime("%A")


def _ratio(values: list[int], overall: float) -> float:
    if not values or overall == 0:
        return 1.0
    return fmean(values) / overall


def analyze_cyclical_patterns(
    daily: Sequence[DailyRecord],
    today: Optional[date] = None,
) -> CyclicalPatterns:
    """
    Compute per-weekday multipliers and the aggregate weekly variation.

    Records whose date label cannot be parsed still count toward the
    overall means, they just can't be placed in a weekday bucket.
    """
    buckets: dict[str, tuple[list[int], list[int]]] = {name: ([], []) for name in WEEKDAYS}

    for record in daily:
        parsed = parse_day_label(record.date, today)
        if parsed is None:
            continue
        peaks, averages = buckets[weekday_name(parsed)]
        peaks.append(record.peak)
        averages.append(record.average)

    overall_peak = fmean(r.peak for r in daily) if daily else 0.0
    overall_average = fmean(r.average for r in daily) if daily else 0.0

    multipliers: dict[str, MetricPair] = {}
    total_variation = 0.0
    for name in WEEKDAYS:
        peaks, averages = buckets[name]
        peak_mult = _ratio(peaks, overall_peak)
        avg_mult = _ratio(averages, overall_average)
        multipliers[name] = MetricPair(peak=peak_mult, average=avg_mult)
        total_variation += abs(peak_mult - 1) + abs(avg_mult - 1)

    return CyclicalPatterns(
        day_of_week_multipliers=multipliers,
        weekly_variation=total_variation / (len(WEEKDAYS) * 2),
    )


def pattern_strength(weekly_variation: float) -> str:
    """Dashboard wording for the weekly rhythm."""
    if weekly_variation > 0.2:
        return "strong"
    if weekly_variation > 0.1:
        return "moderate"
    return "weak"
