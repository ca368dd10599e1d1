"""
series_summary.py — Headline numbers for the stats dashboard.

Computed from whatever series were extracted (or supplied). Every field is
null when its source series is missing or empty.
"""

from __future__ import annotations

from datetime import date
from statistics import fmean
from typing import Optional, Sequence

from islandstats.models.forecast import SeriesSummary
from islandstats.models.island import DailyRecord, MonthlyRecord
from islandstats.services.forecaster import round_half_up
from islandstats.services.series_normalizer import sort_most_recent_first

SUMMARY_WINDOW_DAYS = 30


def summarize_series(
    daily: Optional[Sequence[DailyRecord]],
    monthly: Optional[Sequence[MonthlyRecord]] = None,
    today: Optional[date] = None,
) -> SeriesSummary:
    fields: dict = {}

    if daily:
        recent = sort_most_recent_first(daily, today)
        window = recent[:SUMMARY_WINDOW_DAYS]
        fields.update(
            days=len(recent),
            thirty_day_average=round_half_up(fmean(d.average for d in window)),
            highest_peak=max(d.peak for d in recent),
            latest_peak=recent[0].peak,
            latest_average=recent[0].average,
        )

    if monthly:
        fields.update(
            months=len(monthly),
            monthly_average=round_half_up(fmean(m.average for m in monthly)),
        )

    return SeriesSummary(**fields)
