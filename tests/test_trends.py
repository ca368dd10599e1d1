"""test_trends.py — Recent (decayed daily) and month-over-month trends."""

import pytest

from factories import make_daily, make_monthly
from islandstats.models.island import DailyRecord
from islandstats.services.trends import calculate_monthly_trend, calculate_recent_trend


def _series(values):
    """Most-recent-first daily records with the given peaks and averages."""
    return [DailyRecord(date=f"day {i}", peak=v, average=v) for i, v in enumerate(values)]


class TestRecentTrend:

    def test_too_few_records_is_zero(self):
        trend = calculate_recent_trend(make_daily(days=13), days=14)
        assert trend.peak_trend == 0.0
        assert trend.average_trend == 0.0

    def test_flat_series_is_zero(self):
        trend = calculate_recent_trend(make_daily(days=20))
        assert trend.peak_trend == pytest.approx(0.0)

    def test_steady_growth(self):
        # Newest first: each day is 10 % above the one before it.
        values = [round(1000 * 1.1 ** (13 - i)) for i in range(14)]
        trend = calculate_recent_trend(_series(values))
        assert trend.peak_trend == pytest.approx(0.1, abs=0.005)
        assert trend.average_trend == pytest.approx(0.1, abs=0.005)

    def test_spikes_clamped_to_half(self):
        values = [1000 * 2 ** (13 - i) for i in range(14)]
        trend = calculate_recent_trend(_series(values))
        assert trend.peak_trend == pytest.approx(0.5)

    def test_zero_previous_day_does_not_divide_by_zero(self):
        values = [10] + [0] * 13
        trend = calculate_recent_trend(_series(values))
        assert -0.5 <= trend.peak_trend <= 0.5

    def test_most_recent_change_weighs_most(self):
        # Only the newest transition moves: +50 % with weight 1 out of H(13).
        values = [150] + [100] * 13
        trend = calculate_recent_trend(_series(values))
        harmonic = sum(1 / i for i in range(1, 14))
        assert trend.peak_trend == pytest.approx(0.5 / harmonic)


class TestMonthlyTrend:

    def test_needs_two_months(self):
        assert calculate_monthly_trend(make_monthly(("October 2026", 100, 50))) is None
        assert calculate_monthly_trend([]) is None
        assert calculate_monthly_trend(None) is None

    def test_percent_change(self):
        trend = calculate_monthly_trend(
            make_monthly(("October 2026", 120, 40), ("September 2026", 100, 50))
        )
        assert trend.peak_trend_percent == pytest.approx(20.0)
        assert trend.average_trend_percent == pytest.approx(-20.0)

    def test_clamped_to_fifty_percent(self):
        trend = calculate_monthly_trend(
            make_monthly(("October 2026", 1000, 10), ("September 2026", 100, 100))
        )
        assert trend.peak_trend_percent == 50.0
        assert trend.average_trend_percent == -50.0

    def test_exact_fifty_percent_not_clamped_further(self):
        trend = calculate_monthly_trend(
            make_monthly(("October 2026", 1500, 150), ("September 2026", 1000, 100))
        )
        assert trend.peak_trend_percent == 50.0

    def test_eighty_percent_clamps_to_fifty(self):
        trend = calculate_monthly_trend(
            make_monthly(("October 2026", 1800, 180), ("September 2026", 1000, 100))
        )
        assert trend.peak_trend_percent == 50.0
        assert trend.average_trend_percent == 50.0

    def test_empty_previous_month_is_none(self):
        assert calculate_monthly_trend(
            make_monthly(("October 2026", 100, 50), ("September 2026", 0, 0))
        ) is None
