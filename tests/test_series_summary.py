"""test_series_summary.py — Headline aggregates for the dashboard."""

from factories import TODAY, make_daily, make_monthly
from islandstats.models.forecast import SeriesSummary
from islandstats.models.island import DailyRecord
from islandstats.services.series_summary import summarize_series


class TestSummarizeSeries:

    def test_absent_series_give_null_fields(self):
        assert summarize_series(None, None) == SeriesSummary()
        assert summarize_series([], []) == SeriesSummary(days=0, months=0)

    def test_daily_aggregates(self):
        daily = [
            DailyRecord(date="2026-10-16", peak=300, average=101),
            DailyRecord(date="2026-10-18", peak=120, average=60),
            DailyRecord(date="2026-10-17", peak=200, average=100),
        ]
        summary = summarize_series(daily, today=TODAY)
        assert summary.days == 3
        assert summary.highest_peak == 300
        # Latest is by parsed date, not table position.
        assert summary.latest_peak == 120
        assert summary.latest_average == 60
        assert summary.thirty_day_average == 87  # (101 + 60 + 100) / 3 = 87.0
        assert summary.monthly_average is None

    def test_thirty_day_window(self):
        older = make_daily(days=40, average=10)
        recent = [d.model_copy(update={"average": 1000}) for d in older[:30]]
        summary = summarize_series(recent + older[30:], today=TODAY)
        assert summary.days == 40
        assert summary.thirty_day_average == 1000

    def test_monthly_average(self):
        monthly = make_monthly(("October 2026", 500, 250), ("September 2026", 400, 151))
        summary = summarize_series(None, monthly)
        assert summary.months == 2
        assert summary.monthly_average == 201  # 200.5 rounds half up
        assert summary.thirty_day_average is None

    def test_serialized_keys_are_camel_case(self):
        data = summarize_series(make_daily(days=3), None).model_dump(by_alias=True)
        assert set(data) == {
            "days", "thirtyDayAverage", "highestPeak", "latestPeak",
            "latestAverage", "months", "monthlyAverage",
        }
