"""Series builders shared by the forecasting and route tests."""

from datetime import date, timedelta

from islandstats.models.island import DailyRecord, MonthlyRecord

TODAY = date(2026, 10, 19)


def make_daily(days=30, peak=1000, average=500, end=None):
    """`days` flat daily records with ISO labels, most recent (end) first."""
    end = end or TODAY - timedelta(days=1)
    return [
        DailyRecord(date=(end - timedelta(days=i)).isoformat(), peak=peak, average=average)
        for i in range(days)
    ]


def make_monthly(*rows):
    """MonthlyRecords from (label, peak, average) tuples, in the order given."""
    return [MonthlyRecord(month=label, peak=peak, average=average) for label, peak, average in rows]
