"""
series_normalizer.py — Raw table rows → typed DailyRecord / MonthlyRecord.

The extractor hands over each <tr> of the stats table as a RawRow: the cell
texts, each cell's `data-sort` attribute (if any), the row's classes and its
computed font weight. This module decides which rows are data and parses
them.

Column layout (both the "1 month" and "1 year" tables):
  0 label  1 peak  2 gain  3 gain %  4 average  5 avg gain  6 avg gain %
  7 estimated earnings

Parsing is lenient on purpose: an unparsable number becomes 0 (or 0.0) so a
single malformed cell degrades one row instead of the whole series.

Date helpers live here too, because every position-dependent computation
downstream has to re-sort by parsed date rather than trust table order.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Sequence, TypeVar, Union

from islandstats.models.island import DailyRecord, MonthlyRecord

logger = logging.getLogger(__name__)

MIN_CELLS = 8

_SUMMARY_LABELS = ("Total", "Sum")
_SUMMARY_CLASS = "no-sort"
_NUM_JUNK_RE = re.compile(r"[,\s+%\u200b]")
_WS_RE = re.compile(r"\s+")


# ── Raw rows ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RawRow:
    cells: list[str]
    sort_keys: list[Optional[str]] = field(default_factory=list)
    classes: list[str] = field(default_factory=list)
    font_weight: str = ""

    @classmethod
    def from_dom(cls, payload: dict) -> RawRow:
        """Build from the dict produced by the extractor's row-reading script."""
        cells = [str(c or "").strip() for c in payload.get("cells") or []]
        sort_keys = [None if k is None else str(k) for k in payload.get("sortKeys") or []]
        return cls(
            cells=cells,
            sort_keys=sort_keys,
            classes=list(payload.get("classes") or []),
            font_weight=str(payload.get("fontWeight") or ""),
        )

    def value(self, index: int) -> str:
        """Sortable attribute if present, else the displayed text."""
        if index < len(self.sort_keys):
            key = self.sort_keys[index]
            if key is not None and key.strip():
                return key.strip()
        return self.cells[index] if index < len(self.cells) else ""


# ── Number parsing ────────────────────────────────────────────────────────────

def _clean_number(text: Optional[str]) -> str:
    if text is None:
        return ""
    return _NUM_JUNK_RE.sub("", str(text)).replace("\u2212", "-")


def parse_int(text: Optional[str]) -> int:
    """"1,234" → 1234, "+56" → 56, garbage → 0."""
    cleaned = _clean_number(text)
    try:
        return int(float(cleaned))
    except (ValueError, OverflowError):
        return 0


def parse_float(text: Optional[str]) -> float:
    """"-12.5%" → -12.5, garbage → 0.0."""
    cleaned = _clean_number(text)
    try:
        value = float(cleaned)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


# ── Row classification ────────────────────────────────────────────────────────

def _is_bold(font_weight: str) -> bool:
    weight = font_weight.strip().lower()
    if weight in ("bold", "bolder"):
        return True
    try:
        return int(weight) >= 700
    except ValueError:
        return False


def is_summary_row(row: RawRow) -> bool:
    """True for the trailing totals row (or anything without a usable label)."""
    if _SUMMARY_CLASS in row.classes:
        return True
    if _is_bold(row.font_weight):
        return True
    label = row.cells[0] if row.cells else ""
    if not label:
        return True
    return any(marker in label for marker in _SUMMARY_LABELS)


def _numeric_columns(row: RawRow) -> dict:
    return {
        "peak": max(0, parse_int(row.value(1))),
        "gain": parse_int(row.value(2)),
        "gain_percent": parse_float(row.value(3)),
        "average": max(0, parse_int(row.value(4))),
        "avg_gain": parse_int(row.value(5)),
        "avg_gain_percent": parse_float(row.value(6)),
        "estimated_earnings": row.cells[7],
    }


def _accept(row: RawRow) -> bool:
    if is_summary_row(row):
        logger.debug("Skipping summary row: %r", row.cells[:1])
        return False
    if len(row.cells) < MIN_CELLS:
        logger.debug("Skipping short row (%d cells)", len(row.cells))
        return False
    return True


def normalize_daily_row(row: RawRow) -> Optional[DailyRecord]:
    if not _accept(row):
        return None
    return DailyRecord(date=row.cells[0], **_numeric_columns(row))


def normalize_monthly_row(row: RawRow) -> Optional[MonthlyRecord]:
    if not _accept(row):
        return None
    return MonthlyRecord(month=row.cells[0], **_numeric_columns(row))


def normalize_daily_rows(rows: Iterable[RawRow]) -> list[DailyRecord]:
    return [r for r in map(normalize_daily_row, rows) if r is not None]


def normalize_monthly_rows(rows: Iterable[RawRow]) -> list[MonthlyRecord]:
    return [r for r in map(normalize_monthly_row, rows) if r is not None]


# ── Date labels ───────────────────────────────────────────────────────────────

_DAY_FORMATS = (
    "%Y-%m-%d",
    "%b %d, %Y",
    "%B %d, %Y",
    "%a, %b %d, %Y",
    "%A, %B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%m/%d/%Y",
    "%a %b %d %Y",
)

# Parsed with the reference year appended, so Feb 29 works in leap years.
_DAY_FORMATS_NO_YEAR = (
    "%a, %b %d",
    "%A, %B %d",
    "%b %d",
    "%B %d",
    "%d %b",
    "%a %b %d",
)

_MONTH_FORMATS = ("%B %Y", "%b %Y", "%Y-%m", "%m/%Y", "%Y-%m-%d")


def _tidy(label: str) -> str:
    return _WS_RE.sub(" ", label.replace(".", "")).strip()


def parse_day_label(label: str, today: Optional[date] = None) -> Optional[date]:
    """
    Parse a displayed day label into a date, or None.

    Labels without a year take the reference year; if that lands after
    `today` the label must belong to the previous year.
    """
    today = today or date.today()
    text = _tidy(label or "")
    if not text:
        return None

    lowered = text.lower()
    if lowered == "today":
        return today
    if lowered == "yesterday":
        return today - timedelta(days=1)

    for fmt in _DAY_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    for fmt in _DAY_FORMATS_NO_YEAR:
        for year in (today.year, today.year - 1):
            try:
                parsed = datetime.strptime(f"{text} {year}", f"{fmt} %Y").date()
            except ValueError:
                continue
            if parsed <= today:
                return parsed
    return None


def parse_month_label(label: str) -> Optional[date]:
    """Parse "October 2025" / "Oct 2025" / "2025-10" into the first of that month."""
    text = _tidy(label or "")
    if not text:
        return None
    for fmt in _MONTH_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().replace(day=1)
        except ValueError:
            continue
    return None


Record = TypeVar("Record", DailyRecord, MonthlyRecord)


def record_date(record: Union[DailyRecord, MonthlyRecord], today: Optional[date] = None) -> Optional[date]:
    if isinstance(record, MonthlyRecord):
        return parse_month_label(record.month)
    return parse_day_label(record.date, today)


def sort_most_recent_first(records: Sequence[Record], today: Optional[date] = None) -> list[Record]:
    """
    Order by parsed date, newest first.

    Rows whose label cannot be parsed keep their delivered order and go last.
    """
    keyed = []
    for index, record in enumerate(records):
        parsed = record_date(record, today)
        keyed.append(((parsed is not None, parsed or date.min, -index), record))
    keyed.sort(key=lambda item: item[0], reverse=True)
    return [record for _, record in keyed]
