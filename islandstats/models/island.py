"""
island.py — Pydantic schemas for island statistics.

IslandSnapshot       — current player count + best-effort metadata
DailyRecord          — one row of the "1 month" table
MonthlyRecord        — one row of the "1 year" table
IslandStatsResponse  — what GET /api/v1/island-stats returns
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from islandstats.models.base import CamelModel, FrozenCamelModel


# ── Snapshot ──────────────────────────────────────────────────────────────────

class IslandSnapshot(FrozenCamelModel):
    map_code: str
    player_count: int = Field(ge=0)
    rank: Optional[str] = None
    title: Optional[str] = None
    author: Optional[str] = None
    tags: tuple[str, ...] = ()


# ── Series rows ───────────────────────────────────────────────────────────────

class DailyRecord(FrozenCamelModel):
    """
    A single day as displayed by the source.

    `date` is the label exactly as shown (not necessarily ISO); parse it with
    series_normalizer.parse_day_label when a real date is needed.
    """
    date: str
    peak: int = Field(ge=0)
    gain: int = 0
    gain_percent: float = 0.0
    average: int = Field(ge=0)
    avg_gain: int = 0
    avg_gain_percent: float = 0.0
    estimated_earnings: str = ""   # opaque currency string, may be empty


class MonthlyRecord(FrozenCamelModel):
    """A calendar-month aggregate. Same columns as DailyRecord."""
    month: str
    peak: int = Field(ge=0)
    gain: int = 0
    gain_percent: float = 0.0
    average: int = Field(ge=0)
    avg_gain: int = 0
    avg_gain_percent: float = 0.0
    estimated_earnings: str = ""


# ── Response ──────────────────────────────────────────────────────────────────

class IslandStatsResponse(CamelModel):
    """Response body for GET /api/v1/island-stats."""
    map_code: str
    player_count: int
    rank: Optional[str] = None
    title: Optional[str] = None
    author: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    scraped_at: datetime
    historical_data: Optional[list[DailyRecord]] = None
    monthly_data: Optional[list[MonthlyRecord]] = None
