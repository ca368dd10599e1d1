"""
page_extractor.py — Pulls live and historical player counts for one island.

Drives a headless Chromium session against the public island stats page:

    1. validate the map code                  (no browser for bad input)
    2. goto /island?code=XXXX-XXXX-XXXX       (networkidle, 30 s)
    3. wait for .chart-stats-div              (15 s; 404 title → MapNotFound)
    4. read the snapshot                      (player count required, rest best-effort)
    5. optional: click "1M", read the table   → daily series
    6. optional: click "1Y", read the table   → monthly series

Steps 5 and 6 never fail the extraction: anything that goes wrong there is
logged and that series is simply left out.

Sessions are capped by an asyncio.Semaphore (MAX_BROWSER_SESSIONS). Each
call owns its own session for its whole lifetime and the session is always
released, whichever way the call ends.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from islandstats.core.config import settings
from islandstats.core.errors import (
    ExtractionError,
    ExtractionTimeout,
    InvalidMapCode,
    MapNotFound,
    NetworkFailure,
    StatsNotFound,
    UnknownExtractionError,
)
from islandstats.models.island import DailyRecord, IslandSnapshot, IslandStatsResponse, MonthlyRecord
from islandstats.services.browser import BrowserConfig, SessionFactory, browser_session
from islandstats.services.series_normalizer import RawRow, normalize_daily_rows, normalize_monthly_rows

logger = logging.getLogger(__name__)

MAP_CODE_RE = re.compile(r"[0-9]{4}-[0-9]{4}-[0-9]{4}")
_LEADING_INT_RE = re.compile(r"^\s*(\d+)")

MARKER_SELECTOR = ".chart-stats-div"
RANGE_SELECTOR = ".chart-range"
TABLE_ROW_SELECTOR = "#chart-month-table tbody tr"

# ── In-page scripts ───────────────────────────────────────────────────────────

SNAPSHOT_JS = """
() => {
  const text = (el) => (el && el.textContent ? el.textContent.trim() : null);
  const attempt = (fn) => { try { return fn(); } catch (e) { return null; } };

  const marker = document.querySelector('.chart-stats-div');
  const countEl = marker ? marker.querySelector('.chart-stats-title[data-n]') : null;

  const author = attempt(() => {
    const link = document.querySelector('a[href*="/creator?name="]');
    if (link) return text(link);
    for (const el of document.querySelectorAll('*')) {
      const t = text(el) || '';
      if (t.startsWith('By ') && t.length < 50 &&
          !t.includes('Fortnite Creative Map Code') && !t.includes('Fortnite.GG') && !t.includes('IsLogged')) {
        const m = t.match(/^By\\s+(.+)$/i);
        if (m) return m[1].trim();
      }
    }
    return null;
  });

  return {
    playerCount: countEl ? countEl.getAttribute('data-n') : null,
    rank: attempt(() => text(countEl.querySelector('a[href*="rank"]'))),
    title: attempt(() => text(document.querySelector('h1'))),
    author: author,
    tags: attempt(() => Array.from(document.querySelectorAll('.island-tags .island-tag'))
      .map((t) => text(t) || '').filter((t) => t.length > 0)) || [],
  };
}
"""

READ_ROWS_JS = """
(rows) => rows.map((row) => {
  const cells = Array.from(row.querySelectorAll('td'));
  return {
    cells: cells.map((c) => (c.textContent || '').trim()),
    sortKeys: cells.map((c) => c.getAttribute('data-sort')),
    classes: Array.from(row.classList),
    fontWeight: window.getComputedStyle(row).fontWeight,
  };
})
"""


# ── Value types ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ExtractionTimings:
    """Every wait the extractor performs, bounded."""
    navigation_timeout_ms: int = 30_000
    element_timeout_ms: int = 15_000
    range_control_timeout_ms: int = 10_000
    daily_settle_seconds: float = 2.0
    monthly_settle_seconds: float = 3.0
    table_settle_seconds: float = 1.0

    @classmethod
    def from_settings(cls) -> "ExtractionTimings":
        return cls(
            navigation_timeout_ms=settings.navigation_timeout_ms,
            element_timeout_ms=settings.element_timeout_ms,
            range_control_timeout_ms=settings.range_control_timeout_ms,
            daily_settle_seconds=settings.daily_settle_seconds,
            monthly_settle_seconds=settings.monthly_settle_seconds,
            table_settle_seconds=settings.table_settle_seconds,
        )


@dataclass(frozen=True)
class ExtractionOutput:
    snapshot: IslandSnapshot
    scraped_at: datetime
    daily: Optional[list[DailyRecord]] = None
    monthly: Optional[list[MonthlyRecord]] = None

    def to_response(self) -> IslandStatsResponse:
        snap = self.snapshot
        return IslandStatsResponse(
            map_code=snap.map_code,
            player_count=snap.player_count,
            rank=snap.rank,
            title=snap.title,
            author=snap.author,
            tags=list(snap.tags),
            scraped_at=self.scraped_at,
            historical_data=self.daily,
            monthly_data=self.monthly,
        )


def validate_map_code(code: Optional[str]) -> str:
    """Return the code unchanged or raise InvalidMapCode. ASCII digits only, no padding."""
    if not code or not code.strip():
        raise InvalidMapCode("Map code is required")
    if not MAP_CODE_RE.fullmatch(code):
        raise InvalidMapCode("Invalid map code format. Expected format: XXXX-XXXX-XXXX")
    return code


def _parse_player_count(raw) -> Optional[int]:
    match = _LEADING_INT_RE.match(str(raw)) if raw is not None else None
    return int(match.group(1)) if match else None


def _optional_text(value) -> Optional[str]:
    text = str(value).strip() if value is not None else ""
    return text or None


# ── Extractor ─────────────────────────────────────────────────────────────────

class PageExtractor:
    def __init__(
        self,
        config: Optional[BrowserConfig] = None,
        session_factory: SessionFactory = browser_session,
        max_sessions: Optional[int] = None,
        timings: Optional[ExtractionTimings] = None,
        base_url: Optional[str] = None,
    ):
        self._config = config or BrowserConfig.from_settings()
        self._session_factory = session_factory
        self._timings = timings or ExtractionTimings.from_settings()
        self._base_url = (base_url or settings.source_base_url).rstrip("/")
        self.max_sessions = max_sessions or settings.max_browser_sessions
        self._semaphore = asyncio.Semaphore(self.max_sessions)
        self.active_sessions = 0

    def island_url(self, code: str) -> str:
        return f"{self._base_url}/island?code={code}"

    async def extract(
        self,
        code: Optional[str],
        include_daily: bool = False,
        include_monthly: bool = False,
    ) -> ExtractionOutput:
        """
        Run one extraction. Raises an ExtractionError subclass on failure;
        optional series that can't be read come back as None instead.
        """
        code = validate_map_code(code)

        async with self._semaphore:
            self.active_sessions += 1
            try:
                async with self._session_factory(self._config) as page:
                    return await self._extract_from_page(page, code, include_daily, include_monthly)
            except ExtractionError:
                raise
            except PlaywrightTimeoutError as exc:
                logger.warning("Timed out loading island %s: %s", code, exc)
                raise ExtractionTimeout() from exc
            except PlaywrightError as exc:
                message = str(exc)
                if "net::" in message or "Navigation" in message:
                    logger.warning("Network failure loading island %s: %s", code, message)
                    raise NetworkFailure() from exc
                logger.error("Browser error extracting island %s: %s", code, message)
                raise UnknownExtractionError() from exc
            except Exception as exc:
                logger.exception("Unexpected failure extracting island %s", code)
                raise UnknownExtractionError() from exc
            finally:
                self.active_sessions -= 1

    async def _extract_from_page(
        self, page: Page, code: str, include_daily: bool, include_monthly: bool
    ) -> ExtractionOutput:
        t = self._timings
        url = self.island_url(code)
        logger.info("Extracting island %s (daily=%s, monthly=%s)", code, include_daily, include_monthly)

        await page.goto(url, wait_until="networkidle", timeout=t.navigation_timeout_ms)
        await self._wait_for_marker(page, code)
        snapshot = await self._read_snapshot(page, code)
        logger.info("Island %s: %d players", code, snapshot.player_count)

        daily = None
        if include_daily:
            daily = await self._read_series(
                page, code, "1m", t.daily_settle_seconds, normalize_daily_rows, "daily"
            )

        monthly = None
        if include_monthly:
            monthly = await self._read_series(
                page, code, "1y", t.monthly_settle_seconds, normalize_monthly_rows, "monthly"
            )

        return ExtractionOutput(
            snapshot=snapshot,
            scraped_at=datetime.now(timezone.utc),
            daily=daily,
            monthly=monthly,
        )

    async def _wait_for_marker(self, page: Page, code: str) -> None:
        try:
            await page.wait_for_selector(MARKER_SELECTOR, timeout=self._timings.element_timeout_ms)
        except PlaywrightTimeoutError:
            title = await self._page_title(page)
            if "404" in title or "Not Found" in title:
                raise MapNotFound(f"Island {code} was not found")
            raise StatsNotFound()

    async def _page_title(self, page: Page) -> str:
        try:
            return await page.title() or ""
        except PlaywrightError as exc:
            logger.debug("Could not read page title: %s", exc)
            return ""

    async def _read_snapshot(self, page: Page, code: str) -> IslandSnapshot:
        try:
            payload = await page.evaluate(SNAPSHOT_JS)
        except PlaywrightTimeoutError:
            raise
        except PlaywrightError as exc:
            logger.warning("Snapshot script failed for %s: %s", code, exc)
            raise StatsNotFound() from exc

        payload = payload or {}
        player_count = _parse_player_count(payload.get("playerCount"))
        if player_count is None:
            raise StatsNotFound()

        tags = payload.get("tags") or []
        return IslandSnapshot(
            map_code=code,
            player_count=player_count,
            rank=_optional_text(payload.get("rank")),
            title=_optional_text(payload.get("title")),
            author=_optional_text(payload.get("author")),
            tags=tuple(str(tag).strip() for tag in tags if str(tag).strip()),
        )

    async def _read_series(
        self,
        page: Page,
        code: str,
        range_key: str,
        settle_seconds: float,
        normalize: Callable[[list[RawRow]], list],
        label: str,
    ) -> Optional[list]:
        t = self._timings
        try:
            await page.wait_for_selector(RANGE_SELECTOR, timeout=t.range_control_timeout_ms)
            button = await page.query_selector(f'{RANGE_SELECTOR}[data-range="{range_key}"]')
            if button is None:
                logger.warning("No %s range control on island %s; skipping %s series", range_key, code, label)
                return None
            await button.click()
            await asyncio.sleep(settle_seconds)

            await page.wait_for_selector(TABLE_ROW_SELECTOR, timeout=t.element_timeout_ms)
            await asyncio.sleep(t.table_settle_seconds)

            payload = await page.eval_on_selector_all(TABLE_ROW_SELECTOR, READ_ROWS_JS)
            records = normalize([RawRow.from_dom(row) for row in payload or []])
        except Exception as exc:
            logger.warning("Could not read %s series for island %s: %s", label, code, exc)
            return None

        if not records:
            logger.warning("The %s table for island %s had no data rows", label, code)
            return None

        logger.info("Island %s: %d %s records", code, len(records), label)
        return records


# ── Singleton ─────────────────────────────────────────────────────────────────

page_extractor = PageExtractor()


def get_page_extractor() -> PageExtractor:
    """FastAPI dependency; tests override it with a stub."""
    return page_extractor
