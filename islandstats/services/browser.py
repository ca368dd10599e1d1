"""
browser.py — Scoped headless-Chromium sessions.

One session = one Playwright driver + one browser + one context + one page.
Nothing is shared between sessions, so two concurrent extractions can't see
each other's cookies or navigation state.

USAGE
─────
    config = BrowserConfig.from_settings()
    async with browser_session(config) as page:
        await page.goto("https://fortnite.gg/island?code=1234-5678-9012")

The browser is always closed on exit, including when the body raises. A
failure while closing is logged and swallowed so it can't mask the body's
own error.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncContextManager, AsyncIterator, Callable

from playwright.async_api import Page, async_playwright

from islandstats.core.config import settings

logger = logging.getLogger(__name__)

CHROMIUM_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-blink-features=AutomationControlled",
)


@dataclass(frozen=True)
class BrowserConfig:
    """Everything needed to open a session. Immutable once built."""
    headless: bool = True
    user_agent: str = ""
    viewport_width: int = 1920
    viewport_height: int = 1080
    accept_language: str = "en-US,en;q=0.9"
    args: tuple[str, ...] = CHROMIUM_ARGS

    @classmethod
    def from_settings(cls) -> "BrowserConfig":
        return cls(headless=settings.browser_headless, user_agent=settings.browser_user_agent)


SessionFactory = Callable[[BrowserConfig], AsyncContextManager[Page]]


@asynccontextmanager
async def browser_session(config: BrowserConfig) -> AsyncIterator[Page]:
    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=config.headless, args=list(config.args))
        try:
            context = await browser.new_context(
                user_agent=config.user_agent or None,
                viewport={"width": config.viewport_width, "height": config.viewport_height},
                extra_http_headers={"Accept-Language": config.accept_language},
            )
            page = await context.new_page()
            logger.debug("Browser session opened (headless=%s)", config.headless)
            yield page
        finally:
            try:
                await browser.close()
                logger.debug("Browser session closed")
            except Exception as exc:
                logger.error("Failed to close browser session: %s", exc)
