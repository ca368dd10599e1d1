"""
Health check endpoint.

Used by:
  - Docker HEALTHCHECK instruction
  - Load balancers / orchestrators
  - The dashboard, to check API connectivity before scraping

Reports browser-session usage so callers can tell "API down" apart from
"API up but every Chromium slot is busy".
"""

import logging

from fastapi import APIRouter, Depends

from islandstats.core.config import settings
from islandstats.models.base import CamelModel
from islandstats.services.page_extractor import PageExtractor, get_page_extractor

logger = logging.getLogger(__name__)
router = APIRouter()

VERSION = "0.1.0"


class BrowserSessions(CamelModel):
    max: int
    in_use: int


class HealthResponse(CamelModel):
    status: str  # Always "ok" if the API process is alive
    version: str
    environment: str
    browser_sessions: BrowserSessions


@router.get("", response_model=HealthResponse, summary="API health check")
async def health_check(extractor: PageExtractor = Depends(get_page_extractor)) -> HealthResponse:
    """
    Liveness of the API plus how many browser sessions are currently open.

    Never launches a browser itself; a saturated pool is still HTTP 200.
    """
    sessions = BrowserSessions(max=extractor.max_sessions, in_use=extractor.active_sessions)
    if sessions.in_use >= sessions.max:
        logger.debug("Health check: browser pool saturated (%d/%d)", sessions.in_use, sessions.max)

    return HealthResponse(
        status="ok",
        version=VERSION,
        environment=settings.environment,
        browser_sessions=sessions,
    )
