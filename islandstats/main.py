"""
Island Stats API — Application entry point.

Bootstraps FastAPI, wires up middleware, registers route groups and the
extraction error handler.

Extension points:
  - Add new route groups with app.include_router() below
  - Add new middleware in the middleware block
  - Change startup behaviour in the lifespan context manager
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from islandstats.core.config import settings
from islandstats.core.errors import ExtractionError, extraction_error_handler
from islandstats.core.rate_limit import limiter
from islandstats.routes.forecast import router as forecast_router
from islandstats.routes.health import VERSION
from islandstats.routes.health import router as health_router
from islandstats.routes.islands import router as islands_router

# ─── Logging ───────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ─── Lifespan ──────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup / shutdown logging.

    Browsers are launched per request and closed by their own session
    scope, so there is nothing to tear down here.
    """
    logger.info(
        "Starting Island Stats API (env: %s, max browser sessions: %d)",
        settings.environment, settings.max_browser_sessions,
    )
    yield
    logger.info("Shutting down Island Stats API")


# ─── App ───────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="Island Stats API",
    description=(
        "Live and historical player counts for Fortnite Creative islands, "
        "scraped with a headless browser, plus a 30-day forecast. "
        "Forecasts are heuristic projections, not guarantees."
    ),
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
)


# ─── Rate limiting ─────────────────────────────────────────────────────────────
# Routes opt in with @limiter.limit(...) + a request: Request parameter.
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ─── Errors ────────────────────────────────────────────────────────────────────
app.add_exception_handler(ExtractionError, extraction_error_handler)

# ─── Middleware ─────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─── Routes ────────────────────────────────────────────────────────────────────
app.include_router(health_router, prefix="/health", tags=["health"])
app.include_router(islands_router)
app.include_router(forecast_router)


@app.get("/", tags=["root"])
async def root():
    """API root — basic metadata."""
    return {
        "name": "Island Stats API",
        "version": VERSION,
        "status": "running",
        "environment": settings.environment,
        "docs": "/docs",
    }
