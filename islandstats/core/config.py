"""
Application configuration loaded from environment variables.

Uses pydantic-settings for type-safe env var parsing with automatic
.env file loading. Browser timeouts and settle delays live here so tests
and slow deployments can tune them without touching the extractor.

To extend: add new fields here and document them in .env.example.
See https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ─── Core ──────────────────────────────────────────────────────
    environment: str = "development"
    debug: bool = False

    # ─── CORS ──────────────────────────────────────────────────────
    # Comma-separated allowed origins for the dashboard front-end.
    cors_origins_str: str = "http://localhost:5173,http://localhost:3000"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins_str.split(",") if o.strip()]

    # ─── Source site ───────────────────────────────────────────────
    source_base_url: str = "https://fortnite.gg"

    # ─── Browser ───────────────────────────────────────────────────
    browser_headless: bool = True
    browser_user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )

    # Every wait is bounded. Exceeding one is a normal failure mode.
    navigation_timeout_ms: int = 30_000
    element_timeout_ms: int = 15_000
    range_control_timeout_ms: int = 10_000

    # The source re-renders its table after a range button is clicked and
    # exposes no completion event, so a fixed settle delay is the only sync.
    daily_settle_seconds: float = 2.0
    monthly_settle_seconds: float = 3.0
    table_settle_seconds: float = 1.0

    # Each session is a full Chromium process tree.
    max_browser_sessions: int = 2

    # ─── Rate limiting ─────────────────────────────────────────────
    stats_rate_limit: str = "10/minute"

    # ─── Forecasting ───────────────────────────────────────────────
    # Set to make forecast jitter reproducible (e.g. for demos).
    forecast_seed: Optional[int] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Don't fail on unknown env vars
    )


# Module-level singleton: import this everywhere instead of instantiating Settings()
settings = Settings()
