#!/usr/bin/env python3
"""
scrape_island.py — Run one island extraction (and optionally a forecast) from the shell.

Usage (from the repo root, after `playwright install chromium`):
    # Current player count only
    python scripts/scrape_island.py 1234-5678-9012

    # Add the 1-month daily and 1-year monthly series
    python scripts/scrape_island.py 1234-5678-9012 --history --yearly

    # Both series + a 30-day forecast, reproducible jitter
    python scripts/scrape_island.py 1234-5678-9012 --forecast --seed 42

    # Watch the browser do its thing
    python scripts/scrape_island.py 1234-5678-9012 --headed

Prints camelCase JSON, the same shape the API returns. Exits with status 1
and the error message on stderr when the extraction fails.
"""

import argparse
import asyncio
import json
import logging
import random
import sys
from dataclasses import replace
from pathlib import Path

ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from islandstats.core.errors import ExtractionError  # noqa: E402
from islandstats.services.browser import BrowserConfig  # noqa: E402
from islandstats.services.forecaster import forecast_player_data  # noqa: E402
from islandstats.services.page_extractor import PageExtractor  # noqa: E402
from islandstats.services.series_summary import summarize_series  # noqa: E402


async def run(code: str, history: bool, yearly: bool, forecast: bool, headed: bool, seed) -> dict:
    config = BrowserConfig.from_settings()
    if headed:
        config = replace(config, headless=False)

    extractor = PageExtractor(config=config, max_sessions=1)
    output = await extractor.extract(
        code,
        include_daily=history or forecast,
        include_monthly=yearly or forecast,
    )
    result = output.to_response().model_dump(mode="json", by_alias=True, exclude_none=True)

    if forecast:
        projection = forecast_player_data(output.daily, output.monthly, rng=random.Random(seed))
        summary = summarize_series(output.daily, output.monthly)
        result = {
            "stats": result,
            "forecast": projection.model_dump(mode="json", by_alias=True) if projection else None,
            "summary": summary.model_dump(mode="json", by_alias=True),
        }
    return result


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Scrape player stats for one Fortnite Creative island")
    parser.add_argument("code", help="Map code, e.g. 1234-5678-9012")
    parser.add_argument("--history", action="store_true", help="Include the 1-month daily series")
    parser.add_argument("--yearly", action="store_true", help="Include the 1-year monthly series")
    parser.add_argument(
        "--forecast",
        action="store_true",
        help="Extract both series and add a 30-day forecast + summary",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for forecast jitter")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        stream=sys.stderr,
    )

    try:
        data = asyncio.run(run(args.code, args.history, args.yearly, args.forecast, args.headed, args.seed))
    except ExtractionError as exc:
        print(f"ERROR ({exc.kind}): {exc.message}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(data, indent=2))
