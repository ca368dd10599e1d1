"""
rate_limit.py — Global rate limiter instance.

Uses slowapi (a Starlette-compatible wrapper around the `limits` library).
Requests are keyed by client IP address.

Only the browser-backed endpoints opt in: every request there launches a
Chromium session, so an unthrottled client can exhaust the host quickly.

Usage in routes:
    from fastapi import Request
    from islandstats.core.rate_limit import limiter

    @router.get("/some-scraping-endpoint")
    @limiter.limit(settings.stats_rate_limit)
    async def my_endpoint(request: Request):
        ...
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)
