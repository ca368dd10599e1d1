"""
errors.py — Extraction error taxonomy.

Each failure kind carries the HTTP status the API reports for it, so the
single exception handler registered in main.py can render any of them:

  InvalidMapCode          400  malformed code, nothing was attempted
  MapNotFound             404  the source says the island does not exist
  StatsNotFound           404  island page exists, player count missing
  ExtractionTimeout       408  a bounded wait ran out
  NetworkFailure          503  navigation failed at the network level
  UnknownExtractionError  500  anything else

Optional daily/monthly sub-extractions never raise these; they degrade to
"series absent" inside the extractor.
"""

from fastapi import Request
from fastapi.responses import JSONResponse


class ExtractionError(Exception):
    kind = "unknown"
    status_code = 500
    default_message = "Failed to scrape island data. Please try again later."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class InvalidMapCode(ExtractionError):
    kind = "invalid_input"
    status_code = 400
    default_message = "Invalid map code format. Expected format: XXXX-XXXX-XXXX"


class MapNotFound(ExtractionError):
    kind = "not_found"
    status_code = 404
    default_message = "Map not found. Please check the map code."


class StatsNotFound(ExtractionError):
    kind = "stats_not_found"
    status_code = 404
    default_message = (
        "Could not find player count data. The map might not have current statistics."
    )


class ExtractionTimeout(ExtractionError):
    kind = "timeout"
    status_code = 408
    default_message = "Request timeout. The website might be slow or unavailable."


class NetworkFailure(ExtractionError):
    kind = "network_failure"
    status_code = 503
    default_message = "Network error while loading the island page. Try again later."


class UnknownExtractionError(ExtractionError):
    pass


async def extraction_error_handler(request: Request, exc: ExtractionError) -> JSONResponse:
    """Render an ExtractionError as FastAPI's usual {"detail": ...} body."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "kind": exc.kind},
    )
