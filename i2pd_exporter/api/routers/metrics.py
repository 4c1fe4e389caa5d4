"""Prometheus scrape endpoint.

Routes
------
GET /metrics    → fresh console fetch, rendered as exposition text

200 whenever a snapshot was produced (even a partial one); 503 when the
console could not be fetched or returned an empty page.
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Request
from fastapi.responses import Response

from i2pd_exporter.collector import ERROR_BODY, FAILURE_STATUS, ScrapeHandler, ScrapeResult
from i2pd_exporter.exposition import CONTENT_TYPE

logger = logging.getLogger(__name__)

router = APIRouter()

# How often an in-flight scrape checks whether the scraper hung up.
DISCONNECT_POLL_SECONDS = 0.5


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _scrape_unless_disconnected(request: Request, scraper: ScrapeHandler) -> ScrapeResult | None:
    """Run one scrape, cancelling it if the client disconnects first.

    Returns ``None`` when the scrape was abandoned.
    """
    task = asyncio.ensure_future(scraper.handle())
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_SECONDS)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.info("Scrape client disconnected, abandoning upstream fetch")
                task.cancel()
                return None
    finally:
        if not task.done():
            task.cancel()


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

@router.get("")
async def metrics(request: Request) -> Response:
    """Scrape the i2pd web console and return Prometheus metrics."""
    scraper: ScrapeHandler = request.app.state.scraper
    result = await _scrape_unless_disconnected(request, scraper)
    if result is None:
        return Response(ERROR_BODY, status_code=FAILURE_STATUS, media_type=CONTENT_TYPE)
    return Response(result.body, status_code=result.status_code, media_type=CONTENT_TYPE)
