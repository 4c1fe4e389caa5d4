"""Per-request scrape orchestration: fetch → extract → format.

A :class:`ScrapeHandler` is built once with the shared HTTP client and the
read-only configuration, then :meth:`ScrapeHandler.handle` is awaited for
every inbound scrape.  Each call walks the same small state machine::

    IDLE → FETCHING → FETCH_FAILED ─────────────────────────┐
                    └→ FETCHED → EXTRACTING → FORMATTING → RESPONDED

There is exactly one fetch attempt per call and no state survives between
calls, so any number of scrapes may run concurrently.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import httpx

from i2pd_exporter.exposition import format_exposition
from i2pd_exporter.scraper.errors import EmptyPageError, FetchError
from i2pd_exporter.scraper.extractor import extract
from i2pd_exporter.scraper.fetcher import fetch_page
from i2pd_exporter.scraper.models import ExporterIdentity, ExtractionRule, MetricSnapshot
from i2pd_exporter.scraper.rules import RULES

logger = logging.getLogger(__name__)

ERROR_BODY = "Error retrieving metrics\n"
FAILURE_STATUS = 503


class ScrapeState(str, enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    FETCH_FAILED = "fetch_failed"
    FETCHED = "fetched"
    EXTRACTING = "extracting"
    FORMATTING = "formatting"
    RESPONDED = "responded"


@dataclass
class ScrapeResult:
    """What one scrape produced; the HTTP layer maps it onto a response."""

    status_code: int
    body: str
    path: tuple
    snapshot: Optional[MetricSnapshot] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ScrapeHandler:
    """Runs the fetch → extract → format pipeline for each scrape."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        upstream_url: str,
        timeout: float,
        identity: ExporterIdentity,
        rules: Sequence[ExtractionRule] = RULES,
    ) -> None:
        self.client = client
        self.upstream_url = upstream_url
        self.timeout = timeout
        self.identity = identity
        self.rules = tuple(rules)

    async def handle(self) -> ScrapeResult:
        path = [ScrapeState.IDLE]

        def enter(state: ScrapeState) -> None:
            logger.debug("scrape %s -> %s", path[-1].value, state.value)
            path.append(state)

        enter(ScrapeState.FETCHING)
        logger.debug("Fetching web console from: %s", self.upstream_url)
        try:
            raw = await fetch_page(self.client, self.upstream_url, self.timeout)
            enter(ScrapeState.FETCHED)
            enter(ScrapeState.EXTRACTING)
            snapshot = extract(raw.content, self.rules, encoding=raw.encoding)
        except (FetchError, EmptyPageError) as exc:
            logger.error("Failed to fetch metrics: %s", exc)
            enter(ScrapeState.FETCH_FAILED)
            enter(ScrapeState.RESPONDED)
            return ScrapeResult(FAILURE_STATUS, ERROR_BODY, tuple(path), error=exc)

        for failure in snapshot.failures:
            logger.warning("Rule %s skipped: %s", failure.rule, failure.reason)

        enter(ScrapeState.FORMATTING)
        body = format_exposition(snapshot, self.identity)
        enter(ScrapeState.RESPONDED)
        return ScrapeResult(200, body, tuple(path), snapshot=snapshot)
