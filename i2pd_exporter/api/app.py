"""FastAPI application factory.

Lifespan
--------
On startup the app opens a single pooled ``httpx.AsyncClient`` and builds
the :class:`~i2pd_exporter.collector.ScrapeHandler` around it (shared across
all requests via ``request.app.state.scraper``).  On shutdown it closes the
client cleanly.

Routers
-------
    /metrics   Prometheus scrape endpoint

Any other path answers 404.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from i2pd_exporter import __version__
from i2pd_exporter.api.routers import metrics as metrics_router
from i2pd_exporter.collector import ScrapeHandler
from i2pd_exporter.config import Settings, settings as default_settings
from i2pd_exporter.scraper.fetcher import build_client
from i2pd_exporter.scraper.models import ExporterIdentity
from i2pd_exporter.scraper.rules import RULES


def create_app(config: Optional[Settings] = None) -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    config = config or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Open the upstream client on startup and close it on shutdown."""
        client = build_client(config.http_timeout)
        app.state.scraper = ScrapeHandler(
            client,
            upstream_url=config.web_console_url,
            timeout=config.http_timeout,
            identity=ExporterIdentity(version=config.exporter_version),
            rules=RULES,
        )
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(
        title="i2pd web console exporter",
        description=(
            "Scrapes the i2pd router web console on every request and "
            "exposes its status as Prometheus metrics."
        ),
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = config

    app.include_router(metrics_router.router, prefix="/metrics", tags=["metrics"])

    return app
