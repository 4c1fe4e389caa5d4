"""i2pd exporter CLI: entry-point for all operations.

Usage:
    python cli/main.py --help

Commands:
    serve     → run the /metrics HTTP endpoint
    scrape    → fetch the console once and print the metrics
    parse     → run the rule table against a saved console page
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that
# `from i2pd_exporter.xxx import ...` works when the CLI is invoked as
# `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import dataclasses
import logging
import math
from typing import Optional

import typer

from i2pd_exporter import __version__
from i2pd_exporter.config import Settings, settings, split_listen_addr

logger = logging.getLogger("i2pd_exporter")

app = typer.Typer(
    name="i2pd-exporter",
    help="Prometheus exporter for i2pd (via web console scraping).",
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def _resolve(
    upstream: Optional[str] = None,
    timeout: Optional[float] = None,
    listen: Optional[str] = None,
) -> Settings:
    """Apply command-line overrides on top of the environment settings."""
    overrides = {}
    if upstream is not None:
        overrides["web_console_url"] = upstream
    if timeout is not None:
        if not math.isfinite(timeout) or timeout <= 0:
            raise typer.BadParameter(
                "timeout must be a positive number of seconds", param_hint="--timeout"
            )
        overrides["http_timeout"] = timeout
    if listen is not None:
        overrides["listen_addr"] = listen
    return dataclasses.replace(settings, **overrides)


async def _scrape_once(config: Settings):
    from i2pd_exporter.collector import ScrapeHandler
    from i2pd_exporter.scraper.fetcher import build_client
    from i2pd_exporter.scraper.models import ExporterIdentity

    async with build_client(config.http_timeout) as client:
        handler = ScrapeHandler(
            client,
            upstream_url=config.web_console_url,
            timeout=config.http_timeout,
            identity=ExporterIdentity(version=config.exporter_version),
        )
        return await handler.handle()


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"i2pd-exporter {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Print the exporter version and exit.",
    ),
) -> None:
    """Prometheus exporter for i2pd (via web console scraping)."""


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    listen: Optional[str] = typer.Option(
        None, help="Listen address host:port (default: $METRICS_LISTEN_ADDR or 0.0.0.0:9700)."
    ),
    upstream: Optional[str] = typer.Option(
        None, help="i2pd web console URL (default: $I2PD_WEB_CONSOLE)."
    ),
    timeout: Optional[float] = typer.Option(
        None, help="Upstream fetch timeout in seconds (default: $HTTP_TIMEOUT_SECONDS or 60)."
    ),
) -> None:
    """Serve /metrics until interrupted."""
    import uvicorn

    from i2pd_exporter.api.app import create_app

    config = _resolve(upstream=upstream, timeout=timeout, listen=listen)
    try:
        host, port = split_listen_addr(config.listen_addr)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--listen") from exc

    _configure_logging(config.log_level)
    logger.info(
        "Starting i2pd webconsole exporter on %s (target: %s)",
        config.listen_addr,
        config.web_console_url,
    )
    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        log_level=config.log_level.lower(),
        access_log=False,
    )
    logger.info("Shutdown complete")


# ---------------------------------------------------------------------------
# scrape
# ---------------------------------------------------------------------------
@app.command("scrape")
def scrape(
    upstream: Optional[str] = typer.Option(None, help="i2pd web console URL."),
    timeout: Optional[float] = typer.Option(None, help="Fetch timeout in seconds."),
) -> None:
    """Fetch the web console once and print the metrics to stdout."""
    config = _resolve(upstream=upstream, timeout=timeout)
    _configure_logging(config.log_level)

    result = asyncio.run(_scrape_once(config))
    if not result.ok:
        typer.echo(f"[scrape] {result.error}", err=True)
        raise typer.Exit(1)
    typer.echo(result.body, nl=False)


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------
@app.command("parse")
def parse(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Saved console HTML page."),
) -> None:
    """Run the rule table against a saved page and print the metrics.

    Rules that matched but could not be parsed are listed on stderr.
    """
    from i2pd_exporter.exposition import format_exposition
    from i2pd_exporter.scraper.errors import EmptyPageError
    from i2pd_exporter.scraper.extractor import extract
    from i2pd_exporter.scraper.models import ExporterIdentity

    try:
        snapshot = extract(path.read_bytes())
    except EmptyPageError as exc:
        typer.echo(f"[parse] {exc}", err=True)
        raise typer.Exit(1)

    for failure in snapshot.failures:
        typer.echo(f"[parse] rule {failure.rule!r} skipped: {failure.reason}", err=True)
    typer.echo(format_exposition(snapshot, ExporterIdentity(version=__version__)), nl=False)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
