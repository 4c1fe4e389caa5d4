"""Async HTTP fetcher for the i2pd web console page."""

from __future__ import annotations

import asyncio

import httpx

from i2pd_exporter.scraper.errors import (
    FetchError,
    UpstreamConnectionRefused,
    UpstreamStatusError,
    UpstreamTimeout,
    UpstreamTransportError,
)
from i2pd_exporter.scraper.models import RawPage


def build_client(timeout: float) -> httpx.AsyncClient:
    """Return the pooled client shared by every scrape.

    The pool only reuses connections; page bodies are never cached.
    """
    return httpx.AsyncClient(timeout=timeout, follow_redirects=True)


async def _get(client: httpx.AsyncClient, url: str) -> RawPage:
    response = await client.get(url)
    if not response.is_success:
        raise UpstreamStatusError(response.status_code, url)
    return RawPage(
        url=url,
        content=response.content,
        status_code=response.status_code,
        encoding=response.charset_encoding or "utf-8",
    )


async def fetch_page(client: httpx.AsyncClient, url: str, timeout: float) -> RawPage:
    """Fetch *url* once and return a :class:`RawPage`.

    *timeout* bounds the whole fetch (connect + read), on top of whatever
    per-phase timeouts the client carries.  No retries.

    Raises:
        UpstreamTimeout: The fetch took longer than *timeout* seconds.
        UpstreamConnectionRefused: The console is not listening.
        UpstreamStatusError: The console answered with a non-2xx status.
        UpstreamTransportError: Any other ``httpx`` transport failure.
    """
    try:
        return await asyncio.wait_for(_get(client, url), timeout=timeout)
    except FetchError:
        raise
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        raise UpstreamTimeout(f"fetching {url} timed out after {timeout}s") from exc
    except httpx.ConnectError as exc:
        raise UpstreamConnectionRefused(f"cannot connect to {url}: {exc}") from exc
    except httpx.HTTPError as exc:
        raise UpstreamTransportError(f"HTTP request to {url} failed: {exc}") from exc
