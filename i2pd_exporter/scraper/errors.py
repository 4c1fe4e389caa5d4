"""Exceptions raised by the fetch / extract pipeline.

Only :class:`FetchError` and :class:`EmptyPageError` ever reach a request
boundary.  :class:`MalformedValue` is absorbed by the extractor and reported
as a :class:`~i2pd_exporter.scraper.models.RuleFailure`.
"""

from __future__ import annotations


class FetchError(Exception):
    """The upstream web console could not be fetched."""


class UpstreamTimeout(FetchError):
    """The fetch did not complete within the configured timeout."""


class UpstreamConnectionRefused(FetchError):
    """No connection could be established to the upstream console."""


class UpstreamStatusError(FetchError):
    """The upstream answered with a non-2xx status code."""

    def __init__(self, status_code: int, url: str) -> None:
        super().__init__(f"HTTP {status_code} from {url}")
        self.status_code = status_code
        self.url = url


class UpstreamTransportError(FetchError):
    """Any other transport-level failure (reset, protocol error, …)."""


class EmptyPageError(Exception):
    """The fetched page is empty or not decodable as UTF-8 text."""


class MalformedValue(ValueError):
    """A matched field's text could not be normalised to a number."""
