"""Scraper package: console fetch, rule table and extraction."""

from i2pd_exporter.scraper.extractor import extract
from i2pd_exporter.scraper.fetcher import build_client, fetch_page
from i2pd_exporter.scraper.models import MetricSample, MetricSnapshot, RawPage
from i2pd_exporter.scraper.rules import RULES

__all__ = [
    "extract",
    "build_client",
    "fetch_page",
    "MetricSample",
    "MetricSnapshot",
    "RawPage",
    "RULES",
]
