"""Prometheus exporter for i2pd, scraping the router's web console."""

__version__ = "1.1.0"
