"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from i2pd_exporter.api import create_app
"""

from i2pd_exporter.api.app import create_app

__all__ = ["create_app"]
