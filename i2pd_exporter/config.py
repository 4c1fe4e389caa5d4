"""Centralised settings for the i2pd web console exporter.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

from i2pd_exporter import __version__

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

DEFAULT_TIMEOUT = 60.0


def _timeout_from_env() -> float:
    raw = os.environ.get("HTTP_TIMEOUT_SECONDS", str(int(DEFAULT_TIMEOUT)))
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT
    return value if math.isfinite(value) and value > 0 else DEFAULT_TIMEOUT


def split_listen_addr(addr: str) -> Tuple[str, int]:
    """Split ``"0.0.0.0:9700"`` or ``"[::]:9700"`` into host and port.

    Raises:
        ValueError: If *addr* has no port or the port is not 1-65535.
    """
    host, sep, port = addr.rpartition(":")
    if not sep or not host or not port.isdigit():
        raise ValueError(f"Invalid listen address: {addr!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    port_num = int(port)
    if not 0 < port_num < 65536:
        raise ValueError(f"Invalid listen port in {addr!r}")
    return host, port_num


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Upstream web console
    # ------------------------------------------------------------------
    web_console_url: str = field(
        default_factory=lambda: os.environ.get("I2PD_WEB_CONSOLE", "http://127.0.0.1:7070")
    )
    http_timeout: float = field(default_factory=_timeout_from_env)

    # ------------------------------------------------------------------
    # Metrics endpoint
    # ------------------------------------------------------------------
    listen_addr: str = field(
        default_factory=lambda: os.environ.get("METRICS_LISTEN_ADDR", "0.0.0.0:9700")
    )
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )

    exporter_version: str = __version__

    @property
    def listen_host(self) -> str:
        return split_listen_addr(self.listen_addr)[0]

    @property
    def listen_port(self) -> int:
        return split_listen_addr(self.listen_addr)[1]


# Module-level singleton, import this everywhere:
#   from i2pd_exporter.config import settings
settings = Settings()
