"""Value normalisers: raw console text → exact numbers.

All functions are pure.  The numeric ones raise :class:`MalformedValue` on
input they cannot convert; the status mappers are total and never raise.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import Callable, Dict

from i2pd_exporter.scraper.errors import MalformedValue
from i2pd_exporter.scraper.models import Number, ValueKind

# Binary multiples only; i2pd never prints SI units.
_UNIT_POWERS: Dict[str, int] = {
    "B": 0,
    "KiB": 1,
    "MiB": 2,
    "GiB": 3,
    "TiB": 4,
}

_QUANTITY_RE = re.compile(r"^(?P<number>\S+?)\s*(?P<unit>[A-Za-z]+)(?P<per>/s)?$")
_DECIMAL_RE = re.compile(r"^\d+(?:\.\d+)?$")


def _parse_decimal(text: str) -> Decimal:
    if not _DECIMAL_RE.match(text):
        raise MalformedValue(f"not a number: {text!r}")
    try:
        return Decimal(text)
    except InvalidOperation as exc:
        raise MalformedValue(f"not a number: {text!r}") from exc


def _parse_quantity(text: str, *, rate: bool) -> Decimal:
    """Return ``number × 1024^power`` for ``"<number> <unit>[/s]"``."""
    match = _QUANTITY_RE.match(text.strip())
    if match is None or bool(match.group("per")) != rate:
        raise MalformedValue(f"unrecognised {'rate' if rate else 'size'}: {text!r}")
    unit = match.group("unit")
    if unit not in _UNIT_POWERS:
        raise MalformedValue(f"unknown unit {unit!r} in {text!r}")
    return _parse_decimal(match.group("number")) * (1024 ** _UNIT_POWERS[unit])


def parse_byte_size(text: str) -> int:
    """Parse ``"10.5 MiB"`` into an exact byte count (``11010048``).

    Fractional results are rounded to the nearest integer.
    """
    exact = _parse_quantity(text, rate=False)
    try:
        return int(exact.quantize(Decimal(1), rounding=ROUND_HALF_EVEN))
    except InvalidOperation as exc:
        raise MalformedValue(f"byte count out of range: {text!r}") from exc


def parse_byte_rate(text: str) -> float:
    """Parse ``"100.5 KiB/s"`` into bytes per second."""
    return float(_parse_quantity(text, rate=True))


def parse_percentage(text: str) -> float:
    """Parse ``"37%"`` or ``"37.5 %"`` into ``37.0`` / ``37.5``."""
    stripped = text.strip()
    if stripped.endswith("%"):
        stripped = stripped[:-1].rstrip()
    return float(_parse_decimal(stripped))


def parse_count(text: str) -> int:
    stripped = text.strip()
    if not stripped.isdecimal():
        raise MalformedValue(f"not a count: {text!r}")
    return int(stripped)


def status_value(text: str) -> int:
    """``OK`` → 1, any other network status → 0."""
    return 1 if text.strip() == "OK" else 0


def enabled_value(text: str) -> int:
    """``enabled`` → 1; ``disabled`` and anything unrecognised → 0."""
    return 1 if text.strip().lower() == "enabled" else 0


def constant_value(text: str) -> int:
    return 1


NORMALIZERS: Dict[ValueKind, Callable[[str], Number]] = {
    ValueKind.BYTE_SIZE: parse_byte_size,
    ValueKind.BYTE_RATE: parse_byte_rate,
    ValueKind.PERCENTAGE: parse_percentage,
    ValueKind.COUNT: parse_count,
    ValueKind.STATUS: status_value,
    ValueKind.ENABLED: enabled_value,
    ValueKind.CONSTANT: constant_value,
}


def normalize(kind: ValueKind, text: str) -> Number:
    """Dispatch *text* to the normaliser registered for *kind*."""
    return NORMALIZERS[kind](text)
