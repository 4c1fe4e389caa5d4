"""Data models for the scrape pipeline.

Everything here is a plain value object.  Rules are frozen and built once at
import time; samples and snapshots are created per request and thrown away.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, Union


class MetricKind(str, enum.Enum):
    COUNTER = "counter"
    GAUGE = "gauge"


class ValueKind(enum.Enum):
    """Which normaliser turns a rule's captured text into a sample value."""

    BYTE_SIZE = "byte_size"
    BYTE_RATE = "byte_rate"
    PERCENTAGE = "percentage"
    COUNT = "count"
    STATUS = "status"
    ENABLED = "enabled"
    CONSTANT = "constant"


def _strip(text: str) -> str:
    return text.strip()


@dataclass(frozen=True)
class LabelSpec:
    """Maps one named regex group to one label."""

    name: str
    group: str
    transform: Callable[[str], str] = _strip


@dataclass(frozen=True)
class ExtractionRule:
    """One entry of the rule table.

    ``pattern`` is searched in the page (or in the region matched by
    ``scope`` when set).  ``value_group`` names the capture fed to the
    normaliser selected by ``value``; it may be ``None`` for
    :attr:`ValueKind.CONSTANT` rules.  With ``multi`` every match yields a
    sample, otherwise only the first.
    """

    name: str
    metric: str
    kind: MetricKind
    help: str
    pattern: re.Pattern
    value: ValueKind
    value_group: Optional[str] = "value"
    labels: Tuple[LabelSpec, ...] = ()
    const_labels: Tuple[Tuple[str, str], ...] = ()
    multi: bool = False
    scope: Optional[re.Pattern] = None


Number = Union[int, float]


@dataclass(frozen=True)
class MetricSample:
    metric: str
    kind: MetricKind
    help: str
    labels: Tuple[Tuple[str, str], ...]
    value: Number


@dataclass(frozen=True)
class RuleFailure:
    rule: str
    reason: str


@dataclass
class MetricSnapshot:
    """Samples produced by one extractor run, in rule-table order."""

    samples: List[MetricSample] = field(default_factory=list)
    failures: List[RuleFailure] = field(default_factory=list)

    def get(self, metric: str) -> List[MetricSample]:
        """Return every sample named *metric*."""
        return [s for s in self.samples if s.metric == metric]


@dataclass
class RawPage:
    """The raw HTTP response for one console fetch."""

    url: str
    content: bytes
    status_code: int
    # Charset from the Content-Type header; UTF-8 when none is declared.
    encoding: str = "utf-8"


@dataclass(frozen=True)
class ExporterIdentity:
    """Name and version reported by the ``*_version_info`` gauge."""

    version: str
    name: str = "i2pd_webconsole_exporter"

    @property
    def metric(self) -> str:
        return f"{self.name}_version_info"
