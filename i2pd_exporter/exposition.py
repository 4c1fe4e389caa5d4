"""Render a :class:`MetricSnapshot` as Prometheus exposition text.

Output is deterministic: metrics appear in the order their first sample was
produced, samples keep snapshot order, and labels keep rule order.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from i2pd_exporter.scraper.models import (
    ExporterIdentity,
    MetricKind,
    MetricSample,
    MetricSnapshot,
    Number,
)

CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


def escape_label_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def format_value(value: Number) -> str:
    """``3`` → ``"3"``, ``37.0`` → ``"37"``, ``12.5`` → ``"12.5"``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)


def format_labels(labels: Iterable[Tuple[str, str]]) -> str:
    rendered = ",".join(f'{name}="{escape_label_value(value)}"' for name, value in labels)
    return f"{{{rendered}}}" if rendered else ""


def format_sample(sample: MetricSample) -> str:
    return f"{sample.metric}{format_labels(sample.labels)} {format_value(sample.value)}"


def identity_sample(identity: ExporterIdentity) -> MetricSample:
    return MetricSample(
        metric=identity.metric,
        kind=MetricKind.GAUGE,
        help="I2P webconsole exporter version info",
        labels=(("version", identity.version),),
        value=1,
    )


def format_exposition(snapshot: MetricSnapshot, identity: ExporterIdentity) -> str:
    """Return the exposition text for *snapshot* plus the version gauge."""
    groups: Dict[str, List[MetricSample]] = {}
    for sample in [*snapshot.samples, identity_sample(identity)]:
        groups.setdefault(sample.metric, []).append(sample)

    lines: List[str] = []
    for metric, samples in groups.items():
        first = samples[0]
        lines.append(f"# HELP {metric} {first.help}")
        lines.append(f"# TYPE {metric} {first.kind.value}")
        lines.extend(format_sample(s) for s in samples)
    return "\n".join(lines) + "\n"
