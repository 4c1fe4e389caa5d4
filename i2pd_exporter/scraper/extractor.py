"""Rule-table driven extraction: page text → :class:`MetricSnapshot`."""

from __future__ import annotations

import math
from typing import Iterable, Iterator, List, Union

from i2pd_exporter.scraper.errors import EmptyPageError, MalformedValue
from i2pd_exporter.scraper.models import (
    ExtractionRule,
    MetricSample,
    MetricSnapshot,
    RuleFailure,
)
from i2pd_exporter.scraper.normalize import normalize
from i2pd_exporter.scraper.rules import RULES


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _decode(page: Union[str, bytes], encoding: str = "utf-8") -> str:
    if isinstance(page, bytes):
        try:
            page = page.decode(encoding)
        except (UnicodeDecodeError, LookupError) as exc:
            raise EmptyPageError(f"page is not valid {encoding}: {exc}") from exc
    if not page.strip():
        raise EmptyPageError("page is empty")
    return page


def _region(rule: ExtractionRule, text: str) -> str | None:
    """Return the part of *text* the rule searches, or ``None`` if its scope is absent."""
    if rule.scope is None:
        return text
    match = rule.scope.search(text)
    return match.group(0) if match else None


def _matches(rule: ExtractionRule, text: str) -> Iterator:
    region = _region(rule, text)
    if region is None:
        return
    if rule.multi:
        yield from rule.pattern.finditer(region)
    else:
        match = rule.pattern.search(region)
        if match is not None:
            yield match


def apply_rule(rule: ExtractionRule, text: str) -> List[MetricSample]:
    """Apply a single rule to *text*.

    Returns an empty list when nothing matches.  Raises
    :class:`MalformedValue` if any match cannot be normalised, so a rule
    either contributes all of its samples or none.
    """
    samples: List[MetricSample] = []
    for match in _matches(rule, text):
        raw = match.group(rule.value_group) if rule.value_group else ""
        value = normalize(rule.value, raw)
        if isinstance(value, float) and not math.isfinite(value):
            raise MalformedValue(f"non-finite value from {raw!r}")
        labels = tuple(rule.const_labels) + tuple(
            (label.name, label.transform(match.group(label.group)))
            for label in rule.labels
        )
        samples.append(
            MetricSample(
                metric=rule.metric,
                kind=rule.kind,
                help=rule.help,
                labels=labels,
                value=value,
            )
        )
    return samples


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract(
    page: Union[str, bytes],
    rules: Iterable[ExtractionRule] = RULES,
    encoding: str = "utf-8",
) -> MetricSnapshot:
    """Run every rule in *rules* against *page*.

    Rules are independent: a rule whose value cannot be normalised is
    recorded in :attr:`MetricSnapshot.failures` and skipped, and the rest
    of the table still runs.  Byte pages are decoded strictly with
    *encoding*.

    Raises:
        EmptyPageError: If *page* is empty, whitespace, or undecodable bytes.
    """
    text = _decode(page, encoding)
    snapshot = MetricSnapshot()
    for rule in rules:
        try:
            snapshot.samples.extend(apply_rule(rule, text))
        except MalformedValue as exc:
            snapshot.failures.append(RuleFailure(rule=rule.name, reason=str(exc)))
    return snapshot
