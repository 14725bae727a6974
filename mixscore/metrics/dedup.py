"""Selection of one canonical signal per redundant metric family."""
from __future__ import annotations
import logging
from dataclasses import dataclass

from mixscore.metrics.catalog import METRIC_CATALOG, METRICS_BY_ID, MetricSpec
from mixscore.types import MeasurementRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CanonicalSignal:
    spec: MetricSpec
    source: str
    value: float | None
    shadowed: tuple[str, ...] = ()

    @property
    def metric(self) -> str:
        return self.spec.metric


def _source_value(record: MeasurementRecord, source: str) -> float | None:
    # DC offset is a magnitude; per-channel offsets take the worse channel.
    if source == "dc_offset_lr":
        left, right = record.dc_offset_left, record.dc_offset_right
        if left is None or right is None:
            return None
        return max(abs(left), abs(right))
    if source == "dc_offset":
        return abs(record.dc_offset) if record.dc_offset is not None else None
    return getattr(record, source)


def select_signal(record: MeasurementRecord, spec: MetricSpec) -> CanonicalSignal:
    """Pick the highest-precedence available source for one metric family."""
    chosen: str | None = None
    value: float | None = None
    shadowed: list[str] = []
    for source in spec.sources:
        v = _source_value(record, source)
        if v is None:
            continue
        if chosen is None:
            chosen, value = source, v
        else:
            shadowed.append(source)
    if chosen is None:
        return CanonicalSignal(spec=spec, source=spec.sources[0], value=None)
    if shadowed:
        logger.debug("%s: using %s, ignoring redundant %s", spec.metric, chosen, shadowed)
    return CanonicalSignal(spec=spec, source=chosen, value=value, shadowed=tuple(shadowed))


def select_canonical(record: MeasurementRecord) -> list[CanonicalSignal]:
    """Return exactly one signal per catalog metric, in catalog order."""
    return [select_signal(record, spec) for spec in METRIC_CATALOG]


def canonical_value(record: MeasurementRecord, metric: str) -> float | None:
    """Canonical value of a single catalog metric, or None when N/A."""
    return select_signal(record, METRICS_BY_ID[metric]).value
