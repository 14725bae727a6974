from __future__ import annotations
import logging

from mixscore.metrics.catalog import SOURCE_UNITS
from mixscore.metrics.dedup import CanonicalSignal, select_canonical
from mixscore.scoring.severity import classify_ratio, deviation_ratio, signed_deviation, z_score
from mixscore.scoring.tolerance import score_tolerance
from mixscore.types import (
    MeasurementRecord,
    MetricScore,
    MetricTarget,
    ReferenceProfile,
    ScoringMethod,
)

logger = logging.getLogger(__name__)


def score_signal(
    signal: CanonicalSignal,
    ref: MetricTarget,
    method: ScoringMethod = ScoringMethod.GAUSSIAN
) -> MetricScore | None:
    """Score one canonical signal; None when its value is N/A."""
    if signal.value is None:
        return None
    ceiling = signal.spec.ceiling if ref.ceiling is None else ref.ceiling
    score = score_tolerance(
        signal.value,
        ref.target,
        ref.tol_inner,
        ref.tol_outer,
        ref.gate_class,
        method=method,
        ceiling=ceiling,
    )
    if score is None:
        return None
    deviation = signed_deviation(signal.value, ref.target, ceiling=ceiling)
    ratio = deviation_ratio(deviation, ref.tol_inner)
    return MetricScore(
        metric=signal.metric,
        category=signal.spec.category,
        source=signal.source,
        value=signal.value,
        target=ref.target,
        tolerance=ref.tol_inner,
        deviation=deviation,
        ratio=ratio,
        z_score=z_score(deviation, ref.tol_inner),
        severity=classify_ratio(ratio),
        score=score,
        weight=signal.spec.intra_weight,
        unit=SOURCE_UNITS.get(signal.source, ""),
    )


def score_metrics(
    record: MeasurementRecord,
    profile: ReferenceProfile,
    method: ScoringMethod = ScoringMethod.GAUSSIAN
) -> list[MetricScore]:
    """
    Score every canonical metric that has both a measurement and a reference.

    Metrics that are N/A or have no target in the profile are left out;
    they are never counted as passing or failing.
    """
    out: list[MetricScore] = []
    for signal in select_canonical(record):
        ref = profile.metrics.get(signal.metric)
        if ref is None:
            logger.debug("%s: no reference target in profile %s", signal.metric, profile.genre)
            continue
        ms = score_signal(signal, ref, method)
        if ms is None:
            logger.debug("%s: measurement N/A, excluded", signal.metric)
            continue
        out.append(ms)
    return out
