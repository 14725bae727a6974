"""
Category and overall aggregation.

Both levels use the same N/A discipline: anything without data is removed
from the numerator and the denominator, and the remaining weights are
renormalized before averaging. Nothing missing is ever counted as 0 or 100.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Sequence

import numpy as np

from mixscore.types import (
    BandScore,
    Category,
    CategoryScore,
    MetricScore,
    SpectralScore,
    finite_or_none,
)

logger = logging.getLogger(__name__)

NEUTRAL_CATEGORY_SCORE = 0.5
NEUTRAL_SCORE_PCT = 50.0


def weighted_mean(values: Sequence[float | None], weights: Sequence[float]) -> float | None:
    """
    Weighted mean over the non-N/A values only.

    Weights are renormalized over the valid subset, so a single valid
    value is returned unchanged. Returns None when nothing is valid or
    the valid weights sum to zero.
    """
    if len(values) != len(weights):
        raise ValueError("values and weights must have the same length.")
    pairs = [
        (finite_or_none(v), float(w))
        for v, w in zip(values, weights)
        if finite_or_none(v) is not None
    ]
    if not pairs:
        return None
    v = np.asarray([p[0] for p in pairs], dtype=np.float64)
    w = np.asarray([p[1] for p in pairs], dtype=np.float64)
    wsum = float(np.sum(w))
    if wsum <= 0:
        return None
    return float(np.sum(v * (w / wsum)))


def aggregate_category(
    category: Category,
    metric_scores: Sequence[MetricScore],
    weight: float
) -> CategoryScore:
    """Combine the valid metric scores of one category."""
    members = tuple(m for m in metric_scores if m.category is category)
    score = weighted_mean([m.score for m in members], [m.weight for m in members])
    if score is None:
        return CategoryScore(
            category=category,
            score=NEUTRAL_CATEGORY_SCORE,
            weight=weight,
            metrics=members,
            insufficient_data=True,
        )
    return CategoryScore(category=category, score=score, weight=weight, metrics=members)


def tonal_category(spectral: SpectralScore, weight: float) -> CategoryScore:
    """Wrap the band-weighted spectral score as the tonal category."""
    return CategoryScore(
        category=Category.TONAL,
        score=spectral.score / 100.0,
        weight=weight,
        bands=spectral.bands,
        insufficient_data=spectral.insufficient_data,
    )


@dataclass(frozen=True)
class AggregateResult:
    score_pct: float
    categories: tuple[CategoryScore, ...]
    shares: Mapping[str, float] = field(default_factory=dict)
    insufficient_data: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "shares", MappingProxyType(dict(self.shares)))


def _member_shares(
    members: Sequence[MetricScore] | Sequence[BandScore],
    category_share: float
) -> dict[str, float]:
    total = float(np.sum(np.asarray([m.weight for m in members], dtype=np.float64)))
    if total <= 0:
        return {}
    return {m.metric: category_share * m.weight / total for m in members}


def aggregate_scores(
    metric_scores: Sequence[MetricScore],
    spectral: SpectralScore,
    weights: Mapping[Category, float]
) -> AggregateResult:
    """
    Aggregate metric and band scores into one 0-100 score.

    Args:
        metric_scores: Valid per-metric scores
        spectral: Band-weighted spectral score (tonal category)
        weights: Category weights, already normalized to sum to 1

    Returns:
        AggregateResult with the raw score, every category breakdown, and
        each metric's share of the aggregate. With no scorable category the
        score is the neutral fallback and ``insufficient_data`` is set.
    """
    categories: list[CategoryScore] = []
    for category in Category:
        weight = float(weights.get(category, 0.0))
        if category is Category.TONAL:
            categories.append(tonal_category(spectral, weight))
        else:
            categories.append(aggregate_category(category, metric_scores, weight))

    valid = [c for c in categories if not c.insufficient_data and c.weight > 0]
    for c in categories:
        if c.insufficient_data:
            logger.debug("category %s has no valid data, excluded", c.category.value)

    total = float(np.sum(np.asarray([c.weight for c in valid], dtype=np.float64)))
    if total <= 0:
        return AggregateResult(
            score_pct=NEUTRAL_SCORE_PCT,
            categories=tuple(categories),
            insufficient_data=True,
        )

    scores = np.asarray([c.score for c in valid], dtype=np.float64)
    shares_by_cat = np.asarray([c.weight / total for c in valid], dtype=np.float64)
    score_pct = float(np.sum(scores * shares_by_cat)) * 100.0

    shares: dict[str, float] = {}
    for c, share in zip(valid, shares_by_cat):
        shares.update(_member_shares(c.bands if c.category is Category.TONAL else c.metrics, float(share)))

    return AggregateResult(
        score_pct=score_pct,
        categories=tuple(categories),
        shares=shares,
    )
