"""
Scoring pipeline.

score_track runs the stages in a fixed order:

1. per-metric tolerance scores over the deduplicated canonical metrics
2. band-weighted spectral score (tonal category)
3. category and overall aggregation with N/A exclusion
4. optional UX offset, then quality gate caps
5. rounding and classification
6. suggestions from the same per-metric severities
"""
from __future__ import annotations
import logging
from typing import Any, Mapping

from mixscore.errors import ConfigurationError, DataInsufficiencyError
from mixscore.profiles.defaults import default_category_weights
from mixscore.profiles.validator import normalize_category_weights
from mixscore.scoring.aggregate import aggregate_scores
from mixscore.scoring.metric_scores import score_metrics
from mixscore.scoring.spectral import score_spectral_balance
from mixscore.suggestions.confidence import AnalysisQuality, analysis_confidence
from mixscore.suggestions.engine import build_suggestions
from mixscore.thresholds.gates import apply_quality_gates
from mixscore.types import (
    Classification,
    MeasurementRecord,
    ReferenceProfile,
    ScoreResult,
    ScoringOptions,
    finite_or_none,
)
from mixscore.utils.quantize import q

logger = logging.getLogger(__name__)

# Lower bound of each class, highest first.
CLASSIFICATION_THRESHOLDS = (
    (85.0, Classification.REFERENCE_TIER),
    (75.0, Classification.ADVANCED),
    (60.0, Classification.INTERMEDIATE),
    (40.0, Classification.BASIC),
)


def classify_score(score_pct: float) -> Classification:
    for lower, label in CLASSIFICATION_THRESHOLDS:
        if score_pct >= lower:
            return label
    return Classification.PROBLEMATIC


def _clamp_pct(x: float) -> float:
    return max(0.0, min(100.0, x))


def _record(measurements: MeasurementRecord | Mapping[str, Any]) -> MeasurementRecord:
    if isinstance(measurements, MeasurementRecord):
        return measurements
    if isinstance(measurements, Mapping):
        return MeasurementRecord.from_dict(measurements)
    raise ConfigurationError(
        f"measurements must be a MeasurementRecord or a mapping, got {type(measurements).__name__}."
    )


def _confidence(confidence: float | None, quality: AnalysisQuality | None) -> float:
    if confidence is None:
        return analysis_confidence(quality)
    c = finite_or_none(confidence)
    if c is None or not 0.0 <= c <= 1.0:
        raise ConfigurationError(f"confidence must be within 0-1, got {confidence!r}.")
    return c


def score_track(
    measurements: MeasurementRecord | Mapping[str, Any],
    profile: ReferenceProfile,
    options: ScoringOptions | None = None,
    *,
    confidence: float | None = None,
    quality: AnalysisQuality | None = None
) -> ScoreResult:
    """
    Score one track against a genre reference.

    Args:
        measurements: MeasurementRecord or analyzer output dict
        profile: Genre reference targets and weights
        options: Per-call switches; defaults when None
        confidence: Precomputed analysis confidence in [0, 1]
        quality: Signal-quality indicators used when confidence is None

    Returns:
        ScoreResult. Identical inputs always give an equal result.

    Raises:
        ConfigurationError: invalid weights, options, or confidence
        DataInsufficiencyError: nothing was scorable and strict_data is set
    """
    opts = options or ScoringOptions()
    record = _record(measurements)
    conf = _confidence(confidence, quality)

    weights = profile.category_weights or default_category_weights(profile.genre)
    weights = normalize_category_weights(weights)

    metric_scores = score_metrics(record, profile, opts.scoring_method)
    spectral = score_spectral_balance(record.band_rms_db, profile.bands)
    agg = aggregate_scores(metric_scores, spectral, weights)

    if agg.insufficient_data:
        if opts.strict_data:
            raise DataInsufficiencyError(
                f"no category could be scored for genre {profile.genre!r}."
            )
        logger.debug("no scorable category for %s, using neutral score", profile.genre)

    raw = agg.score_pct
    score = _clamp_pct(raw + float(opts.ux_offset_pct))

    issues = ()
    if opts.apply_quality_gates:
        outcome = apply_quality_gates(score, record, opts.quality_gates)
        score = outcome.score_pct
        issues = outcome.issues

    score_pct = int(q(_clamp_pct(score), 1.0))

    suggestions = build_suggestions(
        metric_scores,
        spectral.bands,
        genre=profile.genre,
        confidence=conf,
        shares=agg.shares,
        config={
            "max_suggestions": opts.max_suggestions,
            "min_priority": float(opts.min_priority),
            "group_by_theme": bool(opts.group_by_theme),
        },
    )

    return ScoreResult(
        score_pct=score_pct,
        raw_score_pct=raw,
        classification=classify_score(score_pct),
        genre=profile.genre,
        scoring_method=opts.scoring_method,
        categories=agg.categories,
        metric_scores=tuple(metric_scores),
        spectral=spectral,
        quality_issues=tuple(issues),
        suggestions=suggestions.items,
        suggestion_groups=suggestions.groups,
        dropped_suggestions=suggestions.dropped,
        confidence=conf,
        insufficient_data=agg.insufficient_data,
    )
