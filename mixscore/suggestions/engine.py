"""
Ranked, directional remediation suggestions.

Suggestions are derived from the same MetricScore/BandScore objects the
score is built from, so a metric shown green never gets a suggestion and a
non-green one always yields exactly one candidate.
"""
from __future__ import annotations
import logging
from typing import Mapping, Sequence

from mixscore.errors import ConfigurationError
from mixscore.scoring.severity import needs_suggestion, severity_weight
from mixscore.suggestions.dependencies import (
    DEPENDENCY_CLUSTERS,
    DependencyBoost,
    resolve_dependencies,
)
from mixscore.suggestions.templates import THEMES, render_action, render_message, theme_for
from mixscore.types import (
    BandScore,
    Category,
    MetricScore,
    Suggestion,
    SuggestionSet,
    finite_or_none,
)

logger = logging.getLogger(__name__)


DEFAULT_SUGGESTION_CONFIG = {
    "max_suggestions": 12,
    "min_priority": 0.1,
    "group_by_theme": True,
}


def _merge_config(base: dict, overrides: dict | None) -> dict:
    if not overrides:
        return dict(base)
    merged = dict(base)
    for key, value in overrides.items():
        if key not in base:
            raise ConfigurationError(f"unknown suggestion setting: {key!r}.")
        merged[key] = value
    return merged


def build_suggestion_config(overrides: dict | None = None) -> dict:
    """Return suggestion engine settings with defaults applied."""
    cfg = _merge_config(DEFAULT_SUGGESTION_CONFIG, overrides)
    errors: list[str] = []
    max_n = cfg["max_suggestions"]
    if isinstance(max_n, bool) or not isinstance(max_n, int) or max_n < 0:
        errors.append("max_suggestions must be a non-negative integer.")
    min_p = finite_or_none(cfg["min_priority"])
    if min_p is None or min_p < 0:
        errors.append("min_priority must be a non-negative number.")
    if not isinstance(cfg["group_by_theme"], bool):
        errors.append("group_by_theme must be a boolean.")
    if errors:
        raise ConfigurationError("; ".join(errors))
    return cfg


def _unit(score: MetricScore | BandScore) -> str:
    if isinstance(score, BandScore):
        return "dB"
    return score.unit


def _category(score: MetricScore | BandScore) -> Category:
    if isinstance(score, BandScore):
        return Category.TONAL
    return score.category


def _estimated_gain(score: MetricScore | BandScore, shares: Mapping[str, float]) -> float:
    """Points the final score would gain if this metric were fixed completely."""
    unit_score = score.score / 100.0 if isinstance(score, BandScore) else score.score
    return shares.get(score.metric, 0.0) * (1.0 - unit_score) * 100.0


def _candidate(
    score: MetricScore | BandScore,
    *,
    genre: str,
    confidence: float,
    shares: Mapping[str, float],
    boost: DependencyBoost | None = None
) -> Suggestion:
    direction = score.direction
    bonus = boost.bonus if boost is not None else 0.0
    amount = abs(score.deviation)
    unit = _unit(score)
    return Suggestion(
        metric=score.metric,
        category=_category(score),
        theme=theme_for(score.metric),
        severity=score.severity,
        value=score.value,
        target=score.target,
        deviation=score.deviation,
        z_score=score.z_score,
        priority=severity_weight(score.severity) * confidence * (1.0 + bonus),
        message=render_message(score.metric, direction, genre),
        action=render_action(score.metric, direction, amount, target=score.target, unit=unit),
        direction=direction,
        amount=amount,
        unit=unit,
        estimated_gain_pct=_estimated_gain(score, shares),
        dependency_boost=boost is not None,
        clusters=boost.clusters if boost is not None else (),
        notes=boost.notes if boost is not None else (),
    )


def _rank_key(s: Suggestion) -> tuple:
    return (-s.priority, -s.estimated_gain_pct, s.metric)


def build_suggestions(
    metric_scores: Sequence[MetricScore],
    band_scores: Sequence[BandScore] = (),
    *,
    genre: str = "default",
    confidence: float = 1.0,
    shares: Mapping[str, float] | None = None,
    config: dict | None = None
) -> SuggestionSet:
    """
    Turn non-green metric and band scores into ranked suggestions.

    Args:
        metric_scores: Scored canonical metrics
        band_scores: Scored spectral bands
        genre: Genre name used in messages
        confidence: Analysis confidence in [0, 1]
        shares: Effective share of each metric in the aggregate score
        config: Overrides for DEFAULT_SUGGESTION_CONFIG

    Returns:
        SuggestionSet with the kept items (highest priority first), the
        theme groups, and the metric ids dropped by the priority floor or
        the size cap.
    """
    cfg = build_suggestion_config(config)
    shares = shares or {}
    conf = finite_or_none(confidence)
    if conf is None or not 0.0 <= conf <= 1.0:
        raise ConfigurationError(f"confidence must be within 0-1, got {confidence!r}.")

    flagged = [s for s in (*metric_scores, *band_scores) if needs_suggestion(s.severity)]
    boosts = resolve_dependencies((s.metric for s in flagged), DEPENDENCY_CLUSTERS)

    candidates: dict[str, Suggestion] = {}
    for score in flagged:
        cand = _candidate(
            score,
            genre=genre,
            confidence=conf,
            shares=shares,
            boost=boosts.get(score.metric),
        )
        prev = candidates.get(cand.metric)
        if prev is not None:
            logger.debug("duplicate suggestion for %s, keeping the stronger one", cand.metric)
            if _rank_key(prev) <= _rank_key(cand):
                continue
        candidates[cand.metric] = cand

    kept: list[Suggestion] = []
    dropped: list[str] = []
    min_priority = float(cfg["min_priority"])
    for cand in sorted(candidates.values(), key=_rank_key):
        if cand.priority < min_priority:
            logger.debug("%s: priority %.3f below %.3f, dropped", cand.metric, cand.priority, min_priority)
            dropped.append(cand.metric)
        elif len(kept) >= cfg["max_suggestions"]:
            logger.debug("%s: over the suggestion limit, dropped", cand.metric)
            dropped.append(cand.metric)
        else:
            kept.append(cand)

    groups: dict[str, tuple[Suggestion, ...]] = {}
    if cfg["group_by_theme"]:
        for theme in THEMES:
            members = tuple(s for s in kept if s.theme == theme)
            if members:
                groups[theme] = members

    return SuggestionSet(items=tuple(kept), groups=groups, dropped=tuple(dropped))
