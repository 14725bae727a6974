"""Correlated metric clusters that point at a shared root cause."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class DependencyCluster:
    cluster_id: str
    members: frozenset[str]
    bonus: float
    note: str


DEPENDENCY_CLUSTERS: tuple[DependencyCluster, ...] = (
    DependencyCluster(
        "over_limiting",
        frozenset({"true_peak", "clipping"}),
        0.2,
        "Peaks and clipping together usually mean the limiter is driven too hard.",
    ),
    DependencyCluster(
        "headroom",
        frozenset({"loudness", "true_peak"}),
        0.2,
        "Set the ceiling and headroom before pushing the limiter for loudness.",
    ),
    DependencyCluster(
        "over_compression",
        frozenset({"loudness", "dynamic_range"}),
        0.2,
        "Loudness and dynamic range are off together; revisit bus compression first.",
    ),
    DependencyCluster(
        "low_end_dynamics",
        frozenset({"band:sub", "band:low_bass", "dynamic_range"}),
        0.2,
        "Fix the low end before judging dynamic range.",
    ),
    DependencyCluster(
        "stereo_phase",
        frozenset({"stereo_correlation", "stereo_width"}),
        0.1,
        "Check phase and mono compatibility below 100 Hz before widening.",
    ),
)


@dataclass(frozen=True)
class DependencyBoost:
    metric: str
    bonus: float
    clusters: tuple[str, ...]
    notes: tuple[str, ...]


def resolve_dependencies(
    non_green: Iterable[str],
    clusters: tuple[DependencyCluster, ...] = DEPENDENCY_CLUSTERS
) -> dict[str, DependencyBoost]:
    """
    Find clusters with at least two non-green members.

    Args:
        non_green: Metric ids (``band:<name>`` for bands) whose severity is not green
        clusters: Cluster table to check

    Returns:
        Boost per affected metric. Bonuses from several active clusters add up.
    """
    flagged = set(non_green)
    bonus: dict[str, float] = {}
    hit: dict[str, list[DependencyCluster]] = {}
    for cluster in clusters:
        active = cluster.members & flagged
        if len(active) < 2:
            continue
        for metric in sorted(active):
            bonus[metric] = bonus.get(metric, 0.0) + cluster.bonus
            hit.setdefault(metric, []).append(cluster)
    return {
        metric: DependencyBoost(
            metric=metric,
            bonus=bonus[metric],
            clusters=tuple(c.cluster_id for c in hit[metric]),
            notes=tuple(c.note for c in hit[metric]),
        )
        for metric in sorted(bonus)
    }
