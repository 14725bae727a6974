from __future__ import annotations
import json
from typing import Any, Mapping

from mixscore.metrics.catalog import canonical_metric_id
from mixscore.profiles.defaults import (
    BAND_OUTER_TOLERANCE_FACTOR,
    DEFAULT_METRIC_TARGETS,
    default_category_weights,
)
from mixscore.profiles.validator import normalize_category_weights, validate_reference_profile_dict
from mixscore.types import GateClass, MetricTarget, ReferenceProfile


def _ceiling_flag(entry: Mapping[str, Any]) -> bool | None:
    if "ceiling" in entry:
        return bool(entry["ceiling"])
    if "invert" in entry:
        return bool(entry["invert"])
    return None


def _metric_target(entry: Mapping[str, Any]) -> MetricTarget:
    return MetricTarget(
        target=float(entry.get("target", entry.get("target_db"))),
        tol_inner=float(entry["tol_inner"]),
        tol_outer=float(entry["tol_outer"]),
        gate_class=GateClass(entry.get("quality_gate", "soft")),
        ceiling=_ceiling_flag(entry),
    )


def _band_target(entry: Mapping[str, Any]) -> MetricTarget:
    target = entry.get("target", entry.get("target_db"))
    inner = float(entry.get("tol_inner", entry.get("tol_db")))
    outer = entry.get("tol_outer")
    return MetricTarget(
        target=float(target),
        tol_inner=inner,
        tol_outer=float(outer) if outer is not None else inner * BAND_OUTER_TOLERANCE_FACTOR,
        gate_class=GateClass(entry.get("quality_gate", "soft")),
        ceiling=_ceiling_flag(entry),
    )


def profile_from_dict(j: dict) -> ReferenceProfile:
    """
    Build a validated ReferenceProfile from its JSON document.

    Stereo and artifact metrics missing from ``targets`` take the engine
    defaults. Category weights default to the genre's built-in table.
    """
    validate_reference_profile_dict(j)
    genre = j["genre"]

    merged: dict[str, Mapping[str, Any]] = dict(DEFAULT_METRIC_TARGETS)
    for name, entry in j.get("targets", {}).items():
        merged[canonical_metric_id(name)] = entry
    metrics = {metric: _metric_target(entry) for metric, entry in merged.items()}

    bands = {str(name): _band_target(entry) for name, entry in j.get("bands", {}).items()}

    weights = j.get("category_weights")
    if weights is None:
        weights = default_category_weights(genre)

    return ReferenceProfile(
        genre=genre,
        metrics=metrics,
        bands=bands,
        category_weights=normalize_category_weights(weights),
        version=j.get("version", "1.0"),
    )


def load_reference_profile(path: str) -> ReferenceProfile:
    """
    Load a reference profile from JSON file.

    Args:
        path: Path to the reference profile JSON file

    Returns:
        ReferenceProfile with defaults merged in
    """
    with open(path, "r", encoding="utf-8") as f:
        j = json.load(f)
    return profile_from_dict(j)
