"""Reference profile validation helpers."""
from __future__ import annotations
import logging
import math
from typing import Any, Mapping

from mixscore.errors import ConfigurationError
from mixscore.metrics.catalog import METRICS_BY_ID, canonical_metric_id
from mixscore.types import Category, GateClass

logger = logging.getLogger(__name__)

WEIGHT_SUM_EPS = 1e-3
WEIGHT_RENORMALIZE_LIMIT = 0.05

_GATE_CLASSES = {g.value for g in GateClass}


def _is_number(v: Any) -> bool:
    return (
        isinstance(v, (int, float))
        and not isinstance(v, bool)
        and not math.isnan(v)
        and not math.isinf(v)
    )


def normalize_category_weights(
    weights: Mapping[Any, Any],
    *,
    warn: bool = True
) -> dict[Category, float]:
    """
    Check a category weight map and return it summing to 1.0.

    Maps within 1e-3 of 1.0 are returned as-is. Maps off by up to 0.05 are
    renormalized with a logged warning. Anything further off, negative or
    non-finite weights, unknown categories, or an all-zero map raise
    ConfigurationError.
    """
    cleaned: dict[Category, float] = {}
    for key, value in weights.items():
        try:
            cat = Category(key)
        except ValueError as exc:
            raise ConfigurationError(f"unknown category in weights: {key!r}") from exc
        if not _is_number(value) or value < 0:
            raise ConfigurationError(f"weight for {cat.value} must be a non-negative number.")
        cleaned[cat] = float(value)

    total = math.fsum(cleaned.values())
    if total <= 0:
        raise ConfigurationError("category weights must have a positive sum.")
    off = abs(total - 1.0)
    if off <= WEIGHT_SUM_EPS:
        return cleaned
    if off > WEIGHT_RENORMALIZE_LIMIT:
        raise ConfigurationError(
            f"category weights sum to {total:.4f}; expected 1.0 +/- {WEIGHT_SUM_EPS:g}."
        )
    if warn:
        logger.warning("category weights sum to %.4f; renormalizing to 1.0", total)
    return {cat: w / total for cat, w in cleaned.items()}


def _validate_target_entry(path: str, entry: Any, *, band: bool, err) -> None:
    if not isinstance(entry, Mapping):
        err(f"{path} must be an object.")
        return
    target = entry.get("target", entry.get("target_db"))
    if not _is_number(target):
        err(f"{path}.target must be a finite number.")
    inner = entry.get("tol_inner", entry.get("tol_db") if band else None)
    outer = entry.get("tol_outer")
    if not _is_number(inner) or inner <= 0:
        err(f"{path}.tol_inner must be > 0.")
    elif outer is not None and (not _is_number(outer) or outer <= inner):
        err(f"{path}.tol_outer must be greater than tol_inner.")
    elif outer is None and not band:
        err(f"{path}.tol_outer is required.")
    gate = entry.get("quality_gate", "soft")
    if gate not in _GATE_CLASSES:
        err(f"{path}.quality_gate must be one of critical, hard, soft.")
    for flag in ("ceiling", "invert"):
        if flag in entry and not isinstance(entry[flag], bool):
            err(f"{path}.{flag} must be boolean.")


def validate_reference_profile_dict(j: dict) -> None:
    """Validate reference profile structure and core constraints."""
    errors: list[str] = []

    def err(msg: str) -> None:
        errors.append(msg)

    if not isinstance(j, Mapping):
        raise ConfigurationError("reference profile must be an object.")

    genre = j.get("genre")
    if not isinstance(genre, str) or not genre:
        err("genre must be a non-empty string.")

    targets = j.get("targets", {})
    bands = j.get("bands", {})
    if not isinstance(targets, Mapping):
        err("targets must be an object keyed by metric name.")
        targets = {}
    if not isinstance(bands, Mapping):
        err("bands must be an object keyed by band name.")
        bands = {}
    if not targets and not bands:
        err("profile must define at least one metric or band target.")

    seen: set[str] = set()
    for name, entry in targets.items():
        metric = canonical_metric_id(name)
        if metric not in METRICS_BY_ID:
            err(f"targets.{name} is not a known metric.")
            continue
        if metric in seen:
            err(f"targets.{name} duplicates metric {metric}.")
        seen.add(metric)
        _validate_target_entry(f"targets.{name}", entry, band=False, err=err)

    for name, entry in bands.items():
        if not isinstance(name, str) or not name:
            err("band names must be non-empty strings.")
            continue
        _validate_target_entry(f"bands.{name}", entry, band=True, err=err)

    weights = j.get("category_weights")
    if weights is not None:
        if not isinstance(weights, Mapping):
            err("category_weights must be an object.")
        else:
            try:
                normalize_category_weights(weights, warn=False)
            except ConfigurationError as exc:
                err(f"category_weights: {exc}")

    version = j.get("version", "1.0")
    if not isinstance(version, str):
        err("version must be a string.")

    if errors:
        raise ConfigurationError("; ".join(errors))
