"""Hard score caps for disqualifying defects."""
from __future__ import annotations
import logging
from dataclasses import dataclass

from mixscore.errors import ConfigurationError
from mixscore.metrics.dedup import canonical_value
from mixscore.types import MeasurementRecord, QualityIssue

logger = logging.getLogger(__name__)


# Rule order is the order issues are reported in.
DEFAULT_QUALITY_GATES = {
    "true_peak_critical": {"metric": "true_peak", "op": "gt", "threshold": -0.1, "cap": 40.0},
    "clipping_critical": {"metric": "clipping", "op": "gt", "threshold": 10.0, "cap": 40.0},
    "true_peak_severe": {"metric": "true_peak", "op": "gt", "threshold": 0.5, "cap": 60.0},
    "dc_offset_severe": {"metric": "dc_offset", "op": "gt", "threshold": 0.05, "cap": 60.0},
    "thd_severe": {"metric": "thd", "op": "gt", "threshold": 5.0, "cap": 60.0},
    "true_peak_moderate": {"metric": "true_peak", "op": "gt", "threshold": 1.0, "cap": 75.0},
    "dc_offset_moderate": {"metric": "dc_offset", "op": "gt", "threshold": 0.02, "cap": 75.0},
    "lra_moderate": {"metric": "lra", "op": "lt", "threshold": 1.0, "cap": 75.0},
}

_GATE_INPUT_LABELS = {
    "true_peak": ("True peak", "dBTP"),
    "clipping": ("Clipping", "%"),
    "dc_offset": ("DC offset", ""),
    "thd": ("THD", "%"),
    "lra": ("Loudness range", "LU"),
}

_OPS = {
    "gt": (lambda v, t: v > t, "above"),
    "lt": (lambda v, t: v < t, "below"),
}


def _merge_config(base: dict, overrides: dict | None) -> dict:
    if not overrides:
        return {k: dict(v) for k, v in base.items()}
    merged = {k: dict(v) for k, v in base.items()}
    for key, value in overrides.items():
        if value is None:
            merged.pop(key, None)
        elif isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def build_quality_gate_config(overrides: dict | None = None) -> dict:
    """
    Return merged quality gate rules with defaults applied.

    An override set to None disables that rule; new rule ids are appended
    after the defaults.
    """
    cfg = _merge_config(DEFAULT_QUALITY_GATES, overrides)
    errors: list[str] = []
    for rule_id, rule in cfg.items():
        if not isinstance(rule, dict):
            errors.append(f"{rule_id} must be an object.")
            continue
        if rule.get("metric") not in _GATE_INPUT_LABELS:
            errors.append(f"{rule_id}.metric must be one of {sorted(_GATE_INPUT_LABELS)}.")
        if rule.get("op") not in _OPS:
            errors.append(f"{rule_id}.op must be gt or lt.")
        if not isinstance(rule.get("threshold"), (int, float)):
            errors.append(f"{rule_id}.threshold must be a number.")
        cap = rule.get("cap")
        if not isinstance(cap, (int, float)) or not 0 <= cap <= 100:
            errors.append(f"{rule_id}.cap must be within 0-100.")
    if errors:
        raise ConfigurationError("; ".join(errors))
    return cfg


def gate_input(record: MeasurementRecord, metric: str) -> float | None:
    """Value a gate inspects; N/A inputs never trigger a gate."""
    if metric == "true_peak":
        return record.true_peak_dbtp
    if metric == "clipping":
        return record.clipping_pct
    if metric == "dc_offset":
        return canonical_value(record, "dc_offset")
    if metric == "thd":
        return record.thd_pct
    if metric == "lra":
        return record.lra
    raise ConfigurationError(f"unknown gate input: {metric!r}")


def _describe(metric: str, value: float, op: str, threshold: float, cap: float) -> str:
    label, units = _GATE_INPUT_LABELS[metric]
    units = f" {units}" if units else ""
    compare = _OPS[op][1]
    return (
        f"{label} {value:.3f}{units} is {compare} {threshold:g}{units}; "
        f"score capped at {cap:g}."
    )


def evaluate_quality_gates(
    record: MeasurementRecord,
    config: dict | None = None
) -> list[QualityIssue]:
    """
    Evaluate every gate rule against the measurements.

    Returns:
        One QualityIssue per matched rule, in rule order.
    """
    cfg = build_quality_gate_config(config)
    issues: list[QualityIssue] = []
    for rule_id, rule in cfg.items():
        metric = rule["metric"]
        value = gate_input(record, metric)
        if value is None:
            continue
        threshold = float(rule["threshold"])
        matches, _ = _OPS[rule["op"]]
        if not matches(value, threshold):
            continue
        cap = float(rule["cap"])
        issues.append(
            QualityIssue(
                rule_id=rule_id,
                metric=metric,
                description=_describe(metric, value, rule["op"], threshold, cap),
                value=float(value),
                threshold=threshold,
                cap=cap,
            )
        )
    return issues


@dataclass(frozen=True)
class GateOutcome:
    score_pct: float
    issues: tuple[QualityIssue, ...]


def apply_quality_gates(
    score_pct: float,
    record: MeasurementRecord,
    config: dict | None = None
) -> GateOutcome:
    """
    Cap a score by every matched gate; caps combine via min().

    Only the measurements decide which gates match, so applying the gates
    again to an already capped score returns the same outcome.
    """
    issues = evaluate_quality_gates(record, config)
    capped = float(score_pct)
    for issue in issues:
        capped = min(capped, issue.cap)
    if issues:
        logger.debug(
            "quality gates matched: %s; score %.2f -> %.2f",
            [i.rule_id for i in issues], score_pct, capped,
        )
    return GateOutcome(score_pct=capped, issues=tuple(issues))
