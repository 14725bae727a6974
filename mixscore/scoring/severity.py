"""Severity buckets shared by score coloring, band weighting, and suggestions."""
from __future__ import annotations

from mixscore.errors import ConfigurationError
from mixscore.types import Severity

GREEN_MAX_RATIO = 1.0
YELLOW_MAX_RATIO = 2.0
ORANGE_MAX_RATIO = 3.0

SEVERITY_WEIGHTS = {
    Severity.GREEN: 0.0,
    Severity.YELLOW: 1.0,
    Severity.ORANGE: 1.5,
    Severity.RED: 2.0,
}

SEVERITY_LABELS = {
    Severity.GREEN: "OK",
    Severity.YELLOW: "monitor",
    Severity.ORANGE: "adjust",
    Severity.RED: "fix",
}

SEVERITY_COLORS = {
    Severity.GREEN: "#52f7ad",
    Severity.YELLOW: "#ffd93d",
    Severity.ORANGE: "#ff8c42",
    Severity.RED: "#ff4757",
}


def signed_deviation(value: float, target: float, *, ceiling: bool = False) -> float:
    """
    Return value - target.

    Ceiling metrics (true peak, clipping, DC offset) are only penalized
    above the target, so anything at or below it has zero deviation.
    """
    d = float(value) - float(target)
    if ceiling:
        return max(0.0, d)
    return d


def deviation_ratio(deviation: float, tolerance: float) -> float:
    """Absolute deviation expressed in multiples of the inner tolerance."""
    if not tolerance > 0:
        raise ConfigurationError(f"tolerance must be > 0, got {tolerance!r}.")
    return abs(deviation) / float(tolerance)


def z_score(deviation: float, tolerance: float) -> float:
    """Signed deviation in multiples of the inner tolerance."""
    if not tolerance > 0:
        raise ConfigurationError(f"tolerance must be > 0, got {tolerance!r}.")
    return float(deviation) / float(tolerance)


def classify_ratio(ratio: float) -> Severity:
    """Bucket a deviation ratio: <=1 green, <=2 yellow, <=3 orange, else red."""
    if ratio <= GREEN_MAX_RATIO:
        return Severity.GREEN
    if ratio <= YELLOW_MAX_RATIO:
        return Severity.YELLOW
    if ratio <= ORANGE_MAX_RATIO:
        return Severity.ORANGE
    return Severity.RED


def classify(value: float, target: float, tolerance: float, *, ceiling: bool = False) -> Severity:
    return classify_ratio(
        deviation_ratio(signed_deviation(value, target, ceiling=ceiling), tolerance)
    )


def severity_weight(severity: Severity) -> float:
    return SEVERITY_WEIGHTS[Severity(severity)]


def needs_suggestion(severity: Severity) -> bool:
    """Every non-green metric gets exactly one suggestion candidate; green ones never do."""
    return Severity(severity) is not Severity.GREEN
