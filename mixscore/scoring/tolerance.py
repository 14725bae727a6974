"""
Smooth per-metric tolerance scoring.

A metric scores 1.0 while its deviation stays inside the inner tolerance,
its gate-class floor once it reaches the outer tolerance, and follows a
strictly decreasing curve in between. The curve shape is a strategy chosen
per call (Gaussian decay or Huber-like quadratic-then-linear).
"""
from __future__ import annotations
import math
from typing import Callable

from mixscore.errors import ConfigurationError
from mixscore.scoring.severity import signed_deviation
from mixscore.types import GateClass, ScoringMethod, finite_or_none

GATE_FLOORS = {
    GateClass.CRITICAL: 0.0,
    GateClass.HARD: 0.15,
    GateClass.SOFT: 0.25,
}

GAUSSIAN_SIGMA = 0.4
HUBER_BREAKPOINT = 0.6

_GAUSSIAN_TAIL = math.exp(-((1.0 / GAUSSIAN_SIGMA) ** 2))


def gaussian_shape(t: float) -> float:
    """exp(-(t/sigma)^2) rescaled so that shape(0)=1 and shape(1)=0."""
    g = math.exp(-((t / GAUSSIAN_SIGMA) ** 2))
    return (g - _GAUSSIAN_TAIL) / (1.0 - _GAUSSIAN_TAIL)


def huber_shape(t: float) -> float:
    """Quadratic down to 0.5 at the breakpoint, then linear down to 0 at t=1."""
    if t <= HUBER_BREAKPOINT:
        return 1.0 - 0.5 * (t / HUBER_BREAKPOINT) ** 2
    slope = 0.5 / (1.0 - HUBER_BREAKPOINT)
    return 0.5 - slope * (t - HUBER_BREAKPOINT)


_SHAPES: dict[ScoringMethod, Callable[[float], float]] = {
    ScoringMethod.GAUSSIAN: gaussian_shape,
    ScoringMethod.HUBER: huber_shape,
}


def gate_floor(gate_class: GateClass | str) -> float:
    try:
        return GATE_FLOORS[GateClass(gate_class)]
    except ValueError as exc:
        raise ConfigurationError(
            f"gate class must be critical, hard, or soft, got {gate_class!r}."
        ) from exc


def validate_tolerances(tol_inner: float, tol_outer: float) -> None:
    """Raise ConfigurationError unless 0 < tol_inner < tol_outer."""
    inner = finite_or_none(tol_inner)
    outer = finite_or_none(tol_outer)
    if inner is None or inner <= 0:
        raise ConfigurationError(f"tol_inner must be > 0, got {tol_inner!r}.")
    if outer is None or outer <= inner:
        raise ConfigurationError(
            f"tol_outer must be greater than tol_inner ({inner:g}), got {tol_outer!r}."
        )


def score_tolerance(
    value: float | None,
    target: float,
    tol_inner: float,
    tol_outer: float,
    gate_class: GateClass | str = GateClass.SOFT,
    *,
    method: ScoringMethod | str = ScoringMethod.GAUSSIAN,
    ceiling: bool = False
) -> float | None:
    """
    Score one measured value against its reference.

    Args:
        value: Measured value, None (or non-finite) when N/A
        target: Reference target
        tol_inner: Deviation that still scores a perfect 1.0
        tol_outer: Deviation at which the score reaches the class floor
        gate_class: critical, hard, or soft; selects the floor
        method: Curve shape between the tolerances
        ceiling: Only deviations above the target are penalized

    Returns:
        Score in [0, 1], or None when the value is N/A. Callers exclude
        None scores instead of substituting a number.
    """
    validate_tolerances(tol_inner, tol_outer)
    floor = gate_floor(gate_class)
    try:
        shape = _SHAPES[ScoringMethod(method)]
    except ValueError as exc:
        raise ConfigurationError(f"unknown scoring method: {method!r}.") from exc
    if finite_or_none(target) is None:
        raise ConfigurationError(f"target must be a finite number, got {target!r}.")

    v = finite_or_none(value)
    if v is None:
        return None

    deviation = abs(signed_deviation(v, target, ceiling=ceiling))
    if deviation <= tol_inner:
        return 1.0
    if deviation >= tol_outer:
        return floor

    t = (deviation - tol_inner) / (tol_outer - tol_inner)
    return floor + (1.0 - floor) * min(1.0, max(0.0, shape(t)))

