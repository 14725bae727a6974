from __future__ import annotations
import math


def q(x: float, step: float) -> float:
    """Round half away from zero to the nearest step so reported scores are stable."""
    if x is None or math.isnan(x) or math.isinf(x):
        return x
    inv = 1.0 / step
    y = x * inv
    if y >= 0:
        yq = math.floor(y + 0.5)
    else:
        yq = -math.floor(-y + 0.5)
    return yq / inv


def q_opt(x: float | None, step: float) -> float | None:
    """Quantize an optional value, keeping N/A as None."""
    if x is None:
        return None
    return q(float(x), step)
