from __future__ import annotations

import numpy as np
import pytest

from mixscore.errors import ConfigurationError
from mixscore.scoring.tolerance import (
    GATE_FLOORS,
    gaussian_shape,
    huber_shape,
    score_tolerance,
)
from mixscore.types import GateClass, ScoringMethod


@pytest.mark.parametrize("method", list(ScoringMethod))
@pytest.mark.parametrize("gate", list(GateClass))
def test_score_is_non_increasing_in_deviation(method, gate):
    values = np.linspace(0.0, 6.0, 241)
    scores = [score_tolerance(float(v), 0.0, 1.0, 3.0, gate, method=method) for v in values]
    diffs = np.diff(np.asarray(scores))
    assert np.all(diffs <= 0.0)


@pytest.mark.parametrize("method", list(ScoringMethod))
def test_score_strictly_decreases_between_tolerances(method):
    values = np.linspace(1.02, 2.98, 50)
    scores = np.asarray([score_tolerance(float(v), 0.0, 1.0, 3.0, method=method) for v in values])
    assert np.all(np.diff(scores) < 0.0)


@pytest.mark.parametrize("method", list(ScoringMethod))
@pytest.mark.parametrize("gate", list(GateClass))
def test_score_endpoints_are_exact(method, gate):
    assert score_tolerance(-8.0, -8.0, 1.0, 3.0, gate, method=method) == 1.0
    assert score_tolerance(-7.0, -8.0, 1.0, 3.0, gate, method=method) == 1.0
    assert score_tolerance(-5.0, -8.0, 1.0, 3.0, gate, method=method) == GATE_FLOORS[gate]
    assert score_tolerance(-11.0, -8.0, 1.0, 3.0, gate, method=method) == GATE_FLOORS[gate]
    assert score_tolerance(40.0, -8.0, 1.0, 3.0, gate, method=method) == GATE_FLOORS[gate]


def test_floors_per_gate_class():
    assert GATE_FLOORS[GateClass.CRITICAL] == 0.0
    assert GATE_FLOORS[GateClass.HARD] == 0.15
    assert GATE_FLOORS[GateClass.SOFT] == 0.25


def test_shapes_hit_zero_and_one():
    assert gaussian_shape(0.0) == pytest.approx(1.0)
    assert gaussian_shape(1.0) == pytest.approx(0.0, abs=1e-12)
    assert huber_shape(0.0) == 1.0
    assert huber_shape(0.6) == pytest.approx(0.5)
    assert huber_shape(1.0) == pytest.approx(0.0, abs=1e-12)


def test_huber_is_continuous_at_breakpoint():
    left = huber_shape(0.6 - 1e-9)
    right = huber_shape(0.6 + 1e-9)
    assert left == pytest.approx(right, abs=1e-6)


def test_na_values_return_none():
    assert score_tolerance(None, 0.0, 1.0, 3.0) is None
    assert score_tolerance(float("nan"), 0.0, 1.0, 3.0) is None
    assert score_tolerance(float("inf"), 0.0, 1.0, 3.0) is None


def test_ceiling_only_penalizes_above_target():
    assert score_tolerance(-6.0, -1.0, 1.0, 3.0, ceiling=True) == 1.0
    assert score_tolerance(2.0, -1.0, 1.0, 3.0, GateClass.CRITICAL, ceiling=True) == 0.0
    assert score_tolerance(-6.0, -1.0, 1.0, 3.0) == 0.25


def test_invalid_tolerances_raise():
    with pytest.raises(ConfigurationError, match="tol_inner must be > 0"):
        score_tolerance(0.0, 0.0, 0.0, 3.0)
    with pytest.raises(ConfigurationError, match="tol_outer must be greater"):
        score_tolerance(0.0, 0.0, 2.0, 2.0)
    with pytest.raises(ConfigurationError, match="gate class"):
        score_tolerance(0.0, 0.0, 1.0, 3.0, "lenient")


def test_invalid_tolerances_raise_even_for_na_values():
    with pytest.raises(ConfigurationError):
        score_tolerance(None, 0.0, 3.0, 1.0)
