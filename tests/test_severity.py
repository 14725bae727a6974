from __future__ import annotations

import pytest

from mixscore.errors import ConfigurationError
from mixscore.scoring.severity import (
    classify,
    classify_ratio,
    deviation_ratio,
    needs_suggestion,
    severity_weight,
    signed_deviation,
    z_score,
)
from mixscore.types import Severity


@pytest.mark.parametrize(
    "ratio,expected",
    [
        (0.0, Severity.GREEN),
        (1.0, Severity.GREEN),
        (1.01, Severity.YELLOW),
        (2.0, Severity.YELLOW),
        (2.5, Severity.ORANGE),
        (3.0, Severity.ORANGE),
        (3.01, Severity.RED),
        (50.0, Severity.RED),
    ],
)
def test_classify_ratio_buckets(ratio, expected):
    assert classify_ratio(ratio) is expected


def test_classify_uses_absolute_deviation():
    assert classify(-10.5, -8.0, 1.0) is Severity.ORANGE
    assert classify(-5.5, -8.0, 1.0) is Severity.ORANGE


def test_ceiling_deviation_is_clamped_below_target():
    assert signed_deviation(-2.1, -1.0, ceiling=True) == 0.0
    assert signed_deviation(0.3, -1.0, ceiling=True) == pytest.approx(1.3)
    assert signed_deviation(-2.1, -1.0) == pytest.approx(-1.1)


def test_ratio_and_z_score():
    assert deviation_ratio(-3.0, 2.0) == 1.5
    assert z_score(-3.0, 2.0) == -1.5
    with pytest.raises(ConfigurationError):
        deviation_ratio(1.0, 0.0)


def test_weights_and_suggestion_trigger():
    assert severity_weight(Severity.GREEN) == 0.0
    assert severity_weight(Severity.YELLOW) == 1.0
    assert severity_weight(Severity.ORANGE) == 1.5
    assert severity_weight(Severity.RED) == 2.0
    assert not needs_suggestion(Severity.GREEN)
    assert all(needs_suggestion(s) for s in (Severity.YELLOW, Severity.ORANGE, Severity.RED))
