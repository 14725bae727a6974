from __future__ import annotations

import pytest

from mixscore.scoring.spectral import (
    NEUTRAL_SPECTRAL_SCORE,
    band_score_from_ratio,
    score_spectral_balance,
)
from mixscore.types import MetricTarget, Severity


def _targets(**bands):
    return {name: MetricTarget(t, 2.0, 6.0) for name, t in bands.items()}


def test_band_score_curve():
    assert band_score_from_ratio(0.5) == (100.0, Severity.GREEN)
    assert band_score_from_ratio(1.5) == (pytest.approx(70.0), Severity.YELLOW)
    assert band_score_from_ratio(2.5) == (pytest.approx(50.0), Severity.ORANGE)
    assert band_score_from_ratio(4.0) == (pytest.approx(30.0), Severity.RED)
    assert band_score_from_ratio(12.0) == (20.0, Severity.RED)


def test_missing_band_excluded_from_both_sides():
    targets = _targets(sub=-17.0, low_bass=-16.0, mid=-20.0)
    measured = {"sub": None, "low_bass": -16.0, "mid": -10.0}
    result = score_spectral_balance(measured, targets)

    assert [b.band for b in result.bands] == ["low_bass", "mid"]
    assert result.excluded == ("sub",)
    assert not result.insufficient_data
    low, mid = result.bands
    assert low.severity is Severity.GREEN and low.weight == 1.0
    assert mid.severity is Severity.RED and mid.weight == 0.4
    assert result.score == pytest.approx((100.0 * 1.0 + 20.0 * 0.4) / 1.4)


def test_unreferenced_bands_are_listed_as_excluded():
    result = score_spectral_balance({"mid": -20.0, "air": -40.0}, _targets(mid=-20.0))
    assert result.score == 100.0
    assert result.excluded == ("air",)


def test_no_valid_band_gives_neutral_fallback():
    result = score_spectral_balance({"sub": float("nan")}, _targets(sub=-17.0))
    assert result.score == NEUTRAL_SPECTRAL_SCORE
    assert result.insufficient_data
    assert result.bands == ()


def test_band_direction_follows_sign():
    result = score_spectral_balance({"mid": -26.0}, _targets(mid=-20.0))
    (mid,) = result.bands
    assert mid.deviation == -6.0
    assert mid.direction.value == "increase"
