from __future__ import annotations

import math

import pytest

from mixscore.scoring.aggregate import (
    NEUTRAL_CATEGORY_SCORE,
    NEUTRAL_SCORE_PCT,
    aggregate_category,
    aggregate_scores,
    weighted_mean,
)
from mixscore.scoring.spectral import score_spectral_balance
from mixscore.types import Category, MetricTarget

from tests.conftest import metric_score

WEIGHTS = {
    Category.LOUDNESS: 0.25,
    Category.DYNAMICS: 0.15,
    Category.PEAK: 0.15,
    Category.TONAL: 0.25,
    Category.STEREO: 0.10,
    Category.ARTIFACTS: 0.10,
}


def test_weighted_mean_skips_na():
    assert weighted_mean([80.0, None, 90.0], [1.0, 1.0, 1.0]) == 85.0
    assert weighted_mean([80.0, float("nan"), 90.0], [1.0, 1.0, 1.0]) == 85.0
    assert weighted_mean([None, None], [1.0, 1.0]) is None


def test_weighted_mean_single_valid_value_is_unchanged():
    assert weighted_mean([None, 0.37, None], [0.5, 0.3, 0.2]) == 0.37


def test_weighted_mean_length_mismatch():
    with pytest.raises(ValueError):
        weighted_mean([1.0], [1.0, 2.0])


def test_category_with_one_valid_metric_equals_that_metric():
    dr = metric_score("dynamic_range", 11.0, 8.0, 2.0, 5.0)
    cat = aggregate_category(Category.DYNAMICS, [dr], 0.15)
    assert cat.score == dr.score
    assert not cat.insufficient_data


def test_category_without_data_is_neutral_and_flagged():
    cat = aggregate_category(Category.STEREO, [], 0.1)
    assert cat.score == NEUTRAL_CATEGORY_SCORE
    assert cat.insufficient_data


def test_missing_categories_are_excluded_from_denominator():
    loud = metric_score("loudness", -8.0, -8.0)
    peak = metric_score("true_peak", 1.0, -1.0, 1.0, 3.0, "critical")
    spectral = score_spectral_balance({}, {})
    result = aggregate_scores([loud, peak], spectral, WEIGHTS)

    assert 0.0 < peak.score < 1.0
    expected = (1.0 * 0.25 + peak.score * 0.15) / 0.40 * 100.0
    assert result.score_pct == pytest.approx(expected)
    assert not result.insufficient_data
    flagged = {c.category for c in result.categories if c.insufficient_data}
    assert flagged == {Category.DYNAMICS, Category.TONAL, Category.STEREO, Category.ARTIFACTS}


def test_shares_cover_every_scored_metric():
    spectral = score_spectral_balance(
        {"sub": -17.0, "mid": -25.0},
        {"sub": MetricTarget(-17.0, 2.0, 6.0), "mid": MetricTarget(-20.0, 2.0, 6.0)},
    )
    scores = [
        metric_score("loudness", -9.5, -8.0),
        metric_score("dynamic_range", 8.0, 8.0, 2.0, 5.0),
        metric_score("lra", 3.0, 6.0, 2.0, 5.0),
    ]
    result = aggregate_scores(scores, spectral, WEIGHTS)
    assert math.fsum(result.shares.values()) == pytest.approx(1.0)
    assert result.shares["loudness"] == pytest.approx(0.25 / 0.65)
    assert result.shares["dynamic_range"] == pytest.approx(0.15 / 0.65 * 0.7)
    assert set(result.shares) == {"loudness", "dynamic_range", "lra", "band:sub", "band:mid"}


def test_nothing_scorable_gives_neutral_score():
    result = aggregate_scores([], score_spectral_balance({}, {}), WEIGHTS)
    assert result.score_pct == NEUTRAL_SCORE_PCT
    assert result.insufficient_data
    assert len(result.categories) == len(Category)
