from __future__ import annotations

import pytest

from mixscore.suggestions.dependencies import resolve_dependencies


def test_single_member_does_not_activate_cluster():
    assert resolve_dependencies(["true_peak"]) == {}


def test_two_members_boost_each_other():
    boosts = resolve_dependencies(["true_peak", "clipping"])
    assert set(boosts) == {"true_peak", "clipping"}
    assert boosts["clipping"].bonus == pytest.approx(0.2)
    assert boosts["clipping"].clusters == ("over_limiting",)
    assert "limiter" in boosts["clipping"].notes[0]


def test_bonuses_from_several_clusters_add_up():
    boosts = resolve_dependencies(["loudness", "true_peak", "clipping"])
    assert boosts["true_peak"].bonus == pytest.approx(0.4)
    assert boosts["true_peak"].clusters == ("over_limiting", "headroom")
    assert boosts["loudness"].bonus == pytest.approx(0.2)


def test_band_members_use_prefixed_ids():
    boosts = resolve_dependencies(["band:sub", "dynamic_range", "band:mid"])
    assert set(boosts) == {"band:sub", "dynamic_range"}
    assert boosts["band:sub"].clusters == ("low_end_dynamics",)
