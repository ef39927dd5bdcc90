"""Tests for soul_bench.scenario and soul_bench.profiles."""
from __future__ import annotations

import pytest
from conftest import make_profile

from soul_bench.aggregation import DispersionStability, ThresholdStability
from soul_bench.profiles import get_available_profiles, get_profile
from soul_bench.scenario import Scenario


def test_build_url_adds_load_and_mode():
    profile = make_profile()
    url = profile.build_url("http://localhost:5173", Scenario("x", 3000))
    assert url == "http://localhost:5173/?souls=3000&mode=instanced"


def test_build_url_keeps_existing_query_and_extras():
    profile = make_profile(load_param="val", extra_params={"debug": "true"})
    url = profile.build_url("http://host:8080/app?seed=1", Scenario("x", 500, mode="individual"))
    assert url == "http://host:8080/app?seed=1&val=500&mode=individual&debug=true"


def test_expand_scenarios_is_mode_major():
    profile = make_profile(modes=["individual", "instanced"])
    expanded = profile.expand_scenarios()
    assert [(s.mode, s.load) for s in expanded] == [
        ("individual", 100),
        ("individual", 1000),
        ("instanced", 100),
        ("instanced", 1000),
    ]


def test_with_overrides_skips_none():
    profile = make_profile().with_overrides(test_duration_s=5.0, stabilization_s=None)
    assert profile.test_duration_s == 5.0
    assert profile.stabilization_s == 5.0


def test_effective_ceiling_covers_long_windows():
    assert make_profile(test_duration_s=20.0, ceiling_s=35.0).effective_ceiling() == 35.0
    assert make_profile(test_duration_s=60.0, ceiling_s=35.0).effective_ceiling() == 65.0


def test_expected_draw_calls_by_mode():
    assert Scenario("x", 1500, mode="individual").expected_draw_calls() == 1500
    assert Scenario("x", 1500, mode="instanced").expected_draw_calls() == 3


# ── profiles ─────────────────────────────────────────────────────────────────

def test_all_profiles_build():
    for name in get_available_profiles():
        profile = get_profile(name)
        assert profile.name == name
        assert profile.scenarios
        profile.stability_strategy()


def test_benchmark_profile_compares_modes_with_dispersion():
    profile = get_profile("benchmark")
    assert profile.modes == ["individual", "instanced"]
    assert isinstance(profile.stability_strategy(), DispersionStability)
    assert all(s.expected_rate for s in profile.scenarios)


def test_stress_profile_uses_threshold_twenty():
    strategy = get_profile("stress").stability_strategy()
    assert isinstance(strategy, ThresholdStability)
    assert strategy.threshold == 20.0


def test_profiles_are_fresh_copies():
    get_profile("stress").scenarios.clear()
    assert len(get_profile("stress").scenarios) == 5


def test_unknown_profile():
    with pytest.raises(ValueError):
        get_profile("nope")
