#!/usr/bin/env python3
"""
Built-in benchmark profiles.

Each profile is a scenario table plus timing; all of them run through the same suite.
"""

from .scenario import BenchProfile, Scenario


def _benchmark_profile() -> BenchProfile:
    return BenchProfile(
        name="benchmark",
        description="Individual mesh vs GPU instanced rendering comparison",
        scenarios=[
            Scenario("Baseline Performance", 500, expected_rate=60),
            Scenario("Pre-Phase3 Limit", 888, expected_rate=48),
            Scenario("Phase3 Target", 1000, expected_rate=60),
            Scenario("Phase3 Stress Test", 1500, expected_rate=55),
            Scenario("Phase3 Maximum", 2000, expected_rate=50),
            Scenario("Beyond Phase3 Limit", 2500, expected_rate=40),
        ],
        modes=["individual", "instanced"],
        stabilization_s=5.0,
        test_duration_s=20.0,
        stability_method="dispersion",
        stability_threshold=None,
        load_param="val",
        extra_params={"debug": "true"},
    )


def _stress_profile() -> BenchProfile:
    return BenchProfile(
        name="stress",
        description="Extreme entity counts to find the breaking point",
        scenarios=[
            Scenario("High Performance Baseline", 3000),
            Scenario("Extreme Scale Test", 5000),
            Scenario("Maximum Capacity Test", 7500),
            Scenario("Breaking Point Test", 10000),
            Scenario("System Limit Test", 15000),
        ],
        navigation_timeout_s=30.0,
        stabilization_s=10.0,
        test_duration_s=30.0,
        ceiling_s=40.0,
        unstable_rate=5.0,
        stability_threshold=20.0,
    )


def _conservative_profile() -> BenchProfile:
    return BenchProfile(
        name="conservative",
        description="Moderate high entity counts to find practical limits",
        scenarios=[
            Scenario("High Normal Load", 2000),
            Scenario("Peak Performance Test", 2750),
            Scenario("Conservative Limit Test", 3500),
            Scenario("Practical Limit Test", 4000),
            Scenario("Breaking Point Search", 4500),
        ],
        navigation_timeout_s=20.0,
        stabilization_s=5.0,
        test_duration_s=20.0,
        ceiling_s=35.0,
        stability_threshold=15.0,
    )


def _quick_profile() -> BenchProfile:
    return BenchProfile(
        name="quick",
        description="Short sweep across everyday entity counts",
        scenarios=[
            Scenario("Light", 99),
            Scenario("Small", 333),
            Scenario("Medium", 666),
            Scenario("Default", 888),
            Scenario("Large", 1200),
            Scenario("Heavy", 1500),
        ],
        stabilization_s=3.0,
        test_duration_s=15.0,
        stability_threshold=30.0,
        load_param="val",
    )


_PROFILES = {
    "benchmark": _benchmark_profile,
    "stress": _stress_profile,
    "conservative": _conservative_profile,
    "quick": _quick_profile,
}


def get_profile(name: str) -> BenchProfile:
    """Create a fresh copy of the named profile."""
    try:
        return _PROFILES[name]()
    except KeyError:
        raise ValueError(f"Unknown profile: {name}. Available: {', '.join(_PROFILES)}") from None


def get_available_profiles() -> list[str]:
    """Get list of available profile names."""
    return list(_PROFILES)
