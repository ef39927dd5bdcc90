"""End-to-end tests for soul_bench.benchmark_suite against scripted pages."""
from __future__ import annotations

import pytest
from conftest import FakeDriver, PageScript, make_profile

from soul_bench.benchmark_results import Classification, RunStatus
from soul_bench.benchmark_suite import BenchmarkSuite, ScenarioState
from soul_bench.scenario import Scenario

BASE_URL = "http://localhost:5173"


def _suite(driver: FakeDriver, profile=None, sleeps: list[float] | None = None) -> BenchmarkSuite:
    sleeps = sleeps if sleeps is not None else []
    return BenchmarkSuite(
        driver,
        profile or make_profile(),
        BASE_URL,
        sleep=sleeps.append,
        clock=driver.clock,
    )


# ── steady scenarios ─────────────────────────────────────────────────────────

@pytest.mark.parametrize("method, threshold", [("threshold", 15.0), ("dispersion", None)])
def test_constant_sixty_fps_is_excellent(method, threshold):
    profile = make_profile(
        scenarios=[Scenario("Steady", 500)],
        stability_method=method,
        stability_threshold=threshold,
    )
    driver = FakeDriver(default=PageScript(samples=[60.0] * 1200))
    result = _suite(driver, profile).run_scenario(profile.scenarios[0])

    assert result.status is RunStatus.SUCCESS
    assert result.error is None
    assert result.mean_fps == pytest.approx(60.0)
    assert result.stability == 1.0
    assert result.classification is Classification.EXCELLENT
    assert result.statistics.peak_memory_mb == 0
    assert result.statistics.elapsed_s == pytest.approx(20.0)
    assert not result.terminated_early


def test_probe_is_reset_after_stabilization_and_session_closed():
    driver = FakeDriver()
    suite = _suite(driver)
    suite.run_scenario(Scenario("Small", 100))

    session = driver.sessions[0]
    assert session.resets == 1
    assert session.closed
    assert session.urls == [f"{BASE_URL}/?souls=100&mode=instanced"]


def test_state_transitions_in_order():
    driver = FakeDriver()
    suite = _suite(driver)
    suite.run_scenario(Scenario("Small", 100))
    assert [state for _, state in suite.state_history] == [
        ScenarioState.LOADING,
        ScenarioState.STABILIZING,
        ScenarioState.MEASURING,
        ScenarioState.COLLECTED,
        ScenarioState.SUCCESS,
    ]


def test_timings_recorded():
    driver = FakeDriver()
    result = _suite(driver).run_scenario(Scenario("Small", 100))
    assert result.timings["stabilization"] == pytest.approx(5.0)
    assert result.timings["measurement"] == pytest.approx(20.0)
    assert result.timings["total"] >= 25.0


# ── critical collapse ────────────────────────────────────────────────────────

def test_collapse_below_one_fps_ends_window_early():
    samples = [60.0, 60.0, 60.0, 60.0, 0.5] + [60.0] * 95
    driver = FakeDriver(default=PageScript(samples=samples))
    result = _suite(driver).run_scenario(Scenario("Collapse", 5000))

    assert result.is_success
    assert result.terminated_early
    assert result.classification is Classification.CRITICAL
    assert result.statistics.critical
    assert result.statistics.frame_count == 5
    assert result.statistics.elapsed_s < 20.0
    assert any("collapsed" in note for note in result.notes)


# ── failures ─────────────────────────────────────────────────────────────────

def test_navigation_timeout_is_recorded_and_next_scenario_runs():
    driver = FakeDriver(scripts=[PageScript(navigate_error=True), PageScript(samples=[60.0] * 600)])
    suite = _suite(driver)
    results = suite.execute_all()

    assert len(results) == 2
    failed, ok = results
    assert failed.status is RunStatus.FAILED
    assert failed.classification is Classification.ERROR
    assert "timed out" in failed.error
    assert failed.statistics is None
    assert ok.status is RunStatus.SUCCESS
    assert ok.classification is Classification.EXCELLENT
    assert ok.scenario.load == 1000
    assert all(s.closed for s in driver.sessions)


def test_measurement_over_ceiling_fails_scenario():
    driver = FakeDriver(default=PageScript(extra_window_seconds=30.0))
    result = _suite(driver).run_scenario(Scenario("Hung", 100))
    assert result.status is RunStatus.FAILED
    assert "ceiling" in result.error
    assert driver.sessions[0].closed


def test_degraded_snapshot_still_completes():
    driver = FakeDriver(default=PageScript(degraded_snapshot=True))
    result = _suite(driver).run_scenario(Scenario("Glitchy", 100))
    assert result.status is RunStatus.SUCCESS
    assert result.degraded
    assert result.error is None
    assert any("Target crashed" in note for note in result.notes)


def test_window_instrumentation_failure_falls_back_to_passive_wait():
    driver = FakeDriver(default=PageScript(window_error=True))
    result = _suite(driver).run_scenario(Scenario("NoProbe", 100))
    assert result.is_success
    assert any("probe missing" in note for note in result.notes)
    assert result.timings["measurement"] == pytest.approx(20.0)


# ── loop behaviour ───────────────────────────────────────────────────────────

def test_cooldown_between_scenarios_only():
    sleeps: list[float] = []
    driver = FakeDriver()
    profile = make_profile(scenarios=[Scenario("a", 1), Scenario("b", 2), Scenario("c", 3)])
    _suite(driver, profile, sleeps).execute_all()
    assert sleeps == [2.0, 2.0]


def test_each_scenario_gets_its_own_session():
    driver = FakeDriver()
    _suite(driver).execute_all()
    assert len(driver.sessions) == 2
    assert driver.sessions[0] is not driver.sessions[1]


def test_verdict_against_expected_rate():
    profile = make_profile(
        scenarios=[Scenario("Target", 1000, expected_rate=60), Scenario("Tough", 2000, expected_rate=50)]
    )
    driver = FakeDriver(scripts=[PageScript(samples=[58.0] * 100), PageScript(samples=[52.0] * 100)])
    first, second = _suite(driver, profile).execute_all()
    assert first.verdict == "FAIL"
    assert second.verdict == "PASS"


# ── draw calls ───────────────────────────────────────────────────────────────

def test_draw_calls_measured_when_page_reports_them():
    driver = FakeDriver(default=PageScript(app_draw_calls=7, observed_load=100))
    result = _suite(driver).run_scenario(Scenario("Small", 100))
    assert result.draw_calls == 7
    assert result.draw_calls_source == "measured"
    assert result.observed_load == 100


def test_draw_calls_fall_back_to_mode_expectation():
    driver = FakeDriver()
    suite = _suite(driver)
    individual = suite.run_scenario(Scenario("Small", 100, mode="individual"))
    instanced = suite.run_scenario(Scenario("Small", 100, mode="instanced"))
    assert (individual.draw_calls, individual.draw_calls_source) == (100, "expected")
    assert (instanced.draw_calls, instanced.draw_calls_source) == (3, "expected")


# ── summary / comparison ─────────────────────────────────────────────────────

def test_two_mode_profile_produces_comparison():
    profile = make_profile(scenarios=[Scenario("A", 1000), Scenario("B", 2000)], modes=["individual", "instanced"])
    driver = FakeDriver(
        scripts=[
            PageScript(samples=[40.0] * 100),
            PageScript(samples=[30.0] * 100),
            PageScript(samples=[60.0] * 100),
            PageScript(samples=[55.0] * 100),
        ]
    )
    suite = _suite(driver, profile)
    results = suite.execute_all()
    assert [(r.scenario.mode, r.scenario.load) for r in results] == [
        ("individual", 1000),
        ("individual", 2000),
        ("instanced", 1000),
        ("instanced", 2000),
    ]
    comparison = suite.compare()
    assert comparison is not None
    assert comparison.loads[0].fps_improvement == pytest.approx(50.0)
    assert comparison.loads[1].fps_improvement == pytest.approx(83.333, rel=1e-3)
    assert comparison.targets_met == 1
    assert comparison.success
    summary = suite.summarize()
    assert summary.capacity_mode == "instanced"
    assert summary.breaking_point is None
    assert summary.max_stable_load == 2000


def test_single_mode_profile_has_no_comparison():
    driver = FakeDriver()
    suite = _suite(driver)
    suite.execute_all()
    assert suite.compare() is None
    assert suite.summarize().successful == 2
