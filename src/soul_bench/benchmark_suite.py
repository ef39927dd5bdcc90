#!/usr/bin/env python3
"""
Benchmark suite orchestration and execution.

Runs a profile's scenarios one at a time, each in its own page session, and turns
every outcome (including failures) into a RunResult.
"""

import time
from enum import Enum
from typing import Callable

from .aggregation import reduce_samples
from .benchmark_results import RunResult
from .classification import SuiteSummary, classify, pass_fail, summarize
from .comparison import ModeComparison, compare_modes
from .errors import CriticalInstability, DriverUnavailable, InstrumentationFailure, MeasurementTimeout, SoulBenchError
from .page_driver import PageDriver
from .probe import ProbeSnapshot, WindowOutcome
from .scenario import BenchProfile, Scenario
from .time_tracking import TimeLog


class ScenarioState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    STABILIZING = "stabilizing"
    MEASURING = "measuring"
    COLLECTED = "collected"
    SUCCESS = "success"
    FAILED = "failed"


class BenchmarkSuite:
    """
    Executes every scenario of a profile against one page driver.

    Scenarios run sequentially with a cooldown between them. A failing scenario is
    recorded and the loop moves on; only a driver failure stops the suite.
    """

    def __init__(
        self,
        driver: PageDriver,
        profile: BenchProfile,
        base_url: str,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.driver = driver
        self.profile = profile
        self.base_url = base_url
        self.sleep = sleep
        self.clock = clock
        self.stability = profile.stability_strategy()
        self.results: list[RunResult] = []
        self.state = ScenarioState.IDLE
        self.state_history: list[tuple[str, ScenarioState]] = []

    def _enter(self, scenario: Scenario, state: ScenarioState) -> None:
        self.state = state
        self.state_history.append((scenario.name, state))

    def execute_scenario(self, scenario: Scenario) -> RunResult:
        """Run one scenario from navigation to classification."""
        profile = self.profile
        time_log = TimeLog(clock=self.clock)
        notes: list[str] = []
        url = profile.build_url(self.base_url, scenario)

        print(f"\n🚀 {scenario.name}: {scenario.load} entities ({scenario.mode})")
        print("-" * 60)

        self._enter(scenario, ScenarioState.LOADING)
        session = self.driver.open_session()
        try:
            start_time = time_log.start_timer()
            session.navigate(url, profile.navigation_timeout_s)
            time_log.navigation = time_log.end_timer(start_time)
            print(f"📡 Loaded: {url}")

            self._enter(scenario, ScenarioState.STABILIZING)
            print(f"⏱️  Stabilizing for {profile.stabilization_s:g}s...")
            start_time = time_log.start_timer()
            session.wait(profile.stabilization_s)
            session.reset_probe()
            time_log.stabilization = time_log.end_timer(start_time)

            self._enter(scenario, ScenarioState.MEASURING)
            ceiling = profile.effective_ceiling()
            print(f"📊 Measuring for {profile.test_duration_s:g}s...")
            window_start = time_log.start_timer()
            outcome: WindowOutcome | None
            try:
                outcome = session.await_window(profile.test_duration_s, profile.critical_rate, ceiling)
            except InstrumentationFailure as e:
                notes.append(str(e))
                print(f"⚠️  {e}; falling back to a passive wait")
                outcome = None
                session.wait(profile.test_duration_s)
            time_log.measurement = time_log.end_timer(window_start)

            start_time = time_log.start_timer()
            snapshot = session.snapshot()
            time_log.snapshot = time_log.end_timer(start_time)
            if time_log.end_timer(window_start) > ceiling:
                raise MeasurementTimeout(f"measurement exceeded {ceiling:g}s ceiling")
            self._enter(scenario, ScenarioState.COLLECTED)
        finally:
            start_time = time_log.start_timer()
            session.close()
            time_log.page_cleanup = time_log.end_timer(start_time)

        result = self._build_result(scenario, snapshot, outcome, time_log, notes)
        self._enter(scenario, ScenarioState.SUCCESS)
        return result

    def _build_result(
        self,
        scenario: Scenario,
        snapshot: ProbeSnapshot,
        outcome: WindowOutcome | None,
        time_log: TimeLog,
        notes: list[str],
    ) -> RunResult:
        profile = self.profile
        elapsed = outcome.elapsed_s if outcome else snapshot.elapsed_s
        statistics = reduce_samples(
            snapshot.samples,
            self.stability,
            peak_memory_bytes=snapshot.peak_memory_used,
            frame_count=snapshot.frame_count or len(snapshot.samples),
            elapsed_s=elapsed,
            critical_rate=profile.critical_rate,
            unstable_rate=profile.unstable_rate,
        )

        if snapshot.degraded:
            notes.append(f"degraded snapshot: {snapshot.error}")
            print(f"⚠️  Degraded snapshot: {snapshot.error}")
        if statistics.critical:
            notes.append(str(CriticalInstability(statistics.min_fps, profile.critical_rate)))

        if snapshot.app_draw_calls is not None:
            draw_calls, draw_calls_source = snapshot.app_draw_calls, "measured"
        else:
            draw_calls, draw_calls_source = scenario.expected_draw_calls(), "expected"

        result = RunResult.success(
            scenario,
            statistics,
            classify(statistics.mean_fps, statistics.stable),
            verdict=pass_fail(statistics.mean_fps, scenario.expected_rate),
            draw_calls=draw_calls,
            draw_calls_source=draw_calls_source,
            observed_load=snapshot.observed_load,
            app_reported_fps=snapshot.app_fps,
            terminated_early=bool(outcome and outcome.critical),
            degraded=snapshot.degraded,
            notes=tuple(notes),
            timings=time_log.to_dict(),
        )

        stable_text = "STABLE" if statistics.stable else "UNSTABLE"
        print(
            f"📊 Results: {statistics.mean_fps:.1f} FPS | {statistics.stability * 100:.1f}% stable | "
            f"{statistics.peak_memory_mb:.1f}MB | {draw_calls} draw calls ({draw_calls_source})"
        )
        critical_text = " | CRITICAL (window ended early)" if result.terminated_early else ""
        verdict_text = f" | {result.verdict}" if result.verdict else ""
        print(f"🎯 Status: {result.classification.value} | {stable_text}{verdict_text}{critical_text}")
        return result

    def run_scenario(self, scenario: Scenario) -> RunResult:
        """Run one scenario, converting any scenario-level error into a failed result."""
        try:
            result = self.execute_scenario(scenario)
        except DriverUnavailable:
            raise
        except SoulBenchError as e:
            result = self._failed(scenario, str(e))
        except Exception as e:
            result = self._failed(scenario, f"{type(e).__name__}: {e}")
        self.results.append(result)
        return result

    def _failed(self, scenario: Scenario, error: str) -> RunResult:
        self._enter(scenario, ScenarioState.FAILED)
        print(f"❌ {scenario.name} failed: {error}")
        return RunResult.failure(scenario, error)

    def execute_all(self) -> list[RunResult]:
        """Execute all scenarios of the profile in order."""
        scenarios = self.profile.expand_scenarios()
        for index, scenario in enumerate(scenarios):
            self.run_scenario(scenario)
            if index < len(scenarios) - 1 and self.profile.cooldown_s > 0:
                self.sleep(self.profile.cooldown_s)
        self.state = ScenarioState.IDLE
        return self.results

    def summarize(self) -> SuiteSummary:
        """Summarize results; capacity figures follow the candidate mode of a two-mode profile."""
        capacity_mode = self.profile.modes[1] if len(self.profile.modes) == 2 else None
        return summarize(self.results, capacity_mode)

    def compare(self) -> ModeComparison | None:
        """Compare rendering modes when the profile measured exactly two."""
        if len(self.profile.modes) != 2:
            return None
        baseline, candidate = self.profile.modes
        return compare_modes(self.results, baseline, candidate)

    def print_results(self) -> None:
        """Print a table of all results."""
        print("\n📊 BENCHMARK RESULTS")
        print("=" * 95)
        print(f"{'Scenario':<28} {'Load':>7} {'Mode':<11} {'FPS':>7} {'Stab %':>7} {'Mem MB':>8} {'Status':<12}")
        print("-" * 95)
        for r in self.results:
            if r.is_success:
                print(
                    f"{r.scenario.name:<28} {r.scenario.load:>7} {r.scenario.mode:<11} "
                    f"{r.mean_fps:>7.1f} {r.stability * 100:>7.1f} {r.memory_mb:>8.1f} {r.classification.value:<12}"
                )
            else:
                print(
                    f"{r.scenario.name:<28} {r.scenario.load:>7} {r.scenario.mode:<11} "
                    f"{'-':>7} {'-':>7} {'-':>8} {r.classification.value:<12}"
                )
