"""Scripted page driver and shared fixtures for the suite tests."""
from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from soul_bench.errors import DriverUnavailable, InstrumentationFailure, NavigationFailure
from soul_bench.page_driver import PageDriver, PageSession
from soul_bench.probe import ProbeSnapshot, WindowOutcome
from soul_bench.scenario import BenchProfile, Scenario


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class PageScript:
    """What a fake page does for one scenario."""

    samples: list[float] = field(default_factory=lambda: [60.0] * 1200)
    navigate_error: bool = False
    window_error: bool = False
    degraded_snapshot: bool = False
    extra_window_seconds: float = 0.0
    peak_memory_used: int = 0
    app_draw_calls: int | None = None
    observed_load: int | None = None


class FakeSession(PageSession):
    def __init__(self, driver: FakeDriver, script: PageScript):
        self.driver = driver
        self.script = script
        self.urls: list[str] = []
        self.resets = 0
        self.collected: list[float] = []
        self.elapsed = 0.0
        self.closed = False

    def navigate(self, url: str, timeout_s: float) -> None:
        self.urls.append(url)
        if self.script.navigate_error:
            self.driver.clock.advance(timeout_s)
            raise NavigationFailure(f"navigation to {url} timed out after {timeout_s:g}s")

    def wait(self, seconds: float) -> None:
        self.driver.clock.advance(seconds)

    def reset_probe(self) -> None:
        self.resets += 1
        self.collected = []

    def await_window(self, duration_s: float, critical_rate: float, ceiling_s: float) -> WindowOutcome:
        if self.script.window_error:
            raise InstrumentationFailure("measurement window failed: probe missing")
        samples = self.script.samples
        critical_index = next((i for i, s in enumerate(samples) if s < critical_rate), None)
        if critical_index is None:
            self.collected = list(samples)
            self.elapsed = duration_s
        else:
            self.collected = list(samples[: critical_index + 1])
            self.elapsed = duration_s * (critical_index + 1) / len(samples)
        self.driver.clock.advance(self.elapsed + self.script.extra_window_seconds)
        return WindowOutcome(
            elapsed_s=self.elapsed,
            critical=critical_index is not None,
            critical_sample=samples[critical_index] if critical_index is not None else None,
        )

    def snapshot(self) -> ProbeSnapshot:
        if self.script.degraded_snapshot:
            return ProbeSnapshot.degraded_empty("snapshot failed: Target crashed")
        return ProbeSnapshot(
            samples=list(self.collected),
            frame_count=len(self.collected),
            elapsed_s=self.elapsed,
            peak_memory_used=self.script.peak_memory_used,
            app_draw_calls=self.script.app_draw_calls,
            observed_load=self.script.observed_load,
        )

    def close(self) -> None:
        self.closed = True


class FakeDriver(PageDriver):
    """Hands out scripted sessions, one per scenario, in order."""

    def __init__(self, scripts: list[PageScript] | None = None, default: PageScript | None = None, fail_start=False):
        self.scripts = list(scripts or [])
        self.default = default or PageScript()
        self.fail_start = fail_start
        self.clock = FakeClock()
        self.sessions: list[FakeSession] = []
        self.started = False
        self.closed = False

    def get_driver_name(self) -> str:
        return "fake"

    def start(self) -> None:
        if self.fail_start:
            raise DriverUnavailable("could not launch chromium: executable missing")
        self.started = True

    def open_session(self) -> FakeSession:
        script = self.scripts.pop(0) if self.scripts else self.default
        session = FakeSession(self, script)
        self.sessions.append(session)
        return session

    def system_info(self) -> dict:
        return {"driver": "fake", "hardwareConcurrency": 8}

    def close(self) -> None:
        self.closed = True


def make_profile(**overrides) -> BenchProfile:
    settings = dict(
        name="unit",
        description="unit test profile",
        scenarios=[Scenario("Small", 100), Scenario("Large", 1000)],
        stabilization_s=5.0,
        test_duration_s=20.0,
        cooldown_s=2.0,
        ceiling_s=35.0,
        stability_method="threshold",
        stability_threshold=15.0,
    )
    settings.update(overrides)
    return BenchProfile(**settings)


@pytest.fixture
def profile() -> BenchProfile:
    return make_profile()
