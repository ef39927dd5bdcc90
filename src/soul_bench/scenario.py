#!/usr/bin/env python3
"""
Scenario and profile configuration.

Defines the Scenario (one benchmark case) and the BenchProfile that bundles a
scenario table with the timing contract and stability method used to measure it.
"""

from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import urlencode, urlsplit, urlunsplit

from .aggregation import StabilityStrategy, create_stability_strategy

# Draw calls an instanced renderer issues regardless of load (human, gpt, dewa meshes)
INSTANCED_DRAW_CALLS = 3


@dataclass(frozen=True)
class Scenario:
    """One configured benchmark case."""

    name: str  # e.g., "Phase3 Target"
    load: int  # simulated entity count
    mode: str = "instanced"  # "instanced", "individual"
    expected_rate: float | None = None  # PASS/FAIL threshold in fps

    def expected_draw_calls(self) -> int:
        """Configured draw-call expectation for this rendering mode."""
        if self.mode == "individual":
            return self.load
        return INSTANCED_DRAW_CALLS

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "load": self.load,
            "mode": self.mode,
            "expected_rate": self.expected_rate,
        }


@dataclass
class BenchProfile:
    """
    Configuration for one benchmark invocation.

    The same runner drives every profile; profiles differ only in their scenario
    table, timing and stability method.
    """

    name: str  # e.g., "stress", "benchmark"
    description: str
    scenarios: list[Scenario]
    modes: list[str] = field(default_factory=lambda: ["instanced"])

    # Timing (seconds)
    navigation_timeout_s: float = 30.0
    stabilization_s: float = 5.0
    test_duration_s: float = 20.0
    cooldown_s: float = 2.0
    ceiling_s: float = 35.0

    # Thresholds (fps)
    critical_rate: float = 1.0
    unstable_rate: float = 10.0
    stability_method: str = "threshold"  # "threshold", "dispersion"
    stability_threshold: float | None = 15.0

    # Target page URL parameters
    load_param: str = "souls"
    mode_param: str = "mode"
    extra_params: dict[str, str] = field(default_factory=dict)

    def stability_strategy(self) -> StabilityStrategy:
        return create_stability_strategy(self.stability_method, self.stability_threshold)

    def effective_ceiling(self) -> float:
        """Hard ceiling for measurement plus snapshot, never shorter than the window."""
        return max(self.ceiling_s, self.test_duration_s + 5.0)

    def expand_scenarios(self) -> list[Scenario]:
        """Scenario list crossed with the profile's rendering modes, mode-major."""
        return [replace(scenario, mode=mode) for mode in self.modes for scenario in self.scenarios]

    def build_url(self, base_url: str, scenario: Scenario) -> str:
        """Target URL with the scenario's load and mode as query parameters."""
        parts = urlsplit(base_url)
        params = {self.load_param: str(scenario.load), self.mode_param: scenario.mode}
        params.update(self.extra_params)
        query = "&".join(q for q in (parts.query, urlencode(params)) if q)
        path = parts.path or "/"
        return urlunsplit((parts.scheme, parts.netloc, path, query, parts.fragment))

    def with_overrides(self, **overrides: Any) -> "BenchProfile":
        """Copy of the profile with any non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "description": self.description,
            "modes": self.modes,
            "scenarios": [s.to_dict() for s in self.scenarios],
            "navigation_timeout_s": self.navigation_timeout_s,
            "stabilization_s": self.stabilization_s,
            "test_duration_s": self.test_duration_s,
            "cooldown_s": self.cooldown_s,
            "ceiling_s": self.effective_ceiling(),
            "critical_rate": self.critical_rate,
            "unstable_rate": self.unstable_rate,
            "stability": self.stability_strategy().describe(),
            "load_param": self.load_param,
            "mode_param": self.mode_param,
            "extra_params": self.extra_params,
        }
