#!/usr/bin/env python3
"""
Run classification and cross-scenario summary.

Maps statistics to performance classes and reduces a list of run results to an
overall verdict with a recommendation.
"""

from dataclasses import dataclass
from typing import Any

from .benchmark_results import Classification, RunResult

POOR_BELOW = 15.0
DEGRADED_BELOW = 30.0
ACCEPTABLE_BELOW = 60.0

# Mean fps below which a stable run still counts as the breaking point
BREAKING_POINT_FPS = 30.0

FAILING_CLASSES = (Classification.POOR, Classification.CRITICAL)


def classify(mean_fps: float, stable: bool) -> Classification:
    """First match wins: instability, then mean-fps bands."""
    if not stable:
        return Classification.CRITICAL
    if mean_fps < POOR_BELOW:
        return Classification.POOR
    if mean_fps < DEGRADED_BELOW:
        return Classification.DEGRADED
    if mean_fps < ACCEPTABLE_BELOW:
        return Classification.ACCEPTABLE
    return Classification.EXCELLENT


def pass_fail(mean_fps: float, expected_rate: float | None) -> str | None:
    if expected_rate is None:
        return None
    return "PASS" if mean_fps >= expected_rate else "FAIL"


def overall_verdict(results: list[RunResult]) -> str:
    """Qualitative verdict from the share of excellent and failing runs."""
    if not results:
        return "NO_DATA"
    total = len(results)
    excellent = sum(1 for r in results if r.classification is Classification.EXCELLENT)
    failing = sum(1 for r in results if r.classification in FAILING_CLASSES)

    if failing == 0 and excellent > total * 0.8:
        return "OUTSTANDING"
    if failing == 0:
        return "EXCELLENT"
    if failing < total * 0.3:
        return "GOOD"
    if failing < total * 0.6:
        return "CONCERNING"
    return "CRITICAL"


RECOMMENDATIONS = {
    "OUTSTANDING": [
        "Implementation is production-ready for extreme scale deployments.",
        "Consider making this the default rendering mode for all entity counts.",
    ],
    "EXCELLENT": [
        "Implementation is production-ready for extreme scale deployments.",
        "Consider making this the default rendering mode for all entity counts.",
    ],
    "GOOD": [
        "Implementation is solid for production use.",
        "Consider optimizations for extreme scale scenarios.",
    ],
    "CONCERNING": ["Additional optimization may be needed before extreme scale deployment."],
    "CRITICAL": ["Additional optimization may be needed before extreme scale deployment."],
    "NO_DATA": ["No valid results were collected; check that the target server is running."],
}


@dataclass(frozen=True)
class SuiteSummary:
    """Cross-scenario summary of a benchmark run."""

    total_scenarios: int
    successful: int
    errors: int
    average_fps: float
    average_stability: float
    average_memory_mb: float
    max_stable_load: int | None
    breaking_point: int | None
    verdict: str
    recommendations: tuple[str, ...]
    analysis: tuple[str, ...]
    capacity_mode: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_scenarios": self.total_scenarios,
            "successful": self.successful,
            "errors": self.errors,
            "average_fps": self.average_fps,
            "average_stability": self.average_stability,
            "average_memory_mb": self.average_memory_mb,
            "max_stable_load": self.max_stable_load,
            "breaking_point": self.breaking_point,
            "verdict": self.verdict,
            "recommendations": list(self.recommendations),
            "analysis": list(self.analysis),
            "capacity_mode": self.capacity_mode,
        }


def _analysis(max_stable_load: int | None, breaking_point: int | None) -> list[str]:
    lines = []
    if max_stable_load is None:
        lines.append("No scenario ran stably.")
    elif max_stable_load >= 10000:
        lines.append("EXCEPTIONAL: handles extreme entity counts (10,000+) with stability.")
    elif max_stable_load >= 5000:
        lines.append("EXCELLENT: performs well at high entity counts (5,000+).")
    elif max_stable_load >= 3000:
        lines.append("GOOD: handles moderately high loads (3,000+).")
    else:
        lines.append("CONCERNING: may struggle with high entity counts.")

    if breaking_point is not None:
        lines.append(f"Breaking point identified: performance degrades around {breaking_point} entities.")
    else:
        lines.append("No breaking point found: stable across all tested scenarios.")
    return lines


def summarize(results: list[RunResult], capacity_mode: str | None = None) -> SuiteSummary:
    """
    Aggregate per-scenario results; errored runs count only toward totals.

    When ``capacity_mode`` is given, max stable load and breaking point only look at
    runs in that rendering mode, so the safety margin matches the recommended mode.
    """
    valid = [r for r in results if r.is_success]
    count = len(valid)

    capacity_runs = [r for r in valid if capacity_mode is None or r.scenario.mode == capacity_mode]
    stable_loads = [r.scenario.load for r in capacity_runs if r.is_stable]
    max_stable_load = max(stable_loads) if stable_loads else None
    breaking = next((r for r in capacity_runs if not r.is_stable or r.mean_fps < BREAKING_POINT_FPS), None)
    breaking_point = breaking.scenario.load if breaking else None

    verdict = overall_verdict(valid)
    recommendations = list(RECOMMENDATIONS[verdict])
    mode_text = f" in {capacity_mode} mode" if capacity_mode else ""
    if breaking_point is not None and breaking_point < 5000:
        recommendations.append(
            f"Limit entity count to {int(breaking_point * 0.8)}{mode_text} for a safety margin."
        )

    return SuiteSummary(
        total_scenarios=len(results),
        successful=count,
        errors=len(results) - count,
        average_fps=sum(r.mean_fps for r in valid) / count if count else 0.0,
        average_stability=sum(r.stability for r in valid) / count if count else 0.0,
        average_memory_mb=sum(r.memory_mb for r in valid) / count if count else 0.0,
        max_stable_load=max_stable_load,
        breaking_point=breaking_point,
        verdict=verdict,
        recommendations=tuple(recommendations),
        analysis=tuple(_analysis(max_stable_load, breaking_point)) if count else (),
        capacity_mode=capacity_mode,
    )
