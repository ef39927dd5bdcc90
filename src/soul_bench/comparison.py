#!/usr/bin/env python3
"""
Rendering-mode comparison.

Pairs results for the same load across two rendering modes (e.g., individual meshes
vs GPU instancing) and reports the relative change.
"""

from dataclasses import dataclass
from typing import Any

from .benchmark_results import RunResult


def percent_change(before: float, after: float) -> float | None:
    """Relative change from ``before`` to ``after`` in percent, None when undefined."""
    if not before:
        return None
    return (after - before) / before * 100


@dataclass(frozen=True)
class LoadComparison:
    load: int
    baseline_fps: float
    candidate_fps: float
    fps_improvement: float | None
    draw_call_reduction: float | None
    memory_change: float | None
    stability_delta: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "load": self.load,
            "baseline_fps": self.baseline_fps,
            "candidate_fps": self.candidate_fps,
            "fps_improvement": self.fps_improvement,
            "draw_call_reduction": self.draw_call_reduction,
            "memory_change": self.memory_change,
            "stability_delta": self.stability_delta,
        }


@dataclass(frozen=True)
class ModeComparison:
    baseline_mode: str
    candidate_mode: str
    loads: list[LoadComparison]
    avg_fps_improvement: float
    avg_draw_call_reduction: float
    targets_met: int
    success: bool
    recommendation: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "baseline_mode": self.baseline_mode,
            "candidate_mode": self.candidate_mode,
            "loads": [c.to_dict() for c in self.loads],
            "avg_fps_improvement": self.avg_fps_improvement,
            "avg_draw_call_reduction": self.avg_draw_call_reduction,
            "targets_met": self.targets_met,
            "success": self.success,
            "recommendation": self.recommendation,
        }


def recommend(fps_improvement: float, draw_call_reduction: float) -> str:
    if fps_improvement > 20 and draw_call_reduction > 90:
        return "EXCELLENT: exceeds all targets. Ready for production."
    if fps_improvement > 10 and draw_call_reduction > 80:
        return "GOOD: meets targets. Suitable for production deployment."
    if fps_improvement > 0 and draw_call_reduction > 50:
        return "MODERATE: shows improvement but below targets. Consider optimization."
    return "POOR: needs significant optimization before deployment."


def compare_modes(
    results: list[RunResult],
    baseline_mode: str,
    candidate_mode: str,
    target_load: int = 2000,
    target_fps: float = 50.0,
) -> ModeComparison | None:
    """
    Compare successful runs of two modes at matching loads.

    Loads where either mode failed are left out. Returns None when no load has a
    successful run in both modes.
    """
    baseline = {r.scenario.load: r for r in results if r.is_success and r.scenario.mode == baseline_mode}
    candidate = {r.scenario.load: r for r in results if r.is_success and r.scenario.mode == candidate_mode}
    loads = sorted(set(baseline) & set(candidate))
    if not loads:
        return None

    rows = []
    for load in loads:
        before, after = baseline[load], candidate[load]
        rows.append(
            LoadComparison(
                load=load,
                baseline_fps=before.mean_fps,
                candidate_fps=after.mean_fps,
                fps_improvement=percent_change(before.mean_fps, after.mean_fps),
                draw_call_reduction=(
                    -percent_change(before.draw_calls, after.draw_calls)
                    if before.draw_calls and after.draw_calls is not None
                    else None
                ),
                memory_change=percent_change(before.memory_mb, after.memory_mb),
                stability_delta=after.stability - before.stability,
            )
        )

    fps_values = [r.fps_improvement for r in rows if r.fps_improvement is not None]
    draw_values = [r.draw_call_reduction for r in rows if r.draw_call_reduction is not None]
    avg_fps = sum(fps_values) / len(fps_values) if fps_values else 0.0
    avg_draw = sum(draw_values) / len(draw_values) if draw_values else 0.0
    targets_met = sum(1 for load in loads if load >= target_load and candidate[load].mean_fps >= target_fps)

    return ModeComparison(
        baseline_mode=baseline_mode,
        candidate_mode=candidate_mode,
        loads=rows,
        avg_fps_improvement=avg_fps,
        avg_draw_call_reduction=avg_draw,
        targets_met=targets_met,
        success=avg_fps > 10 and avg_draw > 80,
        recommendation=recommend(avg_fps, avg_draw),
    )
