#!/usr/bin/env python3
"""
Report persistence.

Writes the run as a JSON record (timestamped archive plus a "latest" copy) and a
Markdown report. Every file goes to a temporary sibling first and is moved into
place with ``os.replace``, so a reader never sees a half-written report.
"""

import json
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .benchmark_results import RunResult
from .classification import SuiteSummary
from .comparison import ModeComparison
from .errors import PersistenceFailure
from .scenario import BenchProfile

COMPLETION_MARKER = "<!-- soul-bench report complete -->"


@dataclass
class BenchmarkReport:
    """Everything persisted for one benchmark invocation."""

    profile: BenchProfile
    results: list[RunResult]
    summary: SuiteSummary
    comparison: ModeComparison | None = None
    system_info: dict[str, Any] = field(default_factory=dict)
    base_url: str = ""
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "generated_at": self.generated_at.isoformat(),
            "base_url": self.base_url,
            "profile": self.profile.to_dict(),
            "system_info": self.system_info,
            "results": [r.to_dict() for r in self.results],
            "summary": self.summary.to_dict(),
            "comparison": self.comparison.to_dict() if self.comparison else None,
            "complete": True,
        }


def atomic_write(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` via a temp file in the same directory."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def _fmt(value: float | None, suffix: str = "", digits: int = 1) -> str:
    if value is None:
        return "N/A"
    return f"{value:.{digits}f}{suffix}"


def _or(value: int | None, missing: str) -> str:
    return str(value) if value is not None else missing


def _result_row(r: RunResult) -> str:
    s = r.scenario
    if not r.is_success:
        return f"| {s.name} | {s.load} | {s.mode} | ERROR | ERROR | ERROR | ERROR | {r.classification.value} |"
    status = "STABLE" if r.is_stable else "UNSTABLE"
    if r.verdict:
        status = f"{status} / {r.verdict}"
    return (
        f"| {s.name} | {s.load} | {s.mode} | {r.mean_fps:.1f} | {r.stability * 100:.1f}% | "
        f"{r.memory_mb:.1f} | {status} | {r.classification.value} |"
    )


def render_markdown(report: BenchmarkReport) -> str:
    """Render the human-readable report."""
    profile, summary = report.profile, report.summary
    capacity = f" ({summary.capacity_mode} mode)" if summary.capacity_mode else ""
    lines = [
        f"# Soul Recycling Simulation: {profile.name} benchmark report",
        "",
        f"**Generated:** {report.generated_at.strftime('%Y-%m-%d %H:%M:%S %Z')}  ",
        f"**Target:** {report.base_url}  ",
        f"**Profile:** {profile.description}  ",
        f"**Window:** {profile.test_duration_s:g}s per scenario after {profile.stabilization_s:g}s stabilization  ",
        f"**Stability method:** {profile.stability_strategy().describe()}",
        "",
        "## Executive Summary",
        "",
        f"**Overall Assessment:** {summary.verdict}  ",
        f"**Maximum Stable Load:** {_or(summary.max_stable_load, 'N/A')}{capacity}  ",
        f"**Breaking Point:** {_or(summary.breaking_point, 'Not Found')}{capacity}",
        "",
        f"- **Average FPS:** {summary.average_fps:.1f}",
        f"- **Average Stability:** {summary.average_stability * 100:.1f}%",
        f"- **Average Memory:** {summary.average_memory_mb:.1f}MB",
        f"- **Successful Tests:** {summary.successful}/{summary.total_scenarios}",
        "",
        "## Detailed Results",
        "",
        "| Scenario | Load | Mode | Avg FPS | Stability | Memory (MB) | Status | Assessment |",
        "|----------|------|------|---------|-----------|-------------|--------|------------|",
    ]
    lines.extend(_result_row(r) for r in report.results)

    failures = [r for r in report.results if not r.is_success or r.notes]
    if failures:
        lines += ["", "### Errors and Notes", ""]
        for r in failures:
            for message in ([r.error] if r.error else []) + list(r.notes):
                lines.append(f"- **{r.scenario.name} ({r.scenario.mode})**: {message}")

    if report.comparison:
        c = report.comparison
        lines += [
            "",
            f"## Mode Comparison: {c.baseline_mode} vs {c.candidate_mode}",
            "",
            "| Load | Baseline FPS | Candidate FPS | FPS Change | Draw Call Reduction | Memory Change |",
            "|------|--------------|---------------|------------|---------------------|---------------|",
        ]
        for row in c.loads:
            lines.append(
                f"| {row.load} | {row.baseline_fps:.1f} | {row.candidate_fps:.1f} | "
                f"{_fmt(row.fps_improvement, '%')} | {_fmt(row.draw_call_reduction, '%')} | "
                f"{_fmt(row.memory_change, '%')} |"
            )
        lines += [
            "",
            f"- **Average FPS Improvement:** {c.avg_fps_improvement:.1f}%",
            f"- **Average Draw Call Reduction:** {c.avg_draw_call_reduction:.1f}%",
            f"- **Recommendation:** {c.recommendation}",
        ]

    lines += ["", "## Analysis", ""]
    lines.extend(f"- {line}" for line in summary.analysis)
    lines += ["", "## Recommendations", ""]
    lines.extend(f"- {line}" for line in summary.recommendations)
    lines += [
        "",
        "## System Information",
        "",
        "```json",
        json.dumps(report.system_info, indent=2),
        "```",
        "",
        COMPLETION_MARKER,
        "",
    ]
    return "\n".join(lines)


def write_reports(report: BenchmarkReport, output_dir: Path) -> list[Path]:
    """
    Persist the report and return the written paths.

    Raises PersistenceFailure when any file cannot be written.
    """
    stamp = report.generated_at.strftime("%Y-%m-%dT%H-%M-%S-%fZ")
    name = report.profile.name
    payload = json.dumps(report.to_dict(), indent=2)
    targets = [
        (output_dir / f"{name}-{stamp}.json", payload),
        (output_dir / f"{name}-latest.json", payload),
        (output_dir / f"{name}-report.md", render_markdown(report)),
    ]
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        for path, content in targets:
            atomic_write(path, content)
    except OSError as e:
        raise PersistenceFailure(f"could not write report to {output_dir}: {e}") from e
    return [path for path, _ in targets]
