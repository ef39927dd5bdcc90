#!/usr/bin/env python3
"""
Benchmark results storage and metrics.

Contains the structured output data from completed scenario runs.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from .aggregation import RunStatistics
from .scenario import Scenario


class Classification(str, Enum):
    """Performance class of one run, ordered from worst to best."""

    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
    POOR = "POOR"
    DEGRADED = "DEGRADED"
    ACCEPTABLE = "ACCEPTABLE"
    EXCELLENT = "EXCELLENT"


class RunStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class RunResult:
    """
    Outcome of measuring one scenario.

    A result is either successful (statistics set, no error) or failed (error set,
    no statistics). Use ``success`` / ``failure`` to build one.
    """

    scenario: Scenario
    status: RunStatus
    classification: Classification
    statistics: RunStatistics | None = None
    error: str | None = None

    # PASS/FAIL against scenario.expected_rate, None when the scenario has no expectation
    verdict: str | None = None

    # Draw calls and where the figure came from ("measured" or "expected")
    draw_calls: int | None = None
    draw_calls_source: str | None = None

    # Page-reported values, when the target exposes them
    observed_load: int | None = None
    app_reported_fps: float | None = None

    terminated_early: bool = False
    degraded: bool = False
    notes: tuple[str, ...] = ()
    timings: dict[str, float | None] = field(default_factory=dict)
    timestamp: str = field(default_factory=utc_timestamp)

    def __post_init__(self):
        if self.status is RunStatus.SUCCESS and (self.statistics is None or self.error):
            raise ValueError("successful run requires statistics and no error")
        if self.status is RunStatus.FAILED and (self.statistics is not None or not self.error):
            raise ValueError("failed run requires an error and no statistics")

    @classmethod
    def success(
        cls, scenario: Scenario, statistics: RunStatistics, classification: Classification, **kwargs
    ) -> "RunResult":
        return cls(
            scenario=scenario,
            status=RunStatus.SUCCESS,
            classification=classification,
            statistics=statistics,
            **kwargs,
        )

    @classmethod
    def failure(cls, scenario: Scenario, error: str, **kwargs) -> "RunResult":
        return cls(
            scenario=scenario,
            status=RunStatus.FAILED,
            classification=Classification.ERROR,
            error=error,
            **kwargs,
        )

    @property
    def is_success(self) -> bool:
        return self.status is RunStatus.SUCCESS

    @property
    def is_stable(self) -> bool:
        return self.statistics is not None and self.statistics.stable

    @property
    def mean_fps(self) -> float:
        return self.statistics.mean_fps if self.statistics else 0.0

    @property
    def stability(self) -> float:
        return self.statistics.stability if self.statistics else 0.0

    @property
    def memory_mb(self) -> float:
        return self.statistics.peak_memory_mb if self.statistics else 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "scenario": self.scenario.to_dict(),
            "status": self.status.value,
            "classification": self.classification.value,
            "statistics": self.statistics.to_dict() if self.statistics else None,
            "error": self.error,
            "verdict": self.verdict,
            "draw_calls": self.draw_calls,
            "draw_calls_source": self.draw_calls_source,
            "observed_load": self.observed_load,
            "app_reported_fps": self.app_reported_fps,
            "terminated_early": self.terminated_early,
            "degraded": self.degraded,
            "notes": list(self.notes),
            "timings": self.timings,
            "timestamp": self.timestamp,
        }
