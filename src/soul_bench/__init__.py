#!/usr/bin/env python3
"""
Frame-rate benchmark harness for the Soul Recycling Simulation.

Drives the simulation in a real browser, samples frame rate and memory through an
in-page probe, and reduces each run to classified summary statistics and reports.
"""

from .aggregation import (
    DispersionStability,
    RunStatistics,
    StabilityStrategy,
    ThresholdStability,
    mean_rate,
    percentile,
    reduce_samples,
)
from .benchmark_results import Classification, RunResult, RunStatus
from .benchmark_runner import list_profiles, run_benchmarks
from .benchmark_suite import BenchmarkSuite, ScenarioState
from .classification import SuiteSummary, classify, overall_verdict, pass_fail, summarize
from .cli_parser import create_parser
from .comparison import ModeComparison, compare_modes
from .driver_factory import create_driver, get_available_browsers
from .page_driver import PageDriver, PageSession
from .probe import FrameProbe, ProbeSnapshot, WindowOutcome
from .profiles import get_available_profiles, get_profile
from .report_writer import BenchmarkReport, write_reports
from .scenario import BenchProfile, Scenario
from .time_tracking import TimeLog

__all__ = [
    "BenchProfile",
    "BenchmarkReport",
    "BenchmarkSuite",
    "Classification",
    "DispersionStability",
    "FrameProbe",
    "ModeComparison",
    "PageDriver",
    "PageSession",
    "ProbeSnapshot",
    "RunResult",
    "RunStatistics",
    "RunStatus",
    "Scenario",
    "ScenarioState",
    "StabilityStrategy",
    "SuiteSummary",
    "ThresholdStability",
    "TimeLog",
    "WindowOutcome",
    "classify",
    "compare_modes",
    "create_driver",
    "create_parser",
    "get_available_browsers",
    "get_available_profiles",
    "get_profile",
    "list_profiles",
    "mean_rate",
    "overall_verdict",
    "pass_fail",
    "percentile",
    "reduce_samples",
    "run_benchmarks",
    "summarize",
    "write_reports",
]
