#!/usr/bin/env python3
"""
Reduction of raw frame-rate samples into summary statistics.

All functions here are pure: the same sample list always yields the same numbers.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

BYTES_PER_MB = 1024 * 1024


def mean_rate(samples: list[float]) -> float:
    """Arithmetic mean of the samples, 0.0 for an empty list."""
    if not samples:
        return 0.0
    return sum(samples) / len(samples)


def percentile(samples: list[float], p: float) -> float:
    """
    Nearest-rank percentile: ``sorted[floor(n * p)]``.

    The index is clamped to the last element so ``p=1.0`` returns the maximum
    instead of falling off the end. Empty input returns 0.0.
    """
    if not samples:
        return 0.0
    ordered = sorted(samples)
    index = min(math.floor(len(ordered) * p), len(ordered) - 1)
    return ordered[max(index, 0)]


def population_stdev(samples: list[float]) -> float:
    if not samples:
        return 0.0
    avg = mean_rate(samples)
    return math.sqrt(sum((s - avg) ** 2 for s in samples) / len(samples))


class StabilityStrategy(ABC):
    """Scores sample-to-sample consistency on a [0, 1] scale."""

    name: str = ""

    @abstractmethod
    def score(self, samples: list[float]) -> float:
        """Return the stability score for the samples."""

    def describe(self) -> str:
        return self.name


class ThresholdStability(StabilityStrategy):
    """Fraction of samples strictly above ``threshold`` fps."""

    name = "threshold"

    def __init__(self, threshold: float):
        self.threshold = threshold

    def score(self, samples: list[float]) -> float:
        if not samples:
            return 0.0
        return sum(1 for s in samples if s > self.threshold) / len(samples)

    def describe(self) -> str:
        return f"threshold(>{self.threshold:g} fps)"


class DispersionStability(StabilityStrategy):
    """
    Inverted coefficient of variation: ``1 - pstdev / mean``.

    Highly erratic data drives the raw value negative; with ``clamp`` (the default)
    the result is kept inside [0, 1].
    """

    name = "dispersion"

    def __init__(self, clamp: bool = True):
        self.clamp = clamp

    def score(self, samples: list[float]) -> float:
        if len(samples) < 2:
            return 0.0
        avg = mean_rate(samples)
        if avg <= 0:
            return 0.0
        value = 1.0 - population_stdev(samples) / avg
        if self.clamp:
            value = min(max(value, 0.0), 1.0)
        return value

    def describe(self) -> str:
        return "dispersion(1 - cv, clamped)" if self.clamp else "dispersion(1 - cv)"


def create_stability_strategy(method: str, threshold: float | None = None) -> StabilityStrategy:
    """Create a stability strategy by name."""
    if method == "threshold":
        if threshold is None:
            raise ValueError("threshold stability requires a threshold")
        return ThresholdStability(threshold)
    if method == "dispersion":
        return DispersionStability()
    raise ValueError(f"Unknown stability method: {method}. Available: threshold, dispersion")


@dataclass(frozen=True)
class RunStatistics:
    """Summary statistics for one measurement window."""

    mean_fps: float
    fps_5th: float
    fps_95th: float
    min_fps: float
    max_fps: float
    stability: float
    stability_method: str
    peak_memory_mb: float
    frame_count: int
    elapsed_s: float
    stable: bool
    critical: bool

    def to_dict(self) -> dict:
        return {
            "mean_fps": self.mean_fps,
            "fps_5th": self.fps_5th,
            "fps_95th": self.fps_95th,
            "min_fps": self.min_fps,
            "max_fps": self.max_fps,
            "stability": self.stability,
            "stability_method": self.stability_method,
            "peak_memory_mb": self.peak_memory_mb,
            "frame_count": self.frame_count,
            "elapsed_s": self.elapsed_s,
            "stable": self.stable,
            "critical": self.critical,
        }


def reduce_samples(
    samples: list[float],
    stability: StabilityStrategy,
    *,
    peak_memory_bytes: int = 0,
    frame_count: int | None = None,
    elapsed_s: float = 0.0,
    critical_rate: float = 1.0,
    unstable_rate: float = 10.0,
) -> RunStatistics:
    """
    Reduce one window of samples to statistics.

    ``critical`` is set when any sample fell below ``critical_rate``; ``stable``
    requires no critical sample, no sample below ``unstable_rate`` and at least one
    sample.
    """
    critical = any(s < critical_rate for s in samples)
    stable = bool(samples) and not critical and all(s >= unstable_rate for s in samples)
    return RunStatistics(
        mean_fps=mean_rate(samples),
        fps_5th=percentile(samples, 0.05),
        fps_95th=percentile(samples, 0.95),
        min_fps=min(samples) if samples else 0.0,
        max_fps=max(samples) if samples else 0.0,
        stability=stability.score(samples),
        stability_method=stability.describe(),
        peak_memory_mb=peak_memory_bytes / BYTES_PER_MB,
        frame_count=len(samples) if frame_count is None else frame_count,
        elapsed_s=elapsed_s,
        stable=stable,
        critical=critical,
    )
