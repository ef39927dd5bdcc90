#!/usr/bin/env python3
"""
Exception hierarchy for the benchmark harness.

Scenario-level failures (navigation, instrumentation, measurement timeout) are caught
by the suite and recorded on the run result. Driver, server and persistence failures
abort the whole run.
"""


class SoulBenchError(Exception):
    """Base class for all harness errors."""


class NavigationFailure(SoulBenchError):
    """Target page was unreachable or did not finish loading within the timeout."""


class InstrumentationFailure(SoulBenchError):
    """The in-page probe could not be installed or read."""


class CriticalInstability(SoulBenchError):
    """Observed frame rate collapsed below the critical threshold."""

    def __init__(self, rate: float, threshold: float):
        super().__init__(f"frame rate collapsed to {rate:.2f} fps (critical threshold {threshold:g} fps)")
        self.rate = rate
        self.threshold = threshold


class MeasurementTimeout(SoulBenchError):
    """Measurement window plus snapshot exceeded the hard ceiling."""


class DriverUnavailable(SoulBenchError):
    """The browser automation driver could not be started."""


class ServerUnavailable(SoulBenchError):
    """The target dev server did not answer the preflight check."""


class PersistenceFailure(SoulBenchError):
    """A report file could not be written."""
