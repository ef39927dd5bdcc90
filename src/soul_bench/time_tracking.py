#!/usr/bin/env python3
"""
Time tracking utilities for benchmark measurement.

Provides structured timing tracking for each phase of a scenario run.
"""

import time
from dataclasses import dataclass, field
from typing import Callable, Union


@dataclass
class TimeLog:
    """
    Tracks timing for each phase of a scenario run.

    All times are in seconds (float).
    """

    # Phase timing
    navigation: Union[float, None] = None
    stabilization: Union[float, None] = None
    measurement: Union[float, None] = None
    snapshot: Union[float, None] = None

    # Cleanup timing
    page_cleanup: Union[float, None] = None

    clock: Callable[[], float] = field(default=time.monotonic, repr=False, compare=False)

    def start_timer(self) -> float:
        """Start a timer and return the start time."""
        return self.clock()

    def end_timer(self, start_time: float) -> float:
        """End a timer and return elapsed time in seconds."""
        return self.clock() - start_time

    @staticmethod
    def phase_names() -> list[str]:
        return ["navigation", "stabilization", "measurement", "snapshot", "page_cleanup"]

    def get_total_time(self) -> float:
        """Get total scenario time."""
        total = 0.0
        for attr_name in self.phase_names():
            value = getattr(self, attr_name)
            if value is not None:
                total += value
        return total

    def to_dict(self) -> dict[str, float | None]:
        timings = {name: getattr(self, name) for name in self.phase_names()}
        timings["total"] = self.get_total_time()
        return timings
