#!/usr/bin/env python3
"""
Abstract page driver interface.

Defines the contract between the benchmark suite and a browser automation backend.
The suite only ever navigates, waits, resets the probe, waits out a measurement
window and takes a snapshot.
"""

from abc import ABC, abstractmethod
from typing import Any

from .probe import ProbeSnapshot, WindowOutcome


class PageSession(ABC):
    """
    One isolated page with the frame probe installed.

    The suite closes every session it opens, on every exit path.
    """

    @abstractmethod
    def navigate(self, url: str, timeout_s: float) -> None:
        """
        Load the target URL.

        Raises NavigationFailure on timeout or network error.
        """

    @abstractmethod
    def wait(self, seconds: float) -> None:
        """Passive wait while the page keeps running."""

    @abstractmethod
    def reset_probe(self) -> None:
        """Clear samples collected so far."""

    @abstractmethod
    def await_window(self, duration_s: float, critical_rate: float, ceiling_s: float) -> WindowOutcome:
        """Let the probe accumulate samples for the window; may end early on collapse."""

    @abstractmethod
    def snapshot(self) -> ProbeSnapshot:
        """Return the probe state. Never raises; degraded snapshots carry the error."""

    @abstractmethod
    def close(self) -> None:
        """Close the page and its browser context."""


class PageDriver(ABC):
    """
    Abstract base class for browser automation backends.

    A driver owns the browser process for the whole run and hands out one
    PageSession per scenario.
    """

    @abstractmethod
    def get_driver_name(self) -> str:
        """Return the driver name (e.g., 'playwright-chromium')."""

    @abstractmethod
    def start(self) -> None:
        """
        Acquire the browser.

        Raises DriverUnavailable when the browser cannot be launched.
        """

    @abstractmethod
    def open_session(self) -> PageSession:
        """Open a fresh isolated page with the frame probe installed."""

    def system_info(self) -> dict[str, Any]:
        """
        Describe the host environment.

        Default implementation reports nothing. Override if the backend can query the
        browser for platform and graphics details.
        """
        return {}

    @abstractmethod
    def close(self) -> None:
        """Release the browser."""
