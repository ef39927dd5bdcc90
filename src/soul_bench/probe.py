#!/usr/bin/env python3
"""
In-page frame probe.

The probe script is installed before any page script runs. It wraps
requestAnimationFrame, derives an instantaneous frame rate from the time between
frames and buffers the samples inside the page, so nothing crosses the browser
boundary while a measurement window is open. ``FrameProbe`` is the only handle the
harness uses to talk to it.

Every call into the page goes through ``page.wait_for_function`` with a timeout.
Playwright enforces that timeout outside the page, so a renderer whose main thread
hangs cannot block the harness.
"""

import time
from dataclasses import dataclass, field
from typing import Any

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from .errors import InstrumentationFailure, MeasurementTimeout

PROBE_GLOBAL = "__soulBenchProbe"

# Interval polling uses setTimeout; rAF polling would go through the wrapped
# requestAnimationFrame and add samples of its own.
POLL_INTERVAL_MS = 100
PROBE_CALL_TIMEOUT_S = 5.0

PROBE_SCRIPT = """
(() => {
  if (window.%(name)s) return;

  const nativeRequestAnimationFrame = window.requestAnimationFrame.bind(window);
  const state = {
    samples: [],
    frameCount: 0,
    lastFrameTime: null,
    memory: null,
    peakMemoryUsed: 0,
    resetAt: performance.now(),
    criticalRate: 0,
    onCritical: null,
    window: null,
  };

  const readMemory = () => {
    const mem = performance.memory;
    if (!mem) return null;
    return { used: mem.usedJSHeapSize, total: mem.totalJSHeapSize, limit: mem.jsHeapSizeLimit };
  };

  const recordFrame = (time) => {
    if (state.lastFrameTime !== null) {
      const elapsed = time - state.lastFrameTime;
      if (elapsed > 0) {
        const rate = 1000 / elapsed;
        state.samples.push(rate);
        state.frameCount++;
        if (state.onCritical && rate < state.criticalRate) state.onCritical(rate);
      }
    }
    state.lastFrameTime = time;
    const mem = readMemory();
    if (mem) {
      state.memory = mem;
      state.peakMemoryUsed = Math.max(state.peakMemoryUsed, mem.used);
    }
  };

  window.requestAnimationFrame = function (callback) {
    return nativeRequestAnimationFrame((time) => {
      try {
        recordFrame(time);
      } catch (e) {
        // instrumentation must never break the page's render loop
      }
      return callback(time);
    });
  };

  window.%(name)s = Object.freeze({
    reset() {
      state.samples = [];
      state.frameCount = 0;
      state.memory = null;
      state.peakMemoryUsed = 0;
      state.resetAt = performance.now();
      return true;
    },

    startWindow(durationMs, criticalRate) {
      const started = performance.now();
      const current = { done: false, elapsedMs: 0, critical: false, criticalSample: null };
      let timer = null;
      const finish = (critical, rate) => {
        if (current.done) return;
        current.done = true;
        current.elapsedMs = performance.now() - started;
        current.critical = critical;
        current.criticalSample = rate;
        clearTimeout(timer);
        if (state.window === current) state.onCritical = null;
      };
      state.window = current;
      state.criticalRate = criticalRate;
      state.onCritical = (rate) => finish(true, rate);
      timer = setTimeout(() => finish(false, null), durationMs);
      return true;
    },

    windowResult() {
      const current = state.window;
      if (!current || !current.done) return null;
      return { elapsedMs: current.elapsedMs, critical: current.critical, criticalSample: current.criticalSample };
    },

    snapshot() {
      const result = {
        samples: [],
        frameCount: 0,
        elapsedMs: 0,
        memory: null,
        peakMemoryUsed: 0,
        observedLoad: null,
        appFps: null,
        appDrawCalls: null,
        degraded: false,
        error: null,
      };
      try {
        result.samples = state.samples.slice();
        result.frameCount = state.frameCount;
        result.elapsedMs = performance.now() - state.resetAt;
        result.memory = state.memory || readMemory();
        result.peakMemoryUsed = state.peakMemoryUsed || (result.memory ? result.memory.used : 0);
        if (typeof window.soulCount === 'number') result.observedLoad = window.soulCount;
        if (typeof window.currentFPS === 'number') result.appFps = window.currentFPS;
        const metrics = window.appPerformanceMetrics;
        if (metrics && typeof metrics.drawCalls === 'number') result.appDrawCalls = metrics.drawCalls;
      } catch (e) {
        result.degraded = true;
        result.error = String((e && e.message) || e);
      }
      return result;
    },
  });
})();
""" % {"name": PROBE_GLOBAL}


@dataclass(frozen=True)
class MemoryReading:
    used: int = 0
    total: int = 0
    limit: int = 0

    @classmethod
    def from_payload(cls, payload: dict[str, Any] | None) -> "MemoryReading":
        if not payload:
            return cls()
        return cls(
            used=int(payload.get("used") or 0),
            total=int(payload.get("total") or 0),
            limit=int(payload.get("limit") or 0),
        )

    def to_dict(self) -> dict[str, int]:
        return {"used": self.used, "total": self.total, "limit": self.limit}


@dataclass(frozen=True)
class WindowOutcome:
    """How a measurement window ended."""

    elapsed_s: float
    critical: bool = False
    critical_sample: float | None = None


@dataclass(frozen=True)
class ProbeSnapshot:
    """Everything the probe collected since its last reset."""

    samples: list[float] = field(default_factory=list)
    frame_count: int = 0
    elapsed_s: float = 0.0
    memory: MemoryReading = field(default_factory=MemoryReading)
    peak_memory_used: int = 0
    observed_load: int | None = None
    app_fps: float | None = None
    app_draw_calls: int | None = None
    degraded: bool = False
    error: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ProbeSnapshot":
        observed = payload.get("observedLoad")
        draw_calls = payload.get("appDrawCalls")
        return cls(
            samples=[float(s) for s in payload.get("samples") or []],
            frame_count=int(payload.get("frameCount") or 0),
            elapsed_s=float(payload.get("elapsedMs") or 0) / 1000,
            memory=MemoryReading.from_payload(payload.get("memory")),
            peak_memory_used=int(payload.get("peakMemoryUsed") or 0),
            observed_load=int(observed) if observed is not None else None,
            app_fps=payload.get("appFps"),
            app_draw_calls=int(draw_calls) if draw_calls is not None else None,
            degraded=bool(payload.get("degraded")),
            error=payload.get("error"),
        )

    @classmethod
    def degraded_empty(cls, error: str) -> "ProbeSnapshot":
        return cls(degraded=True, error=error)



class FrameProbe:
    """Handle on the probe installed in one page."""

    def __init__(self, page, clock=time.monotonic):
        self.page = page
        self.clock = clock
        self.installed = False

    def install(self) -> None:
        """Register the probe so it runs before the target's own scripts."""
        try:
            self.page.add_init_script(PROBE_SCRIPT)
        except PlaywrightError as e:
            raise InstrumentationFailure(f"could not install frame probe: {e}") from e
        self.installed = True

    def _call(self, expression: str, arg: Any = None, timeout_s: float = PROBE_CALL_TIMEOUT_S) -> Any:
        """Evaluate ``expression`` until it returns a truthy value, for at most ``timeout_s``."""
        handle = self.page.wait_for_function(
            expression,
            arg=arg,
            polling=POLL_INTERVAL_MS,
            timeout=max(timeout_s, 0.001) * 1000,
        )
        return handle.json_value()

    def reset(self) -> None:
        """Discard warm-up samples; the requestAnimationFrame wrapper stays in place."""
        try:
            self._call(f"() => window.{PROBE_GLOBAL}.reset()")
        except PlaywrightError as e:
            raise InstrumentationFailure(f"could not reset frame probe: {e}") from e

    def await_window(self, duration_s: float, critical_rate: float, ceiling_s: float) -> WindowOutcome:
        """
        Wait for the measurement window to close inside the page.

        Returns early when a sample drops below ``critical_rate``. Raises
        MeasurementTimeout once ``ceiling_s`` is exceeded, even if the page has stopped
        responding.
        """
        deadline = self.clock() + ceiling_s
        try:
            self._call(
                f"([d, c]) => window.{PROBE_GLOBAL}.startWindow(d, c)",
                [duration_s * 1000, critical_rate],
                timeout_s=ceiling_s,
            )
            payload = self._call(
                f"() => window.{PROBE_GLOBAL}.windowResult()",
                timeout_s=deadline - self.clock(),
            )
        except PlaywrightTimeoutError as e:
            raise MeasurementTimeout(f"measurement exceeded {ceiling_s:g}s ceiling") from e
        except PlaywrightError as e:
            raise InstrumentationFailure(f"measurement window failed: {e}") from e
        return WindowOutcome(
            elapsed_s=float(payload.get("elapsedMs") or 0) / 1000,
            critical=bool(payload.get("critical")),
            critical_sample=payload.get("criticalSample"),
        )

    def snapshot(self) -> ProbeSnapshot:
        """Collect the probe state; instrumentation errors yield a degraded snapshot."""
        try:
            payload = self._call(f"() => window.{PROBE_GLOBAL}.snapshot()")
        except PlaywrightTimeoutError as e:
            return ProbeSnapshot.degraded_empty(f"snapshot timed out: {e}")
        except PlaywrightError as e:
            return ProbeSnapshot.degraded_empty(f"snapshot failed: {e}")
        if not isinstance(payload, dict):
            return ProbeSnapshot.degraded_empty("snapshot returned no data")
        return ProbeSnapshot.from_payload(payload)
