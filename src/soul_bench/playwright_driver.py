#!/usr/bin/env python3
"""
Playwright page driver.

Launches one browser for the run and gives each scenario its own browser context,
so no state leaks between scenarios.
"""

from typing import Any

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from .errors import DriverUnavailable, InstrumentationFailure, NavigationFailure
from .page_driver import PageDriver, PageSession
from .probe import FrameProbe, ProbeSnapshot, WindowOutcome

CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--enable-webgl",
    "--enable-gpu-rasterization",
    "--ignore-gpu-blocklist",
]

DEFAULT_VIEWPORT = {"width": 1920, "height": 1080}

SYSTEM_INFO_SCRIPT = """
() => {
  const webgl = (() => {
    const canvas = document.createElement('canvas');
    const gl = canvas.getContext('webgl') || canvas.getContext('experimental-webgl');
    if (!gl) return { supported: false };
    const debugInfo = gl.getExtension('WEBGL_debug_renderer_info');
    return {
      supported: true,
      vendor: debugInfo ? gl.getParameter(debugInfo.UNMASKED_VENDOR_WEBGL) : gl.getParameter(gl.VENDOR),
      renderer: debugInfo ? gl.getParameter(debugInfo.UNMASKED_RENDERER_WEBGL) : gl.getParameter(gl.RENDERER),
      version: gl.getParameter(gl.VERSION),
    };
  })();
  return {
    userAgent: navigator.userAgent,
    platform: navigator.platform,
    hardwareConcurrency: navigator.hardwareConcurrency,
    deviceMemory: navigator.deviceMemory || null,
    webgl,
  };
}
"""


class PlaywrightSession(PageSession):
    """A browser context plus page with the frame probe installed."""

    def __init__(self, context, page):
        self.context = context
        self.page = page
        self.probe = FrameProbe(page)
        self._closed = False

    def navigate(self, url: str, timeout_s: float) -> None:
        try:
            self.page.goto(url, wait_until="networkidle", timeout=timeout_s * 1000)
        except PlaywrightTimeoutError as e:
            raise NavigationFailure(f"navigation to {url} timed out after {timeout_s:g}s") from e
        except PlaywrightError as e:
            raise NavigationFailure(f"navigation to {url} failed: {e}") from e

    def wait(self, seconds: float) -> None:
        self.page.wait_for_timeout(seconds * 1000)

    def reset_probe(self) -> None:
        self.probe.reset()

    def await_window(self, duration_s: float, critical_rate: float, ceiling_s: float) -> WindowOutcome:
        return self.probe.await_window(duration_s, critical_rate, ceiling_s)

    def snapshot(self) -> ProbeSnapshot:
        return self.probe.snapshot()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self.context.close()
        except PlaywrightError as e:
            print(f"⚠️  Failed to close page context: {e}")


class PlaywrightDriver(PageDriver):
    """Drives Chromium, Firefox or WebKit through the Playwright sync API."""

    def __init__(self, browser_name: str = "chromium", headless: bool = True, viewport: dict[str, int] | None = None):
        self.browser_name = browser_name
        self.headless = headless
        self.viewport = viewport or dict(DEFAULT_VIEWPORT)
        self._playwright = None
        self.browser = None

    def get_driver_name(self) -> str:
        return f"playwright-{self.browser_name}"

    def start(self) -> None:
        try:
            self._playwright = sync_playwright().start()
            browser_type = getattr(self._playwright, self.browser_name)
            args = CHROMIUM_ARGS if self.browser_name == "chromium" else []
            self.browser = browser_type.launch(headless=self.headless, args=args)
        except PlaywrightError as e:
            self.close()
            raise DriverUnavailable(f"could not launch {self.browser_name}: {e}") from e

    def open_session(self) -> PlaywrightSession:
        if self.browser is None:
            raise DriverUnavailable("driver has not been started")
        context = self.browser.new_context(viewport=self.viewport)
        try:
            page = context.new_page()
        except PlaywrightError as e:
            context.close()
            raise InstrumentationFailure(f"could not open page: {e}") from e
        session = PlaywrightSession(context, page)
        try:
            session.probe.install()
        except InstrumentationFailure:
            session.close()
            raise
        return session

    def system_info(self) -> dict[str, Any]:
        info: dict[str, Any] = {"driver": self.get_driver_name()}
        if self.browser is None:
            return info
        info["browser_version"] = self.browser.version
        context = self.browser.new_context()
        try:
            page = context.new_page()
            page.goto("about:blank")
            info.update(page.evaluate(SYSTEM_INFO_SCRIPT))
        except PlaywrightError as e:
            print(f"⚠️  Could not collect system info: {e}")
            info["error"] = str(e)
        finally:
            context.close()
        return info

    def close(self) -> None:
        if self.browser is not None:
            try:
                self.browser.close()
            except PlaywrightError as e:
                print(f"⚠️  Failed to close browser: {e}")
            self.browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None
