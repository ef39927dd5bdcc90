#!/usr/bin/env python3
"""
Page driver factory.

Creates browser driver instances with lazy loading of the automation backend.
"""

from .page_driver import PageDriver

AVAILABLE_BROWSERS = ["chromium", "firefox", "webkit"]


def create_driver(browser_name: str, headless: bool = True) -> PageDriver:
    """Create a driver for the given browser name."""

    if browser_name in AVAILABLE_BROWSERS:
        from .playwright_driver import PlaywrightDriver
        return PlaywrightDriver(browser_name=browser_name, headless=headless)

    raise ValueError(f"Unknown browser: {browser_name}. Available: {', '.join(AVAILABLE_BROWSERS)}")


def get_available_browsers() -> list[str]:
    """Get list of available browser names."""
    return list(AVAILABLE_BROWSERS)
