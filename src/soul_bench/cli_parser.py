#!/usr/bin/env python3
"""
Command-line interface parser for the benchmark harness.

Defines and parses all command-line arguments for a benchmark invocation.
"""

import argparse
import os
from pathlib import Path

from .driver_factory import get_available_browsers
from .profiles import get_available_profiles

DEFAULT_BASE_URL = "http://localhost:5173"
DEFAULT_OUTPUT_DIR = "testing-results"


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="soul-bench",
        description="Frame-rate benchmark harness for the Soul Recycling Simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Stress test against the local dev server
  soul-bench --profile stress

  # Individual vs instanced comparison in a visible browser
  soul-bench --profile benchmark --headed

  # Short run against another host, reports elsewhere
  soul-bench --profile quick --base-url http://192.168.1.20:5173 --output-dir /tmp/results

Available profiles:
  - benchmark     : individual mesh vs instanced rendering, PASS/FAIL per scenario
  - stress        : 3,000 to 15,000 entities, breaking point search
  - conservative  : 2,000 to 4,500 entities, practical limits
  - quick         : 99 to 1,500 entities, short windows

Environment:
  SOUL_BENCH_BASE_URL    default for --base-url
  SOUL_BENCH_OUTPUT_DIR  default for --output-dir
""",
    )

    # Target
    parser.add_argument(
        "--profile",
        default="conservative",
        choices=get_available_profiles(),
        help="Benchmark profile (default: conservative)",
    )
    parser.add_argument(
        "--base-url",
        default=os.environ.get("SOUL_BENCH_BASE_URL", DEFAULT_BASE_URL),
        help=f"Target application URL (default: {DEFAULT_BASE_URL})",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path(os.environ.get("SOUL_BENCH_OUTPUT_DIR", DEFAULT_OUTPUT_DIR)),
        help=f"Directory for JSON and Markdown reports (default: {DEFAULT_OUTPUT_DIR})",
    )

    # Browser
    parser.add_argument(
        "--browser", default="chromium", choices=get_available_browsers(), help="Browser to drive (default: chromium)"
    )
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("--skip-server-check", action="store_true", help="Do not check the target server first")

    # Timing overrides
    parser.add_argument("--duration", type=float, help="Measurement window per scenario in seconds")
    parser.add_argument("--stabilization", type=float, help="Stabilization wait per scenario in seconds")
    parser.add_argument("--cooldown", type=float, help="Pause between scenarios in seconds")
    parser.add_argument("--navigation-timeout", type=float, help="Page load timeout in seconds")

    parser.add_argument("--list-profiles", action="store_true", help="Print the profiles and exit")

    return parser
