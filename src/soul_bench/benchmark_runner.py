#!/usr/bin/env python3
"""
Benchmark runner and orchestration logic.

Handles preflight, driver acquisition, suite execution and report persistence.
"""

import sys
import time
from typing import Callable

from .benchmark_suite import BenchmarkSuite
from .driver_factory import create_driver
from .errors import DriverUnavailable, PersistenceFailure, ServerUnavailable
from .page_driver import PageDriver
from .profiles import get_available_profiles, get_profile
from .report_writer import BenchmarkReport, write_reports
from .server_check import check_server


def list_profiles() -> None:
    """Print every built-in profile with its scenario loads."""
    for name in get_available_profiles():
        profile = get_profile(name)
        loads = ", ".join(str(s.load) for s in profile.scenarios)
        print(f"{name:<14} {profile.description}")
        print(f"{'':<14} modes: {', '.join(profile.modes)} | loads: {loads}")
        print(
            f"{'':<14} window: {profile.test_duration_s:g}s | stabilization: {profile.stabilization_s:g}s | "
            f"stability: {profile.stability_strategy().describe()}"
        )


def run_benchmarks(args, driver: PageDriver | None = None, sleep: Callable[[float], None] = time.sleep) -> None:
    """
    Execute a benchmark profile based on parsed command-line arguments.

    Exits with status 1 when the server, the browser or the report files are
    unavailable. Individual scenario failures only show up in the report.

    Args:
        args: Parsed command-line arguments from argparse
        driver: Optional pre-built driver, created from ``args.browser`` otherwise
        sleep: Cooldown function between scenarios
    """
    profile = get_profile(args.profile).with_overrides(
        test_duration_s=args.duration,
        stabilization_s=args.stabilization,
        cooldown_s=args.cooldown,
        navigation_timeout_s=args.navigation_timeout,
    )

    print(f"🎯 Soul Recycling Simulation: {profile.name} benchmark")
    print("=" * 60)
    print(f"🔬 Scenarios: {len(profile.expand_scenarios())} ({', '.join(profile.modes)})")
    print(f"⏱️  Window: {profile.test_duration_s:g}s per scenario, {profile.stabilization_s:g}s stabilization")

    if not args.skip_server_check:
        print(f"📡 Checking development server at {args.base_url}...")
        try:
            check_server(args.base_url)
        except ServerUnavailable as e:
            print(f"❌ {e}")
            print("Please start the development server with 'npm run dev' first.")
            sys.exit(1)
        print("✅ Development server is running")

    if driver is None:
        driver = create_driver(args.browser, headless=not args.headed)

    try:
        driver.start()
    except DriverUnavailable as e:
        print(f"❌ {e}")
        sys.exit(1)

    try:
        system_info = driver.system_info()
        print(f"💻 Driver: {driver.get_driver_name()}")

        suite = BenchmarkSuite(driver, profile, args.base_url, sleep=sleep)
        print(f"\n🚀 Starting {profile.name} suite...")
        results = suite.execute_all()
    except DriverUnavailable as e:
        print(f"\n❌ Browser driver failed: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n⚠️  Benchmark interrupted by user")
        sys.exit(1)
    finally:
        driver.close()

    summary = suite.summarize()
    report = BenchmarkReport(
        profile=profile,
        results=results,
        summary=summary,
        comparison=suite.compare(),
        system_info=system_info,
        base_url=args.base_url,
    )
    suite.print_results()

    try:
        paths = write_reports(report, args.output_dir)
    except PersistenceFailure as e:
        print(f"\n❌ {e}")
        sys.exit(1)

    print("\n🎉 Benchmark complete!")
    print("=" * 60)
    print(f"📊 Overall Assessment: {summary.verdict}")
    print(f"🎯 Max Stable Load: {summary.max_stable_load if summary.max_stable_load is not None else 'N/A'}")
    print(f"📈 Average FPS: {summary.average_fps:.1f}")
    print(f"✅ Successful scenarios: {summary.successful}/{summary.total_scenarios}")
    if report.comparison:
        print(f"🔍 {report.comparison.recommendation}")
    for path in paths:
        print(f"💾 Saved: {path}")
