#!/usr/bin/env python3
"""
Soul Recycling Simulation Benchmark - Main Entry Point

Parses the command line and hands off to the benchmark runner.
"""

from .benchmark_runner import list_profiles, run_benchmarks
from .cli_parser import create_parser


def main():
    """Main entry point for the benchmark harness."""
    parser = create_parser()
    args = parser.parse_args()

    if args.list_profiles:
        list_profiles()
        return

    run_benchmarks(args)


if __name__ == "__main__":
    main()
