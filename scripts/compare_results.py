#!/usr/bin/env python3
"""Compare saved approach summaries. The first file is the baseline."""

from __future__ import annotations

import argparse

from browser_bench import cli
from browser_bench.report import (
    print_approach_results,
    print_cost_analysis,
    print_multi_comparison,
)
from browser_bench.results import load_summary


def main() -> None:
    parser = argparse.ArgumentParser(description="Compare saved benchmark summaries")
    parser.add_argument("summaries", nargs="+", help="Summary JSON files (baseline first)")
    parser.add_argument(
        "--project",
        type=int,
        nargs="+",
        default=[100, 1000],
        help="Task counts to extrapolate cost to",
    )
    args = parser.parse_args()

    results = [load_summary(path) for path in args.summaries]
    for aggregated in results:
        cli.section(f"{aggregated.approach.upper()} ({aggregated.num_runs} runs)")
        print_approach_results(aggregated)

    if len(results) > 1:
        print_multi_comparison(results)
    print_cost_analysis(results, projections=args.project)


if __name__ == "__main__":
    main()
