#!/usr/bin/env python3
"""CLI entry point for running a browser automation benchmark."""

from __future__ import annotations

import argparse
import asyncio
import os
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

from browser_bench import cli
from browser_bench.config import ApproachType, BenchmarkConfig, load_config
from browser_bench.harness import BenchmarkHarness
from browser_bench.logging.logger import ExperimentLogger
from browser_bench.report import (
    print_approach_results,
    print_cost_analysis,
    print_multi_comparison,
)
from browser_bench.results import AggregatedBenchmarkResults, save_summary


async def run_benchmark(config: BenchmarkConfig, agent: bool = False) -> list[AggregatedBenchmarkResults]:
    logger = ExperimentLogger(config.benchmark_id, config.output_dir)
    harness = BenchmarkHarness(config=config, logger=logger)
    results = await (harness.run_all_agents() if agent else harness.run_all())

    for aggregated in results:
        slug = aggregated.approach.lower().replace(" ", "_")
        path = save_summary(Path(config.output_dir) / f"{config.benchmark_id}_{slug}.json", aggregated)
        cli.info(f"Summary saved to {path}")
    return results


def main() -> None:
    parser = argparse.ArgumentParser(description="Compare browser automation approaches")
    parser.add_argument("--config", required=True, help="Path to benchmark YAML config")
    parser.add_argument("--runs", type=int, help="Override runs per approach")
    parser.add_argument(
        "--approach",
        action="append",
        choices=[a.value for a in ApproachType],
        help="Approach to run (repeatable; default: all in config)",
    )
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument(
        "--agent",
        action="store_true",
        help="Let a Claude agent drive the browser (uses agent.approaches from config)",
    )
    args = parser.parse_args()

    config = load_config(args.config)
    if args.runs is not None:
        config.num_runs = args.runs
    if args.approach:
        if args.agent:
            config.agent.approaches = [ApproachType(a) for a in args.approach]
        else:
            config.approaches = [ApproachType(a) for a in args.approach]
    if args.headed:
        config.client.headless = False

    if config.llm.provider == "anthropic" and not os.environ.get("ANTHROPIC_API_KEY"):
        cli.error("ANTHROPIC_API_KEY environment variable not set")
        raise SystemExit(1)

    cli.header(f"BROWSER AUTOMATION BENCHMARK\n{config.benchmark_id}")
    cli.config(config.llm.model, config.target_url)
    cli.info(f"Runs per approach: {config.num_runs}")
    if args.agent:
        cli.info("Agent mode: WebMCP tools blocked for the screenshot agent")

    results = asyncio.run(run_benchmark(config, agent=args.agent))

    for aggregated in results:
        cli.section(f"{aggregated.approach.upper()} RESULTS")
        print_approach_results(aggregated)

    if len(results) > 1:
        print_multi_comparison(results, "FINAL COMPARISON")
        print_cost_analysis(results)

    cli.success("Benchmark complete")


if __name__ == "__main__":
    main()
