"""Side-by-side comparison tables and cost projections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from rich.markup import escape
from rich.table import Table

from browser_bench import cli
from browser_bench.accumulator import BenchmarkResult
from browser_bench.config import Pricing
from browser_bench.results import AggregatedBenchmarkResults
from browser_bench.tokens import DEFAULT_PRICING, estimate_cost_usd

DEFAULT_PROJECTIONS = (100, 1000)


@dataclass(frozen=True)
class Metric:
    label: str
    attr: str
    lower_is_better: bool
    fmt: Callable[[float], str]


def _dollars(value: float) -> str:
    return f"${value:.4f}"


def _millis(value: float) -> str:
    return f"{cli.format_number(value)}ms"


def _percent(value: float) -> str:
    return f"{value * 100:.0f}%"


METRICS: list[Metric] = [
    Metric("Input tokens", "avg_input_tokens", True, cli.format_number),
    Metric("Output tokens", "avg_output_tokens", True, cli.format_number),
    Metric("Image tokens", "avg_image_tokens", True, cli.format_number),
    Metric("Total cost", "avg_total_cost_usd", True, _dollars),
    Metric("Duration", "avg_duration_ms", True, _millis),
    Metric("Turns", "avg_num_turns", True, lambda v: f"{v:.1f}"),
    Metric("Success rate", "success_rate", False, _percent),
]


@dataclass(frozen=True)
class MetricComparison:
    """One metric of a baseline-vs-candidate comparison.

    ``difference`` is baseline minus candidate; ``percent`` expresses it
    relative to the baseline. ``better`` is "baseline", "candidate" or None
    on a tie.
    """
    metric: str
    baseline: float
    candidate: float
    difference: float
    percent: float
    better: str | None


def percent_change(baseline: float, candidate: float) -> float:
    """(baseline - candidate) / baseline * 100, or 0.0 for a zero baseline."""
    if baseline == 0:
        return 0.0
    return (baseline - candidate) / baseline * 100


def _better_side(difference: float, lower_is_better: bool) -> str | None:
    if difference == 0:
        return None
    candidate_lower = difference > 0
    return "candidate" if candidate_lower == lower_is_better else "baseline"


def compare_metric(metric: Metric, baseline: float, candidate: float) -> MetricComparison:
    difference = baseline - candidate
    return MetricComparison(
        metric=metric.label,
        baseline=baseline,
        candidate=candidate,
        difference=difference,
        percent=percent_change(baseline, candidate),
        better=_better_side(difference, metric.lower_is_better),
    )


def compare_results(
    baseline: AggregatedBenchmarkResults,
    candidate: AggregatedBenchmarkResults,
) -> list[MetricComparison]:
    """Metric-by-metric comparison of two aggregated approaches."""
    return [
        compare_metric(m, getattr(baseline, m.attr), getattr(candidate, m.attr))
        for m in METRICS
    ]


def compare_many(
    results: Sequence[AggregatedBenchmarkResults],
) -> list[tuple[AggregatedBenchmarkResults, list[MetricComparison]]]:
    """Compare every entry after the first against the first."""
    if not results:
        return []
    baseline = results[0]
    return [(candidate, compare_results(baseline, candidate)) for candidate in results[1:]]


def project_cost(aggregated: AggregatedBenchmarkResults, multiplier: float) -> float:
    return aggregated.avg_total_cost_usd * multiplier


def format_difference(row: MetricComparison, fmt: Callable[[float], str] = cli.format_number) -> str:
    arrow = "↓" if row.difference > 0 else "↑" if row.difference < 0 else "="
    color = "green" if row.better == "candidate" else "red" if row.better == "baseline" else "white"
    return f"[{color}]{fmt(abs(row.difference))} ({arrow}{abs(row.percent):.1f}%)[/{color}]"


def _metric_table(*headers: str) -> Table:
    table = Table(border_style="cyan", header_style="bold white")
    for i, head in enumerate(headers):
        table.add_column(head, justify="left" if i == 0 else "right")
    return table


def short_tool_name(tool: str) -> str:
    """Strip the ``mcp__<server>__`` prefix agent SDKs put on MCP tools."""
    if tool.startswith("mcp__"):
        return tool.split("__", 2)[-1]
    return tool


def print_approach_results(results: AggregatedBenchmarkResults) -> None:
    table = _metric_table("Metric", "Average")
    for m in METRICS:
        table.add_row(m.label, m.fmt(getattr(results, m.attr)))
    cli.console.print(table)

    if results.total_tool_usage:
        cli.console.print()
        cli.console.print("[bright_black]  Tool usage (total across all runs):[/bright_black]")
        ranked = sorted(results.total_tool_usage.items(), key=lambda kv: kv[1], reverse=True)
        for tool, count in ranked:
            cli.console.print(f"[bright_black]    {escape(short_tool_name(tool))}: [/bright_black]{count}")


def print_comparison(
    baseline: AggregatedBenchmarkResults,
    candidate: AggregatedBenchmarkResults,
    title: str = "COMPARISON",
) -> None:
    print_multi_comparison([baseline, candidate], title)


def print_multi_comparison(
    results: Sequence[AggregatedBenchmarkResults],
    title: str = "COMPARISON",
) -> None:
    """Table with one column per approach and one difference column per
    non-baseline approach."""
    if not results:
        cli.warn("No results to compare")
        return
    cli.header(title)

    baseline = results[0]
    comparisons = compare_many(results)
    diff_headers = [f"Δ {c.approach}" for c, _ in comparisons]
    table = _metric_table("Metric", *(r.approach for r in results), *diff_headers)

    for i, m in enumerate(METRICS):
        values = [m.fmt(getattr(r, m.attr)) for r in results]
        diffs = [format_difference(rows[i], m.fmt) for _, rows in comparisons]
        table.add_row(m.label, *values, *diffs)
    cli.console.print(table)

    cli.console.print()
    for candidate, rows in comparisons:
        by_metric = {row.metric: row for row in rows}
        token_reduction = by_metric["Input tokens"].percent
        cost_reduction = by_metric["Total cost"].percent
        if token_reduction > 0:
            cli.console.print(
                f"[bold green]  ✓ TOKEN REDUCTION ({escape(candidate.approach)} vs {escape(baseline.approach)}): "
                f"{token_reduction:.1f}%[/bold green]"
            )
        if cost_reduction > 0:
            cli.console.print(
                f"[bold green]  ✓ COST REDUCTION ({escape(candidate.approach)} vs {escape(baseline.approach)}): "
                f"{cost_reduction:.1f}%[/bold green]"
            )


def print_cost_analysis(
    results: Sequence[AggregatedBenchmarkResults],
    projections: Sequence[int] = DEFAULT_PROJECTIONS,
) -> None:
    if not results:
        return
    baseline = results[0]
    cli.section("COST ANALYSIS")

    table = _metric_table("Approach", "Per task", *(f"x{n:,}" for n in projections), "Savings/task")
    for r in results:
        savings = baseline.avg_total_cost_usd - r.avg_total_cost_usd
        pct = percent_change(baseline.avg_total_cost_usd, r.avg_total_cost_usd)
        table.add_row(
            r.approach,
            f"${r.avg_total_cost_usd:.6f}",
            *(f"${project_cost(r, n):.4f}" for n in projections),
            "-" if r is baseline else f"${savings:.6f} ({pct:.1f}%)",
        )
    cli.console.print(table)
    cli.console.print()


def print_run_comparison(
    baseline: BenchmarkResult,
    candidate: BenchmarkResult,
    title: str = "FINAL COMPARISON",
) -> None:
    """Two single-run accumulator results side by side."""
    cli.header(title)
    table = _metric_table("Metric", baseline.approach, candidate.approach, "Difference")

    rows = [
        ("Input tokens", baseline.total_input_tokens, candidate.total_input_tokens),
        ("Output tokens", baseline.total_output_tokens, candidate.total_output_tokens),
        ("Total tokens", baseline.total_tokens, candidate.total_tokens),
        ("Image tokens", baseline.image_tokens, candidate.image_tokens),
        ("Screenshots", baseline.screenshots_taken, candidate.screenshots_taken),
        ("Tool calls", baseline.tool_call_count or 0, candidate.tool_call_count or 0),
    ]
    for label, a, b in rows:
        row = compare_metric(Metric(label, "", True, cli.format_number), a, b)
        table.add_row(label, cli.format_number(a), cli.format_number(b), format_difference(row))
    cli.console.print(table)

    total_pct = percent_change(baseline.total_tokens, candidate.total_tokens)
    cli.console.print()
    cli.console.print(f"[bold green]  ✓ TOKEN REDUCTION: {total_pct:.1f}%[/bold green]")


def print_run_cost_analysis(
    baseline: BenchmarkResult,
    candidate: BenchmarkResult,
    pricing: Pricing = DEFAULT_PRICING,
    projections: Sequence[int] = (100,),
) -> None:
    base_cost = estimate_cost_usd(baseline.total_input_tokens, baseline.total_output_tokens, pricing)
    cand_cost = estimate_cost_usd(candidate.total_input_tokens, candidate.total_output_tokens, pricing)
    savings = base_cost - cand_cost
    pct = percent_change(base_cost, cand_cost)

    cli.console.print()
    cli.console.print(
        f"[bright_black]  Cost comparison (${pricing.input_per_million:g}/1M input, "
        f"${pricing.output_per_million:g}/1M output):[/bright_black]"
    )
    cli.console.print(f"[bright_black]    {escape(baseline.approach)}: [/bright_black]${base_cost:.6f}")
    cli.console.print(f"[bright_black]    {escape(candidate.approach)}: [/bright_black]${cand_cost:.6f}")
    cli.console.print(f"[bright_black]    Savings per task: [/bright_black][green]${savings:.6f} ({pct:.1f}%)[/green]")
    for n in projections:
        cli.console.print()
        cli.console.print(f"[bright_black]  Extrapolated to {n:,} interactions:[/bright_black]")
        cli.console.print(f"[bright_black]    {escape(baseline.approach)}: [/bright_black]${base_cost * n:.4f}")
        cli.console.print(f"[bright_black]    {escape(candidate.approach)}: [/bright_black]${cand_cost * n:.4f}")
        cli.console.print(f"[bright_black]    Savings: [/bright_black][green]${savings * n:.4f}[/green]")
    cli.console.print()
