"""Tests for comparisons, projections and console rendering."""

import io
import math

import pytest
from rich.console import Console

from browser_bench import cli
from browser_bench.accumulator import BenchmarkResult
from browser_bench.report import (
    compare_many,
    compare_results,
    percent_change,
    print_approach_results,
    print_comparison,
    print_cost_analysis,
    print_multi_comparison,
    print_run_comparison,
    print_run_cost_analysis,
    project_cost,
    short_tool_name,
)
from browser_bench.results import AgentBenchmarkResult, aggregate_results


@pytest.fixture
def output(monkeypatch) -> io.StringIO:
    buffer = io.StringIO()
    monkeypatch.setattr(cli, "console", Console(file=buffer, width=200, color_system=None))
    return buffer


def _make_agg(approach: str, **kwargs):
    run = AgentBenchmarkResult(**{
        "success": True,
        "input_tokens": 1000,
        "output_tokens": 100,
        "image_tokens": 0,
        "total_cost_usd": 0.02,
        "duration_ms": 5000,
        "num_turns": 5,
        **kwargs,
    })
    return aggregate_results(approach, [run])


def test_percent_change_zero_baseline():
    assert percent_change(0, 0) == 0.0
    assert percent_change(0, 500) == 0.0
    assert percent_change(200, 50) == 75.0
    assert percent_change(100, 150) == -50.0


def test_compare_polarity():
    screenshot = _make_agg("Screenshot", input_tokens=4000, image_tokens=2000, success=False)
    webmcp = _make_agg("WebMCP", input_tokens=1000)
    rows = {row.metric: row for row in compare_results(screenshot, webmcp)}

    assert rows["Input tokens"].difference == 3000
    assert rows["Input tokens"].percent == 75.0
    assert rows["Input tokens"].better == "candidate"
    assert rows["Success rate"].better == "candidate"
    assert rows["Output tokens"].better is None


def test_compare_zero_baseline_is_finite():
    empty = aggregate_results("Empty", [])
    other = _make_agg("Other")
    for row in compare_results(empty, other):
        assert math.isfinite(row.percent)
        assert row.percent == 0.0


def test_compare_many_uses_first_as_baseline():
    a, b, c = _make_agg("A", input_tokens=1000), _make_agg("B", input_tokens=500), _make_agg("C", input_tokens=2000)
    comparisons = compare_many([a, b, c])
    assert [cand.approach for cand, _ in comparisons] == ["B", "C"]
    assert comparisons[0][1][0].percent == 50.0
    assert comparisons[1][1][0].percent == -100.0
    assert comparisons[1][1][0].better == "baseline"
    assert compare_many([]) == []


def test_project_cost():
    agg = _make_agg("A", total_cost_usd=0.05)
    assert project_cost(agg, 100) == pytest.approx(5.0)
    assert project_cost(agg, 1000) == pytest.approx(50.0)


def test_short_tool_name():
    assert short_tool_name("mcp__chrome-devtools__take_screenshot") == "take_screenshot"
    assert short_tool_name("Read") == "Read"


def test_print_approach_results(output):
    agg = _make_agg("A", tool_usage={"mcp__chrome-devtools__take_screenshot": 3, "mcp__chrome-devtools__click": 5})
    print_approach_results(agg)
    text = output.getvalue()
    assert "Success rate" in text
    assert "100%" in text
    assert text.index("click") < text.index("take_screenshot")


def test_print_comparison(output):
    print_comparison(_make_agg("Screenshot", input_tokens=4000), _make_agg("WebMCP"), "FINAL")
    text = output.getvalue()
    assert "FINAL" in text
    assert "TOKEN REDUCTION (WebMCP vs Screenshot): 75.0%" in text


def test_print_multi_comparison_three_way(output):
    results = [_make_agg("Screenshot"), _make_agg("WebMCP"), _make_agg("Accessibility tree")]
    print_multi_comparison(results)
    text = output.getvalue()
    assert "Δ WebMCP" in text
    assert "Δ Accessibility tree" in text


def test_print_handles_empty_results(output):
    empty = aggregate_results("Empty", [])
    print_approach_results(empty)
    print_comparison(empty, empty)
    print_cost_analysis([empty, empty])
    print_multi_comparison([])
    text = output.getvalue()
    assert "nan" not in text.lower()
    assert "inf" not in text.lower()


def test_print_cost_analysis(output):
    print_cost_analysis([_make_agg("A", total_cost_usd=0.04), _make_agg("B", total_cost_usd=0.01)])
    text = output.getvalue()
    assert "$4.0000" in text
    assert "$0.030000 (75.0%)" in text


def test_print_run_comparison(output):
    screenshot = BenchmarkResult("Screenshot", 10000, 800, 10800, 3960, 2, None)
    webmcp = BenchmarkResult("WebMCP", 2000, 200, 2200, 0, 0, 5)
    print_run_comparison(screenshot, webmcp)
    print_run_cost_analysis(screenshot, webmcp)
    text = output.getvalue()
    assert "TOKEN REDUCTION: 79.6%" in text
    assert "Extrapolated to 100 interactions" in text


def test_print_run_comparison_zero_totals(output):
    zero = BenchmarkResult("A", 0, 0, 0, 0, 0, None)
    print_run_comparison(zero, zero)
    print_run_cost_analysis(zero, zero)
    assert "TOKEN REDUCTION: 0.0%" in output.getvalue()
