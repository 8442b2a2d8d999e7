"""Tests for cross-run aggregation and summary persistence."""

import tempfile
from pathlib import Path

from browser_bench.results import (
    AgentBenchmarkResult,
    aggregate_results,
    load_summary,
    save_summary,
)


def _make_run(**kwargs) -> AgentBenchmarkResult:
    defaults = {
        "success": True,
        "input_tokens": 100,
        "output_tokens": 20,
        "image_tokens": 0,
        "total_cost_usd": 0.01,
        "duration_ms": 1000,
        "num_turns": 4,
    }
    defaults.update(kwargs)
    return AgentBenchmarkResult(**defaults)


def test_aggregate_empty():
    agg = aggregate_results("Screenshot", [])
    assert agg.approach == "Screenshot"
    assert agg.runs == []
    assert agg.avg_input_tokens == 0
    assert agg.avg_total_cost_usd == 0
    assert agg.success_rate == 0
    assert agg.total_tool_usage is None


def test_aggregate_identical_runs():
    agg = aggregate_results("A", [_make_run() for _ in range(3)])
    assert agg.avg_input_tokens == 100
    assert agg.avg_output_tokens == 20
    assert agg.avg_num_turns == 4
    assert agg.success_rate == 1.0
    assert agg.num_runs == 3


def test_aggregate_means_and_success_rate():
    runs = [
        _make_run(input_tokens=100, duration_ms=1000),
        _make_run(input_tokens=300, duration_ms=3000),
        AgentBenchmarkResult.failed(),
        _make_run(input_tokens=0, success=False),
    ]
    agg = aggregate_results("A", runs)
    assert agg.avg_input_tokens == 100
    assert agg.avg_duration_ms == (1000 + 3000 + 0 + 1000) / 4
    assert agg.success_rate == 0.5


def test_aggregate_tool_usage_union():
    runs = [
        _make_run(tool_usage={"take_screenshot": 3, "click": 1}),
        _make_run(tool_usage=None),
        _make_run(tool_usage={"take_screenshot": 2, "fill": 4}),
    ]
    agg = aggregate_results("A", runs)
    assert agg.total_tool_usage == {"take_screenshot": 5, "click": 1, "fill": 4}


def test_aggregate_does_not_mutate_input():
    runs = [_make_run(tool_usage={"click": 1}), _make_run(tool_usage={"click": 2})]
    aggregate_results("A", runs)
    assert runs[0].tool_usage == {"click": 1}
    assert len(runs) == 2


def test_failed_result_is_zeroed():
    failed = AgentBenchmarkResult.failed(tool_usage={"navigate_page": 1})
    assert failed.success is False
    assert failed.input_tokens == 0
    assert failed.total_cost_usd == 0
    assert failed.tool_usage == {"navigate_page": 1}
    assert AgentBenchmarkResult.failed().tool_usage is None


def test_save_and_load_summary():
    agg = aggregate_results("WebMCP", [_make_run(tool_usage={"call_webmcp_tool": 2}), _make_run()])
    with tempfile.TemporaryDirectory() as tmpdir:
        path = save_summary(Path(tmpdir) / "nested" / "webmcp.json", agg)
        loaded = load_summary(path)
    assert loaded.approach == "WebMCP"
    assert loaded.runs == agg.runs
    assert loaded.avg_input_tokens == agg.avg_input_tokens
    assert loaded.total_tool_usage == {"call_webmcp_tool": 2}
