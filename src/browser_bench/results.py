"""Per-run agent results and cross-run aggregation."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Sequence


@dataclass(frozen=True)
class AgentBenchmarkResult:
    """Result of one agent-driven run of one approach."""
    success: bool
    input_tokens: int = 0
    output_tokens: int = 0
    image_tokens: int = 0
    total_cost_usd: float = 0.0
    duration_ms: float = 0.0
    num_turns: int = 0
    tool_usage: dict[str, int] | None = None

    @classmethod
    def failed(cls, tool_usage: dict[str, int] | None = None) -> AgentBenchmarkResult:
        """Zeroed record for a run that could not complete."""
        return cls(success=False, tool_usage=tool_usage or None)


@dataclass
class AggregatedBenchmarkResults:
    approach: str
    runs: list[AgentBenchmarkResult] = field(default_factory=list)
    avg_input_tokens: float = 0.0
    avg_output_tokens: float = 0.0
    avg_image_tokens: float = 0.0
    avg_total_cost_usd: float = 0.0
    avg_duration_ms: float = 0.0
    avg_num_turns: float = 0.0
    success_rate: float = 0.0
    total_tool_usage: dict[str, int] | None = None

    @property
    def num_runs(self) -> int:
        return len(self.runs)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _mean(runs: Sequence[AgentBenchmarkResult], attr: str) -> float:
    return sum(getattr(r, attr) for r in runs) / len(runs)


def merge_tool_usage(runs: Sequence[AgentBenchmarkResult]) -> dict[str, int] | None:
    """Sum tool counts across runs; None when no run used any tool."""
    totals: dict[str, int] = {}
    for run in runs:
        for tool, count in (run.tool_usage or {}).items():
            totals[tool] = totals.get(tool, 0) + count
    return totals or None


def aggregate_results(
    approach: str,
    runs: Sequence[AgentBenchmarkResult],
) -> AggregatedBenchmarkResults:
    """Average per-run metrics. An empty ``runs`` yields a zeroed record."""
    if not runs:
        return AggregatedBenchmarkResults(approach=approach)

    return AggregatedBenchmarkResults(
        approach=approach,
        runs=list(runs),
        avg_input_tokens=_mean(runs, "input_tokens"),
        avg_output_tokens=_mean(runs, "output_tokens"),
        avg_image_tokens=_mean(runs, "image_tokens"),
        avg_total_cost_usd=_mean(runs, "total_cost_usd"),
        avg_duration_ms=_mean(runs, "duration_ms"),
        avg_num_turns=_mean(runs, "num_turns"),
        success_rate=sum(1 for r in runs if r.success) / len(runs),
        total_tool_usage=merge_tool_usage(runs),
    )


def save_summary(path: str | Path, aggregated: AggregatedBenchmarkResults) -> Path:
    """Write an aggregated record (runs included) as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(aggregated.to_dict(), f, indent=2, default=str)
    return path


def load_summary(path: str | Path) -> AggregatedBenchmarkResults:
    """Load a summary written by ``save_summary``; averages are recomputed."""
    with open(path) as f:
        data = json.load(f)
    runs = [AgentBenchmarkResult(**run) for run in data.get("runs", [])]
    return aggregate_results(data["approach"], runs)
