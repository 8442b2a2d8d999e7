"""Structured JSON benchmark logger."""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any

from browser_bench.accumulator import TokenUsage
from browser_bench.images import ImageDescriptor


class ExperimentLogger:
    """Logs all benchmark events as structured JSON lines."""

    def __init__(self, benchmark_id: str, output_dir: str = "results"):
        self.benchmark_id = benchmark_id
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.log_path = self.output_dir / f"{benchmark_id}.jsonl"
        self._events: list[dict[str, Any]] = []

    @property
    def events(self) -> list[dict[str, Any]]:
        return list(self._events)

    def _write_event(self, event: dict[str, Any]) -> None:
        event["benchmark_id"] = self.benchmark_id
        event["timestamp"] = time.time()
        self._events.append(event)
        with open(self.log_path, "a") as f:
            f.write(json.dumps(event, default=str) + "\n")

    def log_run_start(self, approach: str, run_index: int, config: dict[str, Any]) -> None:
        self._write_event({
            "event": "run_start",
            "approach": approach,
            "run_index": run_index,
            "config": config,
        })

    def log_llm_call(
        self,
        approach: str,
        usage: TokenUsage,
        has_image: bool,
        cost_usd: float = 0.0,
    ) -> None:
        self._write_event({
            "event": "llm_call",
            "approach": approach,
            "input_tokens": usage.input_tokens,
            "output_tokens": usage.output_tokens,
            "has_image": has_image,
            "cost_usd": round(cost_usd, 6),
        })

    def log_tool_call(self, approach: str, tool_name: str, duration_seconds: float) -> None:
        self._write_event({
            "event": "tool_call",
            "approach": approach,
            "tool_name": tool_name,
            "duration_seconds": duration_seconds,
        })

    def log_screenshot(
        self,
        approach: str,
        size_bytes: int,
        dimensions: ImageDescriptor | None,
        image_tokens: int,
    ) -> None:
        self._write_event({
            "event": "screenshot",
            "approach": approach,
            "size_bytes": size_bytes,
            "width": dimensions.width if dimensions else None,
            "height": dimensions.height if dimensions else None,
            "image_tokens": image_tokens,
        })

    def log_run_end(self, approach: str, run_index: int, result: dict[str, Any]) -> None:
        self._write_event({
            "event": "run_end",
            "approach": approach,
            "run_index": run_index,
            "result": result,
        })
