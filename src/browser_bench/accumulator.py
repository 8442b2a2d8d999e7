"""Per-run token accounting."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class TokenUsage:
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass(frozen=True)
class BenchmarkResult:
    """Snapshot of one approach's accounting for a single run."""
    approach: str
    total_input_tokens: int
    total_output_tokens: int
    total_tokens: int
    image_tokens: int
    screenshots_taken: int
    tool_call_count: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class TokenAccumulator:
    """Running totals for one benchmark run.

    Owned by exactly one run; create a new one per run rather than sharing
    an instance across runs.
    """

    def __init__(self) -> None:
        self.input_tokens = 0
        self.output_tokens = 0
        self.image_tokens = 0
        self.screenshot_count = 0
        self.tool_call_count = 0

    def add_text_call(self, usage: TokenUsage) -> None:
        self.input_tokens += usage.input_tokens
        self.output_tokens += usage.output_tokens

    def add_image_call(self, usage: TokenUsage, image_tokens: int) -> None:
        # image_tokens is the width*height/750 estimate; the usage object
        # already contains whatever the API billed for the image.
        self.input_tokens += usage.input_tokens
        self.output_tokens += usage.output_tokens
        self.image_tokens += image_tokens

    def increment_screenshots(self) -> None:
        self.screenshot_count += 1

    def increment_tool_calls(self, count: int = 1) -> None:
        self.tool_call_count += count

    def get_result(self, approach: str) -> BenchmarkResult:
        return BenchmarkResult(
            approach=approach,
            total_input_tokens=self.input_tokens,
            total_output_tokens=self.output_tokens,
            total_tokens=self.input_tokens + self.output_tokens,
            image_tokens=self.image_tokens,
            screenshots_taken=self.screenshot_count,
            tool_call_count=self.tool_call_count if self.tool_call_count > 0 else None,
        )
