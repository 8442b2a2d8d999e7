"""Base approach classes and the per-run context they operate on."""

from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from browser_bench import cli
from browser_bench.accumulator import TokenAccumulator, TokenUsage
from browser_bench.client.content import extract_image, extract_text
from browser_bench.images import image_dimensions_from_base64
from browser_bench.tokens import estimate_cost_usd, estimate_image_tokens

if TYPE_CHECKING:
    from browser_bench.client.session import BrowserSession
    from browser_bench.config import BenchmarkConfig
    from browser_bench.llm.base import LLMClient
    from browser_bench.logging.logger import ExperimentLogger


class StepFailedError(RuntimeError):
    """A required step could not produce usable output; the run is void."""


@dataclass
class RunContext:
    """Everything one run of one approach touches. Never shared between runs."""
    approach: str
    config: BenchmarkConfig
    session: BrowserSession
    llm: LLMClient
    accumulator: TokenAccumulator = field(default_factory=TokenAccumulator)
    logger: ExperimentLogger | None = None
    tool_usage: dict[str, int] = field(default_factory=dict)
    llm_calls: int = 0

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> Any:
        start = time.time()
        result = await self.session.call_tool(name, arguments)
        duration = time.time() - start
        self.tool_usage[name] = self.tool_usage.get(name, 0) + 1
        if self.logger:
            self.logger.log_tool_call(self.approach, name, duration)
        return result

    async def navigate(self, url: str) -> None:
        await self.call_tool("navigate_page", {"url": url, "type": "url"})
        await asyncio.sleep(self.config.page_load_wait_seconds)
        cli.info(f"Navigated to {url}")

    def _record_llm_usage(self, usage: TokenUsage, has_image: bool) -> None:
        self.llm_calls += 1
        cli.info(f"Input tokens: {cli.format_number(usage.input_tokens)}")
        cli.info(f"Output tokens: {cli.format_number(usage.output_tokens)}")
        if self.logger:
            cost = estimate_cost_usd(usage.input_tokens, usage.output_tokens, self.config.pricing)
            self.logger.log_llm_call(self.approach, usage, has_image, cost)

    async def ask(self, prompt: str) -> str:
        """Text-only model call, counted as a text call."""
        response = await self.llm.send_prompt(prompt, max_tokens=self.config.llm.max_tokens)
        self.accumulator.add_text_call(response.usage)
        self._record_llm_usage(response.usage, has_image=False)
        return response.text

    async def capture_and_analyze(self, prompt: str) -> str | None:
        """Screenshot the page, estimate its image tokens, and ask the model
        about it. Returns None when no supported image came back."""
        result = await self.call_tool("take_screenshot", {})
        image = extract_image(result)
        if image is None:
            cli.error("Failed to capture screenshot")
            return None

        self.accumulator.increment_screenshots()
        dimensions = image_dimensions_from_base64(image.data, image.mime_type)
        image_tokens = estimate_image_tokens(dimensions.width, dimensions.height) if dimensions else 0
        cli.info(f"Screenshot size: {cli.format_bytes(image.size_bytes)}")
        if dimensions:
            cli.info(f"Image dimensions: {dimensions.width}x{dimensions.height} ({image_tokens} tokens)")
        if self.logger:
            self.logger.log_screenshot(self.approach, image.size_bytes, dimensions, image_tokens)

        response = await self.llm.analyze_screenshot(image, prompt, max_tokens=self.config.llm.max_tokens)
        self.accumulator.add_image_call(response.usage, image_tokens)
        self._record_llm_usage(response.usage, has_image=True)
        return response.text

    async def snapshot_text(self) -> str:
        return extract_text(await self.call_tool("take_snapshot", {})) or ""


class Approach(ABC):
    """One browser-automation strategy under comparison."""

    @property
    @abstractmethod
    def label(self) -> str:
        ...

    @abstractmethod
    async def run(self, ctx: RunContext) -> None:
        """Drive the task, recording usage into ``ctx.accumulator``.

        Raises StepFailedError (or lets remote errors propagate) when a
        required step fails.
        """
        ...
