"""Configuration data models for browser automation benchmarks."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator


class ApproachType(str, Enum):
    SCREENSHOT = "screenshot"                  # raw screenshot analysis
    SEMANTIC_TOOLS = "semantic_tools"          # WebMCP tool calls
    ACCESSIBILITY_TREE = "accessibility_tree"  # a11y snapshot inspection


class Pricing(BaseModel):
    """Per-million-token pricing snapshot (USD)."""
    input_per_million: float = 3.0
    output_per_million: float = 15.0


class LLMConfig(BaseModel):
    provider: str = "anthropic"
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 64000
    base_url: str | None = None
    api_key: str | None = None


class Viewport(BaseModel):
    # 14-inch MacBook
    width: int = 1512
    height: int = 982


class ClientConfig(BaseModel):
    """How to launch the browser automation MCP server."""
    command: str = "npx"
    args: list[str] = Field(default_factory=lambda: ["@mcp-b/chrome-devtools-mcp@latest"])
    headless: bool = True
    headless_flag: str = "--headless"
    viewport: Viewport = Field(default_factory=Viewport)
    client_name: str = "benchmark-client"
    client_version: str = "1.0.0"

    def server_args(self, headless: bool | None = None) -> list[str]:
        use_headless = self.headless if headless is None else headless
        return [*self.args, self.headless_flag] if use_headless else list(self.args)


class AgentConfig(BaseModel):
    """Agent SDK mode: the agent drives the MCP server itself."""
    server_name: str = "chrome-devtools"
    approaches: list[ApproachType] = Field(
        default_factory=lambda: [ApproachType.SCREENSHOT, ApproachType.SEMANTIC_TOOLS]
    )
    # Per-approach system prompt overrides
    system_prompts: dict[ApproachType, str] = Field(default_factory=dict)
    max_turns: int | None = None


class BenchmarkConfig(BaseModel):
    """Configuration for a full benchmark comparison."""
    benchmark_id: str
    target_url: str = "http://localhost:5173"
    task: str = (
        "Create a new event titled \"Team Standup\" for tomorrow at 10:00 AM "
        "lasting 30 minutes, then verify it appears on the calendar."
    )
    approaches: list[ApproachType] = Field(
        default_factory=lambda: [ApproachType.SCREENSHOT, ApproachType.SEMANTIC_TOOLS]
    )
    num_runs: int = 3
    page_load_wait_seconds: float = 2.0
    output_dir: str = "results"
    llm: LLMConfig = Field(default_factory=LLMConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)
    # Defaults to the published rate for llm.model
    pricing: Pricing | None = None

    @model_validator(mode="after")
    def _default_pricing(self) -> BenchmarkConfig:
        if self.pricing is None:
            from browser_bench.tokens import pricing_for_model
            self.pricing = pricing_for_model(self.llm.model)
        return self


def load_config(path: str | Path) -> BenchmarkConfig:
    """Load benchmark config from YAML file."""
    with open(path) as f:
        data = yaml.safe_load(f)
    return BenchmarkConfig(**data)
