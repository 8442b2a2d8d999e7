"""Sequential multi-run benchmark harness."""

from __future__ import annotations

import time
from typing import Any, AsyncIterable, Callable

from claude_agent_sdk import query

from browser_bench import cli
from browser_bench.agent import AGENT_LABELS, AgentRunRecorder, agent_options, agent_prompt
from browser_bench.approaches import create_approach
from browser_bench.approaches.base import Approach, RunContext
from browser_bench.client.session import BrowserSession
from browser_bench.config import ApproachType, BenchmarkConfig, LLMConfig
from browser_bench.llm.base import LLMClient
from browser_bench.logging.logger import ExperimentLogger
from browser_bench.results import (
    AgentBenchmarkResult,
    AggregatedBenchmarkResults,
    aggregate_results,
)
from browser_bench.tokens import estimate_cost_usd


class BenchmarkHarness:
    """Runs each approach ``num_runs`` times, one run at a time.

    Every run gets its own BrowserSession and TokenAccumulator; the session is
    closed before the next run starts.
    """

    def __init__(
        self,
        config: BenchmarkConfig,
        logger: ExperimentLogger | None = None,
        llm_client: LLMClient | None = None,
        session_factory: Callable[[], BrowserSession] | None = None,
    ):
        self.config = config
        self.logger = logger
        self.llm_client: LLMClient = llm_client or create_llm_client(config.llm)
        self.session_factory = session_factory or (lambda: BrowserSession(config.client))

    async def run_once(self, approach: Approach, run_index: int = 0) -> AgentBenchmarkResult:
        """One isolated run. Any failure yields a failed, zeroed result."""
        if self.logger:
            self.logger.log_run_start(approach.label, run_index, self.config.model_dump(mode="json"))

        session = self.session_factory()
        ctx = RunContext(
            approach=approach.label,
            config=self.config,
            session=session,
            llm=self.llm_client,
            logger=self.logger,
        )
        start = time.monotonic()
        try:
            await session.connect()
            await approach.run(ctx)
        except Exception as e:
            cli.error(f"{approach.label} run {run_index + 1} failed: {e}")
            result = AgentBenchmarkResult.failed(tool_usage=dict(ctx.tool_usage))
        else:
            result = self._build_result(ctx, (time.monotonic() - start) * 1000)
        finally:
            await session.close()

        if self.logger:
            self.logger.log_run_end(approach.label, run_index, {
                "result": ctx.accumulator.get_result(approach.label).to_dict(),
                "success": result.success,
                "total_cost_usd": result.total_cost_usd,
                "duration_ms": result.duration_ms,
            })
        return result

    def _build_result(self, ctx: RunContext, duration_ms: float) -> AgentBenchmarkResult:
        snapshot = ctx.accumulator.get_result(ctx.approach)
        return AgentBenchmarkResult(
            success=True,
            input_tokens=snapshot.total_input_tokens,
            output_tokens=snapshot.total_output_tokens,
            image_tokens=snapshot.image_tokens,
            total_cost_usd=estimate_cost_usd(
                snapshot.total_input_tokens, snapshot.total_output_tokens, self.config.pricing,
            ),
            duration_ms=duration_ms,
            num_turns=ctx.llm_calls,
            tool_usage=dict(ctx.tool_usage) or None,
        )

    async def run(self, approach: Approach) -> AggregatedBenchmarkResults:
        runs = []
        for i in range(self.config.num_runs):
            cli.section(f"{approach.label.upper()}: RUN {i + 1}/{self.config.num_runs}")
            result = await self.run_once(approach, i)
            runs.append(result)
            _report_run(result)
        return aggregate_results(approach.label, runs)

    async def run_all(self) -> list[AggregatedBenchmarkResults]:
        """Run every configured approach, in config order."""
        return [await self.run(create_approach(a)) for a in self.config.approaches]

    async def run_agent(
        self,
        label: str,
        make_stream: Callable[[], AsyncIterable[Any]],
    ) -> AggregatedBenchmarkResults:
        """Aggregate ``num_runs`` agent-driven runs.

        ``make_stream`` starts a fresh agent query per run and returns its
        message stream.
        """
        runs = []
        for i in range(self.config.num_runs):
            cli.section(f"{label.upper()}: RUN {i + 1}/{self.config.num_runs}")
            recorder = AgentRunRecorder(self.config.pricing)
            try:
                await recorder.consume(make_stream())
            except Exception as e:
                cli.error(f"{label} run {i + 1} failed: {e}")
                result = AgentBenchmarkResult.failed(tool_usage=dict(recorder.tool_usage))
            else:
                result = recorder.finalize()
            runs.append(result)
            _report_run(result)
        return aggregate_results(label, runs)

    async def run_agent_approach(self, approach: ApproachType) -> AggregatedBenchmarkResults:
        """Let an agent drive the browser MCP server with ``approach``'s
        system prompt and tool restrictions."""
        prompt = agent_prompt(self.config)
        options = agent_options(self.config, approach)
        return await self.run_agent(AGENT_LABELS[approach], lambda: query(prompt=prompt, options=options))

    async def run_all_agents(self) -> list[AggregatedBenchmarkResults]:
        return [await self.run_agent_approach(a) for a in self.config.agent.approaches]


def _report_run(result: AgentBenchmarkResult) -> None:
    if result.success:
        cli.success(
            f"Completed: {result.input_tokens:,} in / {result.output_tokens:,} out, "
            f"${result.total_cost_usd:.4f}"
        )
    else:
        cli.error("Failed")


def create_llm_client(llm_config: LLMConfig) -> LLMClient:
    """Create LLM client based on provider config."""
    provider = llm_config.provider

    if provider == "anthropic":
        from browser_bench.llm.anthropic import AnthropicClient
        return AnthropicClient(model=llm_config.model, api_key=llm_config.api_key)

    if provider in ("openai", "vllm", "local"):
        from browser_bench.llm.openai_compat import OpenAICompatClient
        return OpenAICompatClient(
            model=llm_config.model,
            base_url=llm_config.base_url or "http://localhost:8000/v1",
            api_key=llm_config.api_key or "dummy",
        )

    raise ValueError(f"Unknown LLM provider: {provider}")
