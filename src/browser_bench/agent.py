"""Agent SDK runs: build the query options and turn the message stream into
an AgentBenchmarkResult.

Messages may be ``claude_agent_sdk`` objects or the equivalent stream-json
dicts:

- assistant: ``tool_use`` blocks, each counted once in the tool-usage
  histogram.
- user: ``tool_use_result.content`` (or the message's ``tool_result``
  blocks) may carry base64 images; their estimated tokens are summed.
- result: final usage, cost, duration and turn count for the run.

Events must be recorded in arrival order. A stream that ends without a
result message yields a failed run.
"""

from __future__ import annotations

from typing import Any, AsyncIterable

from claude_agent_sdk import (
    AssistantMessage,
    ClaudeAgentOptions,
    ResultMessage,
    ToolResultBlock,
    ToolUseBlock,
    UserMessage,
)

from browser_bench.client.content import content_items, get_field, image_mime_type
from browser_bench.config import ApproachType, BenchmarkConfig, Pricing
from browser_bench.results import AgentBenchmarkResult
from browser_bench.tokens import DEFAULT_PRICING, estimate_cost_usd, image_tokens_from_base64

SCREENSHOT_SYSTEM_PROMPT = """You are a browser automation agent.

IMPORTANT: You MUST use take_screenshot to visually inspect the page. Do NOT rely solely on take_snapshot (DOM snapshots). Take actual screenshots to see what's on screen, analyze the visual layout, and verify your actions.

For complex multi-step tasks:
1. Navigate to the page
2. Take a SCREENSHOT to see the current state
3. Analyze the screenshot to understand the UI layout
4. Use take_snapshot to find element UIDs for clicking/filling
5. Click buttons and fill forms step by step
6. Take a SCREENSHOT after each major action to verify
7. Take a final SCREENSHOT to confirm the result

Always take screenshots before and after important actions."""

SEMANTIC_SYSTEM_PROMPT = """You are a browser automation agent. The page you're testing has WebMCP tools available that expose semantic APIs for the application's functionality.

IMPORTANT: Prioritize using WebMCP tools (via list_webmcp_tools and call_webmcp_tool) over taking screenshots. Only use screenshots if WebMCP tools are unavailable or you need visual verification. WebMCP tools provide direct programmatic access to the application's state and actions."""

ACCESSIBILITY_SYSTEM_PROMPT = """You are a browser automation agent.

Use take_snapshot to read the page's accessibility tree and find element UIDs, then click and fill elements by UID. Do not take screenshots. Take a final snapshot to confirm the result."""

SYSTEM_PROMPTS: dict[ApproachType, str] = {
    ApproachType.SCREENSHOT: SCREENSHOT_SYSTEM_PROMPT,
    ApproachType.SEMANTIC_TOOLS: SEMANTIC_SYSTEM_PROMPT,
    ApproachType.ACCESSIBILITY_TREE: ACCESSIBILITY_SYSTEM_PROMPT,
}

WEBMCP_TOOLS = ["list_webmcp_tools", "call_webmcp_tool"]

DISALLOWED_TOOLS: dict[ApproachType, list[str]] = {
    ApproachType.SCREENSHOT: WEBMCP_TOOLS,
    ApproachType.SEMANTIC_TOOLS: [],
    ApproachType.ACCESSIBILITY_TREE: [*WEBMCP_TOOLS, "take_screenshot"],
}

AGENT_LABELS: dict[ApproachType, str] = {
    ApproachType.SCREENSHOT: "Screenshot agent",
    ApproachType.SEMANTIC_TOOLS: "WebMCP agent",
    ApproachType.ACCESSIBILITY_TREE: "Accessibility tree agent",
}

_MESSAGE_KINDS = ((AssistantMessage, "assistant"), (UserMessage, "user"), (ResultMessage, "result"))
_BLOCK_KINDS = ((ToolUseBlock, "tool_use"), (ToolResultBlock, "tool_result"))


def _kind(obj: Any, kinds: tuple[tuple[type, str], ...]) -> Any:
    for cls, name in kinds:
        if isinstance(obj, cls):
            return name
    return get_field(obj, "type")


def _blocks(message: Any) -> list[Any]:
    # stream-json nests blocks under ``message``; SDK objects hold them directly
    inner = get_field(message, "message")
    return content_items(inner if inner is not None else message)


def _image_payload(item: Any) -> tuple[Any, Any]:
    # MCP content carries data/mimeType; API-style blocks wrap them in ``source``
    source = get_field(item, "source")
    if source is not None:
        return get_field(source, "data"), get_field(source, "media_type")
    return get_field(item, "data"), image_mime_type(item)


class AgentRunRecorder:
    """Accumulates one agent run's events. Not shared between runs."""

    def __init__(self, pricing: Pricing = DEFAULT_PRICING):
        self.pricing = pricing
        self.tool_usage: dict[str, int] = {}
        self.image_tokens = 0
        self.result_message: Any = None

    @property
    def finished(self) -> bool:
        return self.result_message is not None

    def record(self, message: Any) -> None:
        kind = _kind(message, _MESSAGE_KINDS)
        if kind == "assistant":
            self._record_tool_uses(message)
        elif kind == "user":
            self._record_tool_results(message)
        elif kind == "result":
            self.result_message = message

    async def consume(self, messages: AsyncIterable[Any]) -> None:
        """Record every message of ``messages`` in arrival order."""
        async for message in messages:
            self.record(message)

    def _record_tool_uses(self, message: Any) -> None:
        for block in _blocks(message):
            if _kind(block, _BLOCK_KINDS) != "tool_use":
                continue
            name = get_field(block, "name")
            if not name:
                continue
            self.tool_usage[name] = self.tool_usage.get(name, 0) + 1

    def _record_tool_results(self, message: Any) -> None:
        tool_result = get_field(message, "tool_use_result")
        if tool_result:
            results = [tool_result]
        else:
            results = [block for block in _blocks(message) if _kind(block, _BLOCK_KINDS) == "tool_result"]
        for result in results:
            for item in content_items(result):
                if get_field(item, "type") != "image":
                    continue
                data, mime_type = _image_payload(item)
                if not data or not mime_type:
                    continue
                self.image_tokens += image_tokens_from_base64(data, mime_type) or 0

    def finalize(self) -> AgentBenchmarkResult:
        if self.result_message is None:
            return AgentBenchmarkResult.failed(tool_usage=dict(self.tool_usage))

        msg = self.result_message
        usage = get_field(msg, "usage") or {}
        input_tokens = get_field(usage, "input_tokens") or 0
        output_tokens = get_field(usage, "output_tokens") or 0
        cost = get_field(msg, "total_cost_usd")
        if cost is None:
            cost = estimate_cost_usd(input_tokens, output_tokens, self.pricing)

        return AgentBenchmarkResult(
            success=get_field(msg, "subtype") == "success",
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            image_tokens=self.image_tokens,
            total_cost_usd=cost,
            duration_ms=get_field(msg, "duration_ms") or 0,
            num_turns=get_field(msg, "num_turns") or 0,
            tool_usage=dict(self.tool_usage) or None,
        )


def agent_prompt(config: BenchmarkConfig) -> str:
    return f"Navigate to {config.target_url}, explore the application, and complete this task:\n\n{config.task}"


def agent_options(config: BenchmarkConfig, approach: ApproachType) -> ClaudeAgentOptions:
    """Query options for one approach: the browser MCP server plus that
    approach's system prompt and blocked tools."""
    agent = config.agent
    server = agent.server_name
    return ClaudeAgentOptions(
        system_prompt=agent.system_prompts.get(approach, SYSTEM_PROMPTS[approach]),
        mcp_servers={
            server: {
                "type": "stdio",
                "command": config.client.command,
                "args": config.client.server_args(),
            },
        },
        disallowed_tools=[f"mcp__{server}__{tool}" for tool in DISALLOWED_TOOLS[approach]],
        permission_mode="bypassPermissions",
        model=config.llm.model,
        max_turns=agent.max_turns,
    )
