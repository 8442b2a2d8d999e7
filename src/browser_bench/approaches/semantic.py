"""Semantic tool approach: drive the page through its WebMCP tools."""

from __future__ import annotations

import json
import re
from typing import Any

from browser_bench import cli
from browser_bench.client.content import extract_text

from .base import Approach, RunContext, StepFailedError

MAX_PLANNED_CALLS = 8


class SemanticToolApproach(Approach):
    """List the page's WebMCP tools, let the model plan calls, execute them."""

    @property
    def label(self) -> str:
        return "WebMCP"

    async def run(self, ctx: RunContext) -> None:
        task = ctx.config.task

        cli.step(1, "Navigate to target page...")
        await ctx.navigate(ctx.config.target_url)

        cli.step(2, "List WebMCP tools...")
        tools_text = extract_text(await ctx.call_tool("list_webmcp_tools", {}))
        ctx.accumulator.increment_tool_calls()
        if not tools_text:
            raise StepFailedError("page exposed no WebMCP tools")
        cli.info(f"Found tools (first 300 chars): {tools_text[:300]}...")

        cli.step(3, "Ask model to plan tool calls...")
        plan_text = await ctx.ask(
            f"These WebMCP tools are available on the page:\n\n{tools_text}\n\n"
            f"Task: {task}\n\n"
            'Reply with a JSON array of calls, each {"name": ..., "arguments": {...}}.'
        )
        calls = parse_tool_calls(plan_text)
        if not calls:
            raise StepFailedError("model did not return any tool calls")

        outputs = []
        for i, call in enumerate(calls[:MAX_PLANNED_CALLS], start=4):
            cli.step(i, f"Call {call['name']}...")
            result = await ctx.call_tool(
                "call_webmcp_tool",
                {"name": call["name"], "arguments": call.get("arguments", {})},
            )
            ctx.accumulator.increment_tool_calls()
            text = extract_text(result) or ""
            outputs.append(f"{call['name']}: {text}")
            cli.info(f"Result: {text[:150]}...")

        cli.step(len(outputs) + 4, "Ask model to confirm...")
        await ctx.ask(
            f"Task: {task}\n\nTool results:\n" + "\n".join(outputs)
            + "\n\nWas the task completed? Answer briefly."
        )


def parse_tool_calls(text: str) -> list[dict[str, Any]]:
    """Extract ``{"name", "arguments"}`` objects from a model reply.

    Accepts a JSON array, a single JSON object, or either wrapped in prose
    or a code fence.
    """
    for pattern in (r"\[.*\]", r"\{.*\}"):
        match = re.search(pattern, text, re.DOTALL)
        if not match:
            continue
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError:
            continue
        items = parsed if isinstance(parsed, list) else [parsed]
        calls = [
            item for item in items
            if isinstance(item, dict) and isinstance(item.get("name"), str)
        ]
        if calls:
            return calls
    return []
