"""Accessibility-tree approach: text snapshots only, no images."""

from __future__ import annotations

from browser_bench import cli

from .base import Approach, RunContext, StepFailedError


class AccessibilityTreeApproach(Approach):

    @property
    def label(self) -> str:
        return "Accessibility tree"

    async def run(self, ctx: RunContext) -> None:
        task = ctx.config.task

        cli.step(1, "Navigate to target page...")
        await ctx.navigate(ctx.config.target_url)

        cli.step(2, "Take accessibility snapshot...")
        snapshot = await ctx.snapshot_text()
        if not snapshot:
            raise StepFailedError("accessibility snapshot was empty")
        ctx.accumulator.increment_tool_calls()
        cli.info(f"Snapshot length: {len(snapshot)} chars")

        cli.step(3, "Ask model to plan from the tree...")
        plan = await ctx.ask(
            f"Here's the accessibility tree of a web page. Task: {task}\n"
            f"List the element UIDs to interact with, in order, and the values to enter:\n\n{snapshot}"
        )
        cli.info(f"Response: {plan[:200]}...")

        cli.step(4, "Take snapshot to verify...")
        verification = await ctx.snapshot_text()
        ctx.accumulator.increment_tool_calls()

        cli.step(5, "Ask model to confirm from the tree...")
        await ctx.ask(
            f"Based on this accessibility tree, was the task completed? Task: {task}\n\n"
            f"{verification or 'No snapshot'}"
        )
