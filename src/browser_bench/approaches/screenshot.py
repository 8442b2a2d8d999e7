"""Screenshot approach: the model sees the page only through images."""

from __future__ import annotations

from browser_bench import cli

from .base import Approach, RunContext, StepFailedError


class ScreenshotApproach(Approach):
    """Screenshots for understanding and verification, DOM snapshots only to
    locate element UIDs."""

    @property
    def label(self) -> str:
        return "Screenshot"

    async def run(self, ctx: RunContext) -> None:
        task = ctx.config.task

        cli.step(1, "Navigate to target page...")
        await ctx.navigate(ctx.config.target_url)

        cli.step(2, "Take screenshot to see the page...")
        overview = await ctx.capture_and_analyze(
            f"I need to complete this task: {task}\n\n"
            "Looking at this screenshot, describe what you see and how I might go "
            "about it. What UI elements are available?"
        )
        if overview is None:
            raise StepFailedError("initial screenshot could not be captured")
        cli.info(f"Response: {overview[:200]}...")

        cli.step(3, "Take DOM snapshot to find elements...")
        snapshot = await ctx.snapshot_text()
        cli.info(f"Snapshot length: {len(snapshot)} chars")

        cli.step(4, "Ask model to locate the controls...")
        await ctx.ask(
            f"Here's a DOM snapshot of the page. Task: {task}\n"
            f"Tell me the UIDs of the elements I need to interact with:\n\n{snapshot or 'No snapshot'}"
        )

        cli.step(5, "Take screenshot to verify progress...")
        if await ctx.capture_and_analyze(f"Does the page look ready to finish this task? {task}") is None:
            cli.warn("Failed to capture verification screenshot")

        cli.step(6, "Take final verification screenshot...")
        if await ctx.capture_and_analyze(f"Was this task completed successfully? {task}") is None:
            cli.warn("Failed to capture final screenshot")
