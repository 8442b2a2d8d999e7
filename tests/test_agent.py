"""Tests for recording agent SDK message streams."""

import asyncio
import base64
import struct

from claude_agent_sdk import AssistantMessage, ResultMessage, TextBlock, ToolResultBlock, ToolUseBlock, UserMessage

from browser_bench.agent import AgentRunRecorder, agent_options, agent_prompt
from browser_bench.config import ApproachType, BenchmarkConfig

GIF_800x600 = base64.b64encode(b"GIF89a" + struct.pack("<HH", 800, 600) + b"\x00" * 4).decode()


def _assistant(*tool_names: str) -> dict:
    return {
        "type": "assistant",
        "message": {"content": [{"type": "tool_use", "name": n, "input": {}} for n in tool_names]},
    }


def _tool_result(*images: tuple[str, str]) -> dict:
    return {
        "type": "user",
        "tool_use_result": {
            "content": [{"type": "image", "data": d, "mimeType": m} for d, m in images],
        },
    }


def _result(subtype: str = "success", **kwargs) -> dict:
    message = {
        "type": "result",
        "subtype": subtype,
        "usage": {"input_tokens": 12000, "output_tokens": 900},
        "total_cost_usd": 0.05,
        "duration_ms": 42000,
        "num_turns": 7,
    }
    message.update(kwargs)
    return message


async def _stream(messages):
    for message in messages:
        yield message


def test_records_full_run():
    messages = [
        _assistant("mcp__chrome-devtools__navigate_page"),
        _assistant("mcp__chrome-devtools__take_screenshot", "mcp__chrome-devtools__take_screenshot"),
        _tool_result((GIF_800x600, "image/gif")),
        _tool_result((GIF_800x600, "image/gif")),
        _result(),
    ]
    recorder = AgentRunRecorder()
    asyncio.run(recorder.consume(_stream(messages)))
    result = recorder.finalize()
    assert result.success is True
    assert result.input_tokens == 12000
    assert result.output_tokens == 900
    assert result.image_tokens == 1280
    assert result.total_cost_usd == 0.05
    assert result.num_turns == 7
    assert result.tool_usage == {
        "mcp__chrome-devtools__navigate_page": 1,
        "mcp__chrome-devtools__take_screenshot": 2,
    }


def test_missing_result_is_failed():
    recorder = AgentRunRecorder()
    recorder.record(_assistant("Read"))
    result = recorder.finalize()
    assert recorder.finished is False
    assert result.success is False
    assert result.input_tokens == 0
    assert result.tool_usage == {"Read": 1}


def test_error_subtype_is_not_success():
    recorder = AgentRunRecorder()
    recorder.record(_result("error_max_turns"))
    assert recorder.finalize().success is False


def test_unsupported_or_broken_images_count_zero():
    recorder = AgentRunRecorder()
    recorder.record(_tool_result((GIF_800x600, "image/bmp"), ("bm90IGFuIGltYWdl", "image/png")))
    recorder.record(_result())
    assert recorder.finalize().image_tokens == 0


def test_tool_result_blocks_in_message_content():
    recorder = AgentRunRecorder()
    recorder.record({
        "type": "user",
        "message": {"content": [{
            "type": "tool_result",
            "content": [{"type": "image", "data": GIF_800x600, "mimeType": "image/gif"}],
        }]},
    })
    recorder.record({"type": "user", "message": {"content": [{"type": "tool_result", "content": "plain text"}]}})
    recorder.record(_result())
    assert recorder.finalize().image_tokens == 640


def test_missing_cost_is_estimated():
    recorder = AgentRunRecorder()
    recorder.record(_result(total_cost_usd=None, usage={"input_tokens": 1_000_000, "output_tokens": 1_000_000}))
    assert recorder.finalize().total_cost_usd == 18


def test_tool_use_without_name_is_skipped():
    recorder = AgentRunRecorder()
    recorder.record({"type": "assistant", "message": {"content": [{"type": "tool_use", "input": {}}]}})
    recorder.record(_assistant("click"))
    recorder.record(_result())
    assert recorder.finalize().tool_usage == {"click": 1}


def test_malformed_mime_type_counts_zero():
    recorder = AgentRunRecorder()
    recorder.record(_tool_result((GIF_800x600, {"x": 1}), (GIF_800x600, ["image/gif"])))
    recorder.record(_result())
    assert recorder.finalize().image_tokens == 0


def test_api_style_image_source():
    recorder = AgentRunRecorder()
    recorder.record({
        "type": "user",
        "message": {"content": [{
            "type": "tool_result",
            "content": [{"type": "image", "source": {"type": "base64", "media_type": "image/gif", "data": GIF_800x600}}],
        }]},
    })
    recorder.record(_result())
    assert recorder.finalize().image_tokens == 640


def test_records_sdk_message_objects():
    messages = [
        AssistantMessage(
            content=[
                TextBlock(text="Taking a screenshot"),
                ToolUseBlock(id="t1", name="mcp__chrome-devtools__take_screenshot", input={}),
            ],
            model="claude-sonnet-4-20250514",
        ),
        UserMessage(content=[ToolResultBlock(
            tool_use_id="t1",
            content=[{"type": "image", "data": GIF_800x600, "mimeType": "image/gif"}],
        )]),
        ResultMessage(
            subtype="success",
            duration_ms=3000,
            duration_api_ms=2500,
            is_error=False,
            num_turns=2,
            session_id="s1",
            total_cost_usd=0.02,
            usage={"input_tokens": 4000, "output_tokens": 200},
        ),
    ]
    recorder = AgentRunRecorder()
    asyncio.run(recorder.consume(_stream(messages)))
    result = recorder.finalize()
    assert result.success is True
    assert result.input_tokens == 4000
    assert result.image_tokens == 640
    assert result.num_turns == 2
    assert result.tool_usage == {"mcp__chrome-devtools__take_screenshot": 1}


def test_agent_options_per_approach():
    config = BenchmarkConfig(
        benchmark_id="agent",
        target_url="https://calendar.example",
        client={"args": ["-y", "@mcp-b/chrome-devtools-mcp@latest"]},
    )
    screenshot = agent_options(config, ApproachType.SCREENSHOT)
    assert screenshot.permission_mode == "bypassPermissions"
    assert "take_screenshot" in screenshot.system_prompt
    assert screenshot.disallowed_tools == [
        "mcp__chrome-devtools__list_webmcp_tools",
        "mcp__chrome-devtools__call_webmcp_tool",
    ]
    assert screenshot.mcp_servers["chrome-devtools"]["args"] == [
        "-y", "@mcp-b/chrome-devtools-mcp@latest", "--headless",
    ]

    webmcp = agent_options(config, ApproachType.SEMANTIC_TOOLS)
    assert webmcp.disallowed_tools == []
    assert "call_webmcp_tool" in webmcp.system_prompt
    assert "https://calendar.example" in agent_prompt(config)


def test_agent_system_prompt_override():
    config = BenchmarkConfig(
        benchmark_id="agent",
        agent={"server_name": "browser", "system_prompts": {"semantic_tools": "Use tools only."}},
    )
    options = agent_options(config, ApproachType.SEMANTIC_TOOLS)
    assert options.system_prompt == "Use tools only."
    assert list(options.mcp_servers) == ["browser"]
    assert agent_options(config, ApproachType.ACCESSIBILITY_TREE).disallowed_tools[-1] == "mcp__browser__take_screenshot"
