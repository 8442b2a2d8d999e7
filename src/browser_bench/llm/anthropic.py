"""Anthropic Claude client with streaming and inline image support."""

from __future__ import annotations

from typing import Any, AsyncIterator

import anthropic

from browser_bench.accumulator import TokenUsage
from browser_bench.images import ExtractedImage

from .base import DEFAULT_MAX_TOKENS, LLMClient, TextStream


class AnthropicClient(LLMClient):
    """Claude Messages API client; every call is streamed."""

    def __init__(self, model: str = "claude-sonnet-4-20250514", api_key: str | None = None):
        self.model = model
        self.client = anthropic.AsyncAnthropic(api_key=api_key) if api_key else anthropic.AsyncAnthropic()

    def stream(
        self,
        prompt: str,
        image: ExtractedImage | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> TextStream:
        messages = [{"role": "user", "content": _build_content(prompt, image)}]
        return TextStream(self._fragments(messages, max_tokens), model=self.model)

    async def _fragments(
        self,
        messages: list[dict[str, Any]],
        max_tokens: int,
    ) -> AsyncIterator[str | TokenUsage]:
        async with self.client.messages.stream(
            model=self.model,
            max_tokens=max_tokens,
            messages=messages,
        ) as stream:
            async for text in stream.text_stream:
                yield text
            final = await stream.get_final_message()

        yield TokenUsage(
            input_tokens=final.usage.input_tokens,
            output_tokens=final.usage.output_tokens,
        )


def _build_content(prompt: str, image: ExtractedImage | None) -> str | list[dict[str, Any]]:
    """Image block first, then the prompt."""
    if image is None:
        return prompt
    return [
        {
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": image.mime_type.value,
                "data": image.data,
            },
        },
        {"type": "text", "text": prompt},
    ]
