"""OpenAI-compatible streaming client for vLLM, ollama, and other local servers."""

from __future__ import annotations

from typing import Any, AsyncIterator

from openai import AsyncOpenAI

from browser_bench.accumulator import TokenUsage
from browser_bench.images import ExtractedImage

from .base import DEFAULT_MAX_TOKENS, LLMClient, TextStream


class OpenAICompatClient(LLMClient):
    """Chat Completions client. Usage is requested on the final stream chunk."""

    def __init__(
        self,
        model: str,
        base_url: str = "http://localhost:8000/v1",
        api_key: str = "dummy",
    ):
        self.model = model
        self.base_url = base_url
        self.client = AsyncOpenAI(base_url=base_url, api_key=api_key)

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
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=max_tokens,
            stream=True,
            stream_options={"include_usage": True},
        )

        usage = TokenUsage()
        async for chunk in response:
            if chunk.choices:
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
            if chunk.usage:
                usage = TokenUsage(
                    input_tokens=chunk.usage.prompt_tokens or 0,
                    output_tokens=chunk.usage.completion_tokens or 0,
                )
        # Servers that ignore include_usage report zero rather than failing
        yield usage


def _build_content(prompt: str, image: ExtractedImage | None) -> str | list[dict[str, Any]]:
    if image is None:
        return prompt
    return [
        {
            "type": "image_url",
            "image_url": {"url": f"data:{image.mime_type.value};base64,{image.data}"},
        },
        {"type": "text", "text": prompt},
    ]
