"""Abstract base class for LLM clients and the streaming text abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import AsyncIterator

from browser_bench.accumulator import TokenUsage
from browser_bench.images import ExtractedImage

DEFAULT_MAX_TOKENS = 64000


@dataclass
class LLMResponse:
    """Full text and token usage of one model invocation."""
    text: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    model: str = ""


class TextStream:
    """Single-consumer stream of text fragments.

    ``source`` yields ``str`` fragments followed by exactly one final
    ``TokenUsage``. Iterating yields the fragments in order; once the stream
    is exhausted ``text`` and ``usage`` hold the aggregated result. To cancel,
    stop iterating and treat the call as failed.
    """

    def __init__(self, source: AsyncIterator[str | TokenUsage], model: str = ""):
        self._source = source
        self.model = model
        self._parts: list[str] = []
        self._usage: TokenUsage | None = None
        self._started = False

    def __aiter__(self) -> AsyncIterator[str]:
        if self._started:
            raise RuntimeError("TextStream can only be consumed once")
        self._started = True
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[str]:
        async for item in self._source:
            if isinstance(item, TokenUsage):
                self._usage = item
                continue
            self._parts.append(item)
            yield item
        if self._usage is None:
            raise RuntimeError("Stream ended without reporting token usage")

    @property
    def text(self) -> str:
        return "".join(self._parts)

    @property
    def usage(self) -> TokenUsage:
        if self._usage is None:
            raise RuntimeError("Usage is only available after the stream is exhausted")
        return self._usage

    async def collect(self) -> LLMResponse:
        """Drain the stream and return the final response."""
        async for _ in self:
            pass
        return LLMResponse(text=self.text, usage=self.usage, model=self.model)


class LLMClient(ABC):
    """Abstract base for LLM API clients."""

    model: str

    @abstractmethod
    def stream(
        self,
        prompt: str,
        image: ExtractedImage | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> TextStream:
        """Start a generation; nothing is sent until the stream is iterated."""
        ...

    async def send_prompt(self, prompt: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> LLMResponse:
        return await self.stream(prompt, max_tokens=max_tokens).collect()

    async def analyze_screenshot(
        self,
        image: ExtractedImage,
        prompt: str,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> LLMResponse:
        return await self.stream(prompt, image=image, max_tokens=max_tokens).collect()
