"""Normalized response and stream-chunk shapes returned to callers."""

from __future__ import annotations

from collections.abc import AsyncIterable, Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class UsageMetrics:
    """Token usage for one call.

    ``total_tokens`` is only set when the vendor reports it; it is never
    computed from the other two.
    """

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int | None = None


@dataclass(frozen=True)
class ToolCall:
    """A tool invocation requested by the model."""

    name: str
    id: str | None = None
    input: Mapping[str, Any] | None = None


@dataclass(frozen=True)
class MessageResponse:
    """A vendor reply adapted to one shape.

    ``text`` is the first textual content block of the reply. Tool-use
    blocks are listed in ``tool_calls`` and never merged into ``text``.
    """

    id: str
    model: str
    role: str
    text: str = ""
    created_at: int | None = None
    usage: UsageMetrics = field(default_factory=UsageMetrics)
    tool_calls: tuple[ToolCall, ...] = ()


@dataclass(frozen=True)
class StreamChunk:
    """One incremental vendor event; ``text`` is *None* when it has no text."""

    text: str | None = None


async def collect_text(stream: AsyncIterable[StreamChunk]) -> str:
    """Drain *stream* and return the concatenated text deltas."""
    parts: list[str] = []
    async for chunk in stream:
        if chunk.text:
            parts.append(chunk.text)
    return "".join(parts)
