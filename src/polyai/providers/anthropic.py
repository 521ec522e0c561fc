"""Anthropic Messages API provider."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from polyai.errors import ProviderUnavailableError
from polyai.providers._errors import log_vendor_failure
from polyai.providers._utils import (
    as_int,
    as_str,
    close_stream,
    decode_tool_arguments,
    split_system_messages,
)
from polyai.providers.base import ProviderCapabilities
from polyai.responses import MessageResponse, StreamChunk, ToolCall, UsageMetrics

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from polyai.config import AnthropicConfiguration
    from polyai.messages import LLMParameter

log = logging.getLogger(__name__)

# The Messages API rejects requests without max_tokens.
ANTHROPIC_DEFAULT_MAX_TOKENS = 8192


class AnthropicProvider:
    """Anthropic Messages API provider."""

    def __init__(self, configuration: AnthropicConfiguration) -> None:
        """Record the configuration; the SDK client is created on first use."""
        self.configuration = configuration
        self.provider = configuration.provider
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize and return the async Anthropic client."""
        if self._client is None:
            try:
                from anthropic import AsyncAnthropic
            except ImportError as e:
                raise ProviderUnavailableError(
                    "anthropic package not installed",
                    hint="pip install anthropic",
                ) from e
            cfg = self.configuration
            self._client = AsyncAnthropic(
                api_key=cfg.api_key,
                base_url=cfg.base_url,
                default_headers=dict(cfg.default_headers)
                if cfg.default_headers
                else None,
                http_client=cfg.http_client,
            )
        return self._client

    @property
    def capabilities(self) -> ProviderCapabilities:
        """Return supported feature flags."""
        return ProviderCapabilities(system_instruction=True)

    async def create_message(self, parameter: LLMParameter) -> MessageResponse:
        """Create a message and adapt the reply."""
        client = self._get_client()
        try:
            response = await client.messages.create(**build_request(parameter))
        except Exception as e:
            log_vendor_failure(log, e, provider=self.provider, phase="create_message")
            raise
        return adapt_response(response)

    async def stream_message(
        self, parameter: LLMParameter
    ) -> AsyncIterator[StreamChunk]:
        """Stream a message, yielding one chunk per server-sent event."""
        client = self._get_client()
        try:
            stream = await client.messages.create(
                **build_request(parameter, stream=True)
            )
        except Exception as e:
            log_vendor_failure(log, e, provider=self.provider, phase="stream_message")
            raise
        try:
            async for event in stream:
                yield adapt_chunk(event)
        except Exception as e:
            log_vendor_failure(log, e, provider=self.provider, phase="stream")
            raise
        finally:
            await close_stream(stream)

    async def aclose(self) -> None:
        """Close underlying async client resources."""
        client = self._client
        if client is None:
            return
        self._client = None
        await client.close()


def build_request(parameter: LLMParameter, *, stream: bool = False) -> dict[str, Any]:
    """Translate *parameter* into ``messages.create`` kwargs.

    System turns go to the ``system`` field (first one wins) and are removed
    from ``messages``.
    """
    system, conversation = split_system_messages(parameter.messages)
    create_kwargs: dict[str, Any] = {
        "model": parameter.model,
        "messages": [
            {"role": message.role.value, "content": message.content}
            for message in conversation
        ],
        "max_tokens": parameter.max_tokens
        if parameter.max_tokens is not None
        else ANTHROPIC_DEFAULT_MAX_TOKENS,
    }
    if system is not None:
        create_kwargs["system"] = system
    if stream:
        create_kwargs["stream"] = True
    return create_kwargs


def adapt_response(response: Any) -> MessageResponse:
    """Adapt an Anthropic ``Message`` into a MessageResponse.

    ``text`` is the first ``text`` block regardless of where ``tool_use``
    blocks sit. Anthropic reports no total, so ``total_tokens`` stays *None*.
    """
    text: str | None = None
    tool_calls: list[ToolCall] = []
    for block in getattr(response, "content", None) or []:
        block_type = getattr(block, "type", None)
        if block_type == "text":
            if text is None:
                text = as_str(getattr(block, "text", None))
        elif block_type == "tool_use":
            tool_calls.append(
                ToolCall(
                    id=as_str(getattr(block, "id", None)) or None,
                    name=as_str(getattr(block, "name", None)),
                    input=decode_tool_arguments(getattr(block, "input", None)),
                )
            )

    usage_raw = getattr(response, "usage", None)
    usage = UsageMetrics(
        input_tokens=as_int(getattr(usage_raw, "input_tokens", None)),
        output_tokens=as_int(getattr(usage_raw, "output_tokens", None)),
    )

    return MessageResponse(
        id=as_str(getattr(response, "id", None)),
        model=as_str(getattr(response, "model", None)),
        role=as_str(getattr(response, "role", None), "assistant"),
        text=text or "",
        created_at=None,
        usage=usage,
        tool_calls=tuple(tool_calls),
    )


def adapt_chunk(event: Any) -> StreamChunk:
    """Adapt a raw stream event; only ``text_delta`` deltas carry text."""
    delta = getattr(event, "delta", None)
    text = getattr(delta, "text", None)
    return StreamChunk(text=text if isinstance(text, str) else None)
