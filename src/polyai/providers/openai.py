"""OpenAI Chat Completions provider.

Also serves Azure OpenAI and every vendor exposing the OpenAI wire format
(Ollama, Groq, DeepSeek, OpenRouter); only the SDK client construction
differs between them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from polyai.config import (
    AzureOpenAIConfiguration,
    OpenAICompatibleConfiguration,
    OpenAIConfiguration,
)
from polyai.errors import ProviderUnavailableError
from polyai.providers._errors import log_vendor_failure
from polyai.providers._utils import (
    as_int,
    as_optional_int,
    as_str,
    close_stream,
    decode_tool_arguments,
)
from polyai.providers.base import ProviderCapabilities
from polyai.responses import MessageResponse, StreamChunk, ToolCall, UsageMetrics

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from polyai.messages import LLMParameter

log = logging.getLogger(__name__)

OpenAIFamilyConfiguration = (
    OpenAIConfiguration | AzureOpenAIConfiguration | OpenAICompatibleConfiguration
)


class OpenAIProvider:
    """OpenAI Chat Completions provider."""

    def __init__(self, configuration: OpenAIFamilyConfiguration) -> None:
        """Record the configuration; the SDK client is created on first use."""
        self.configuration = configuration
        self.provider = configuration.provider
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize and return the async OpenAI client."""
        if self._client is None:
            try:
                import openai
            except ImportError as e:
                raise ProviderUnavailableError(
                    "openai package not installed",
                    hint="pip install openai",
                ) from e
            self._client = _build_client(openai, self.configuration)
        return self._client

    @property
    def capabilities(self) -> ProviderCapabilities:
        """Return supported feature flags."""
        return ProviderCapabilities(system_instruction=False)

    async def create_message(self, parameter: LLMParameter) -> MessageResponse:
        """Run a chat completion and adapt the reply."""
        client = self._get_client()
        try:
            completion = await client.chat.completions.create(
                **build_request(parameter)
            )
        except Exception as e:
            log_vendor_failure(log, e, provider=self.provider, phase="create_message")
            raise
        return adapt_response(completion)

    async def stream_message(
        self, parameter: LLMParameter
    ) -> AsyncIterator[StreamChunk]:
        """Run a streamed chat completion, yielding one chunk per vendor chunk."""
        client = self._get_client()
        try:
            stream = await client.chat.completions.create(
                **build_request(parameter, stream=True)
            )
        except Exception as e:
            log_vendor_failure(log, e, provider=self.provider, phase="stream_message")
            raise
        try:
            async for native in stream:
                yield adapt_chunk(native)
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


def _build_client(openai: Any, configuration: OpenAIFamilyConfiguration) -> Any:
    """Construct the SDK client matching *configuration*."""
    headers = (
        dict(configuration.default_headers)
        if configuration.default_headers
        else None
    )
    if isinstance(configuration, AzureOpenAIConfiguration):
        return openai.AsyncAzureOpenAI(
            api_key=configuration.api_key,
            azure_endpoint=configuration.azure_endpoint,
            api_version=configuration.api_version,
            azure_deployment=configuration.azure_deployment,
            default_headers=headers,
            http_client=configuration.http_client,
        )
    if isinstance(configuration, OpenAIConfiguration):
        return openai.AsyncOpenAI(
            api_key=configuration.api_key,
            organization=configuration.organization,
            project=configuration.project,
            base_url=configuration.base_url,
            default_headers=headers,
            http_client=configuration.http_client,
        )
    return openai.AsyncOpenAI(
        api_key=configuration.api_key,
        base_url=configuration.base_url,
        default_headers=headers,
        http_client=configuration.http_client,
    )


def build_request(parameter: LLMParameter, *, stream: bool = False) -> dict[str, Any]:
    """Translate *parameter* into ``chat.completions.create`` kwargs.

    The chat API has no separate system field, so system messages are sent
    inline and in order.
    """
    create_kwargs: dict[str, Any] = {
        "model": parameter.model,
        "messages": [
            {"role": message.role.value, "content": message.content}
            for message in parameter.messages
        ],
    }
    if parameter.max_tokens is not None:
        create_kwargs["max_tokens"] = parameter.max_tokens
    if stream:
        create_kwargs["stream"] = True
    return create_kwargs


def adapt_response(completion: Any) -> MessageResponse:
    """Adapt a ``ChatCompletion`` into a MessageResponse."""
    choices = getattr(completion, "choices", None) or []
    message = getattr(choices[0], "message", None) if choices else None

    usage_raw = getattr(completion, "usage", None)
    usage = UsageMetrics(
        input_tokens=as_int(getattr(usage_raw, "prompt_tokens", None)),
        output_tokens=as_int(getattr(usage_raw, "completion_tokens", None)),
        total_tokens=as_optional_int(getattr(usage_raw, "total_tokens", None)),
    )

    tool_calls: list[ToolCall] = []
    for item in getattr(message, "tool_calls", None) or []:
        function = getattr(item, "function", None)
        if function is None:
            continue
        tool_calls.append(
            ToolCall(
                id=as_str(getattr(item, "id", None)) or None,
                name=as_str(getattr(function, "name", None)),
                input=decode_tool_arguments(getattr(function, "arguments", None)),
            )
        )

    return MessageResponse(
        id=as_str(getattr(completion, "id", None)),
        model=as_str(getattr(completion, "model", None)),
        role=as_str(getattr(message, "role", None), "unknown"),
        text=_first_text(getattr(message, "content", None)) or "",
        created_at=as_optional_int(getattr(completion, "created", None)),
        usage=usage,
        tool_calls=tuple(tool_calls),
    )


def adapt_chunk(chunk: Any) -> StreamChunk:
    """Adapt a ``ChatCompletionChunk``; usage-only chunks carry no text."""
    choices = getattr(chunk, "choices", None) or []
    delta = getattr(choices[0], "delta", None) if choices else None
    return StreamChunk(text=_first_text(getattr(delta, "content", None)))


def _first_text(content: Any) -> str | None:
    """Return the first text block of a chat ``content`` value.

    OpenAI returns a plain string; some compatible servers return a list of
    typed parts instead.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        for part in content:
            if isinstance(part, dict) and part.get("type") == "text":
                return as_str(part.get("text"))
            if getattr(part, "type", None) == "text":
                return as_str(getattr(part, "text", None))
    return None
