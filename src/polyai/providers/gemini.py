"""Gemini provider implementation."""

from __future__ import annotations

from datetime import datetime
import logging
from typing import TYPE_CHECKING, Any

from polyai.errors import ProviderUnavailableError
from polyai.messages import Role
from polyai.providers._errors import log_vendor_failure
from polyai.providers._utils import (
    as_int,
    as_optional_int,
    as_str,
    close_stream,
    decode_tool_arguments,
    split_system_messages,
)
from polyai.providers.base import ProviderCapabilities
from polyai.responses import MessageResponse, StreamChunk, ToolCall, UsageMetrics

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from polyai.config import GeminiConfiguration
    from polyai.messages import LLMParameter

log = logging.getLogger(__name__)

_GEMINI_ROLES = {Role.USER: "user", Role.ASSISTANT: "model"}


class GeminiProvider:
    """Google Gemini API provider."""

    def __init__(self, configuration: GeminiConfiguration) -> None:
        """Record the configuration; the SDK client is created on first use."""
        self.configuration = configuration
        self.provider = configuration.provider
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazy-initialize the Gemini client."""
        if self._client is None:
            try:
                from google import genai
                from google.genai import types
            except ImportError as e:
                raise ProviderUnavailableError(
                    "google-genai package not installed",
                    hint="pip install google-genai",
                ) from e

            cfg = self.configuration
            client_kwargs: dict[str, Any] = {}
            if cfg.vertexai:
                client_kwargs["vertexai"] = True
                client_kwargs["project"] = cfg.project
                client_kwargs["location"] = cfg.location
            if cfg.api_key is not None:
                client_kwargs["api_key"] = cfg.api_key
            if cfg.base_url or cfg.default_headers:
                client_kwargs["http_options"] = types.HttpOptions(
                    base_url=cfg.base_url,
                    headers=dict(cfg.default_headers) if cfg.default_headers else None,
                )
            self._client = genai.Client(**client_kwargs)
        return self._client

    @property
    def capabilities(self) -> ProviderCapabilities:
        """Return supported feature flags."""
        return ProviderCapabilities(system_instruction=True)

    async def create_message(self, parameter: LLMParameter) -> MessageResponse:
        """Generate content from the Gemini model."""
        client = self._get_client()
        try:
            response = await client.aio.models.generate_content(
                **build_request(parameter)
            )
        except Exception as e:
            log_vendor_failure(log, e, provider=self.provider, phase="create_message")
            raise
        return adapt_response(response)

    async def stream_message(
        self, parameter: LLMParameter
    ) -> AsyncIterator[StreamChunk]:
        """Stream content, yielding one chunk per partial response."""
        client = self._get_client()
        try:
            stream = await client.aio.models.generate_content_stream(
                **build_request(parameter)
            )
        except Exception as e:
            log_vendor_failure(log, e, provider=self.provider, phase="stream_message")
            raise
        try:
            async for partial in stream:
                yield adapt_chunk(partial)
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
        await close_stream(client.aio)


def build_request(parameter: LLMParameter) -> dict[str, Any]:
    """Translate *parameter* into ``generate_content`` kwargs.

    The full conversation is sent as ``contents`` with ``assistant`` turns
    mapped to Gemini's ``model`` role. The first system turn becomes
    ``system_instruction``; every system turn is dropped from ``contents``.
    """
    from google.genai import types

    system, conversation = split_system_messages(parameter.messages)
    contents = [
        types.Content(
            role=_GEMINI_ROLES[message.role],
            parts=[types.Part.from_text(text=message.content)],
        )
        for message in conversation
    ]

    config_kwargs: dict[str, Any] = {}
    if system is not None:
        config_kwargs["system_instruction"] = system
    if parameter.max_tokens is not None:
        config_kwargs["max_output_tokens"] = parameter.max_tokens

    return {
        "model": parameter.model,
        "contents": contents,
        "config": types.GenerateContentConfig(**config_kwargs),
    }


def adapt_response(response: Any) -> MessageResponse:
    """Adapt a ``GenerateContentResponse`` into a MessageResponse."""
    content = _first_candidate_content(response)
    text: str | None = None
    tool_calls: list[ToolCall] = []
    for part in getattr(content, "parts", None) or []:
        function_call = getattr(part, "function_call", None)
        if function_call is not None:
            tool_calls.append(
                ToolCall(
                    id=as_str(getattr(function_call, "id", None)) or None,
                    name=as_str(getattr(function_call, "name", None)),
                    input=decode_tool_arguments(getattr(function_call, "args", None)),
                )
            )
        elif text is None:
            text = _part_text(part)

    usage_raw = getattr(response, "usage_metadata", None)
    usage = UsageMetrics(
        input_tokens=as_int(getattr(usage_raw, "prompt_token_count", None)),
        output_tokens=as_int(getattr(usage_raw, "candidates_token_count", None)),
        total_tokens=as_optional_int(getattr(usage_raw, "total_token_count", None)),
    )

    role = as_str(getattr(content, "role", None), "model")
    created = getattr(response, "create_time", None)

    return MessageResponse(
        id=as_str(getattr(response, "response_id", None)),
        model=as_str(getattr(response, "model_version", None)),
        role="assistant" if role == "model" else role,
        text=text or "",
        created_at=int(created.timestamp()) if isinstance(created, datetime) else None,
        usage=usage,
        tool_calls=tuple(tool_calls),
    )


def adapt_chunk(response: Any) -> StreamChunk:
    """Adapt a partial ``GenerateContentResponse`` from a stream."""
    content = _first_candidate_content(response)
    for part in getattr(content, "parts", None) or []:
        text = _part_text(part)
        if text is not None:
            return StreamChunk(text=text)
    return StreamChunk()


def _first_candidate_content(response: Any) -> Any:
    candidates = getattr(response, "candidates", None) or []
    return getattr(candidates[0], "content", None) if candidates else None


def _part_text(part: Any) -> str | None:
    """Return a part's answer text; thought summaries are not answer text."""
    if getattr(part, "thought", None) is True:
        return None
    text = getattr(part, "text", None)
    return text if isinstance(text, str) else None
