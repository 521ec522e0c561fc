"""Test helpers (small, reusable doubles).

Fake vendor SDK clients and builders for vendor-native response objects.
The fakes mirror only the attribute paths the providers touch, so request
shapes can be characterized without network calls.
"""

from __future__ import annotations

from collections.abc import Iterable
from types import SimpleNamespace
from typing import Any

from polyai.messages import Provider


class FakeStream:
    """Async iterator standing in for an SDK stream.

    Yields *items* in order, then raises *error* if one is given. Records
    whether it was closed and how many items were pulled.
    """

    def __init__(self, items: Iterable[Any], error: BaseException | None = None):
        self._items = list(items)
        self._error = error
        self.closed = False
        self.pulled = 0

    def __aiter__(self) -> FakeStream:
        return self

    async def __anext__(self) -> Any:
        if self.closed:
            raise StopAsyncIteration
        if self._items:
            self.pulled += 1
            return self._items.pop(0)
        if self._error is not None:
            error, self._error = self._error, None
            raise error
        raise StopAsyncIteration

    async def close(self) -> None:
        self.closed = True


class FakeEndpoint:
    """Captures ``create`` kwargs and returns a canned reply or stream.

    Serves as ``chat.completions`` for OpenAI and ``messages`` for Anthropic.
    """

    def __init__(
        self,
        response: Any = None,
        *,
        chunks: Iterable[Any] = (),
        stream_error: BaseException | None = None,
        error: BaseException | None = None,
    ) -> None:
        self.response = response
        self.chunks = list(chunks)
        self.stream_error = stream_error
        self.error = error
        self.calls: list[dict[str, Any]] = []
        self.streams: list[FakeStream] = []

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if kwargs.get("stream"):
            stream = FakeStream(self.chunks, self.stream_error)
            self.streams.append(stream)
            return stream
        return self.response


class FakeGeminiModels(FakeEndpoint):
    """``client.aio.models`` double for google-genai."""

    async def generate_content(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response

    async def generate_content_stream(self, **kwargs: Any) -> FakeStream:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        stream = FakeStream(self.chunks, self.stream_error)
        self.streams.append(stream)
        return stream


class FakeClient(SimpleNamespace):
    """SDK client double exposing the attribute path each provider uses."""

    closed: bool = False

    async def close(self) -> None:
        self.closed = True

    async def aclose(self) -> None:
        self.closed = True


def fake_sdk_client(provider: Provider, endpoint: FakeEndpoint) -> FakeClient:
    """Wrap *endpoint* in the client shape the provider's SDK exposes."""
    if provider is Provider.ANTHROPIC:
        return FakeClient(messages=endpoint)
    if provider is Provider.GEMINI:
        client = FakeClient()
        client.aio = SimpleNamespace(models=endpoint, aclose=client.aclose)
        return client
    return FakeClient(chat=SimpleNamespace(completions=endpoint))


def install_fake(service: Any, provider: Provider, endpoint: FakeEndpoint) -> FakeClient:
    """Swap the SDK client behind *provider* in *service* for a fake."""
    client = fake_sdk_client(provider, endpoint)
    service._clients[provider]._client = client
    return client


def openai_completion(
    content: str | None = "hello",
    *,
    prompt_tokens: int | None = 3,
    completion_tokens: int | None = 1,
    total_tokens: int | None = None,
    tool_calls: list[Any] | None = None,
) -> SimpleNamespace:
    """Build a ``ChatCompletion``-shaped object."""
    usage = SimpleNamespace(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens)
    if total_tokens is not None:
        usage.total_tokens = total_tokens
    return SimpleNamespace(
        id="chatcmpl-1",
        model="gpt-x",
        created=1_700_000_000,
        choices=[
            SimpleNamespace(
                message=SimpleNamespace(
                    role="assistant", content=content, tool_calls=tool_calls
                )
            )
        ],
        usage=usage,
    )


def openai_chunk(content: str | None) -> SimpleNamespace:
    """Build a ``ChatCompletionChunk``-shaped object."""
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])


def anthropic_message(
    *blocks: Any, input_tokens: int = 5, output_tokens: int = 7
) -> SimpleNamespace:
    """Build an Anthropic ``Message``-shaped object."""
    return SimpleNamespace(
        id="msg_1",
        model="claude-x",
        role="assistant",
        content=list(blocks),
        usage=SimpleNamespace(input_tokens=input_tokens, output_tokens=output_tokens),
    )


def text_block(text: str) -> SimpleNamespace:
    return SimpleNamespace(type="text", text=text)


def tool_use_block(
    name: str, tool_input: dict[str, Any], block_id: str = "toolu_1"
) -> SimpleNamespace:
    return SimpleNamespace(type="tool_use", id=block_id, name=name, input=tool_input)


def anthropic_text_delta(text: str) -> SimpleNamespace:
    return SimpleNamespace(
        type="content_block_delta",
        index=0,
        delta=SimpleNamespace(type="text_delta", text=text),
    )


def gemini_response(*parts: Any, role: str = "model", usage: Any = None) -> SimpleNamespace:
    """Build a ``GenerateContentResponse``-shaped object."""
    return SimpleNamespace(
        response_id="resp-1",
        model_version="gemini-x",
        create_time=None,
        candidates=[SimpleNamespace(content=SimpleNamespace(role=role, parts=list(parts)))],
        usage_metadata=usage,
    )


def gemini_text_part(text: str, *, thought: bool | None = None) -> SimpleNamespace:
    return SimpleNamespace(text=text, thought=thought, function_call=None)


