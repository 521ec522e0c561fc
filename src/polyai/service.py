"""Service: route vendor-agnostic parameters to configured provider clients."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Iterable
from contextlib import aclosing
import logging
from types import TracebackType
from typing import Any, Protocol, runtime_checkable

from polyai.config import (
    AnthropicConfiguration,
    AzureOpenAIConfiguration,
    GeminiConfiguration,
    LLMConfiguration,
    OpenAICompatibleConfiguration,
    OpenAIConfiguration,
)
from polyai.errors import ConfigurationError, MissingConfigurationError
from polyai.messages import LLMParameter, Provider
from polyai.providers import (
    AnthropicProvider,
    GeminiProvider,
    OpenAIProvider,
    ProviderClient,
)
from polyai.responses import MessageResponse, StreamChunk

log = logging.getLogger(__name__)

# One entry per configuration family. Subclasses (e.g. OllamaConfiguration)
# resolve through their MRO.
_PROVIDER_FACTORIES: dict[type[LLMConfiguration], Callable[[Any], ProviderClient]] = {
    OpenAIConfiguration: OpenAIProvider,
    AzureOpenAIConfiguration: OpenAIProvider,
    OpenAICompatibleConfiguration: OpenAIProvider,
    AnthropicConfiguration: AnthropicProvider,
    GeminiConfiguration: GeminiProvider,
}


def build_provider_client(configuration: LLMConfiguration) -> ProviderClient:
    """Create the provider client for *configuration*.

    Only records connection settings; no network traffic happens here.
    """
    for cls in type(configuration).__mro__:
        factory = _PROVIDER_FACTORIES.get(cls)
        if factory is not None:
            return factory(configuration)
    raise ConfigurationError(
        f"Unsupported configuration type: {type(configuration).__name__}",
        hint="Use one of the configuration classes from polyai.config.",
    )


@runtime_checkable
class PolyAIService(Protocol):
    """Call surface shared by every service implementation."""

    async def create_message(self, parameter: LLMParameter) -> MessageResponse:
        """Send *parameter* as a one-shot request."""
        ...

    def stream_message(self, parameter: LLMParameter) -> AsyncIterator[StreamChunk]:
        """Send *parameter* as a streamed request."""
        ...


class DefaultPolyAIService:
    """Holds at most one client per provider and dispatches calls to it.

    Configurations are applied in order; when two share a provider tag the
    later one wins. Clients are read-only after construction, so one service
    can serve concurrent calls.
    """

    def __init__(self, configurations: Iterable[LLMConfiguration]) -> None:
        self._clients: dict[Provider, ProviderClient] = {}
        for configuration in configurations:
            provider = configuration.provider
            if provider in self._clients:
                log.debug(
                    "Replacing %s client with later configuration %s",
                    provider.label,
                    configuration.label,
                )
            self._clients[provider] = build_provider_client(configuration)

    @property
    def configured_providers(self) -> tuple[Provider, ...]:
        """Provider tags with a configured client, in first-seen order."""
        return tuple(self._clients)

    def _client_for(self, parameter: LLMParameter) -> ProviderClient:
        provider = parameter.provider
        client = self._clients.get(provider)
        if client is None:
            raise MissingConfigurationError(provider)
        return client

    async def create_message(self, parameter: LLMParameter) -> MessageResponse:
        """Send a one-shot request and return the normalized reply.

        Raises:
            MissingConfigurationError: No client is configured for the
                parameter's provider. Vendor SDK errors propagate unchanged.
        """
        client = self._client_for(parameter)
        log.debug(
            "create_message -> %s (model=%s, messages=%d)",
            parameter.provider.label,
            parameter.model,
            len(parameter.messages),
        )
        return await client.create_message(parameter)

    def stream_message(self, parameter: LLMParameter) -> AsyncIterator[StreamChunk]:
        """Return a lazy, single-use stream of normalized chunks.

        The provider lookup happens immediately, so a missing configuration
        raises here rather than on first iteration. No request is sent until
        the stream is iterated. Closing the stream early (``aclose()``, a
        ``break`` inside ``aclosing``, or task cancellation) closes the
        vendor stream.
        """
        client = self._client_for(parameter)
        log.debug(
            "stream_message -> %s (model=%s, messages=%d)",
            parameter.provider.label,
            parameter.model,
            len(parameter.messages),
        )
        return _tracked_stream(parameter.provider, client.stream_message(parameter))

    async def send(
        self, parameter: LLMParameter
    ) -> MessageResponse | AsyncIterator[StreamChunk]:
        """Dispatch on ``parameter.stream``: a chunk stream or a full reply."""
        if parameter.stream:
            return self.stream_message(parameter)
        return await self.create_message(parameter)

    async def aclose(self) -> None:
        """Close every vendor SDK client this service created."""
        for provider, client in self._clients.items():
            try:
                await client.aclose()
            except Exception as exc:
                log.warning("%s client cleanup failed: %s", provider.label, exc)

    async def __aenter__(self) -> DefaultPolyAIService:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


async def _tracked_stream(
    provider: Provider, stream: AsyncIterator[StreamChunk]
) -> AsyncIterator[StreamChunk]:
    """Forward *stream* unchanged, closing it when the consumer stops early."""
    count = 0
    async with aclosing(stream):  # type: ignore[type-var]
        async for chunk in stream:
            count += 1
            yield chunk
    log.debug("%s stream finished after %d chunks", provider.label, count)
