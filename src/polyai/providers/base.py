"""Provider protocol: minimal interface every vendor client implements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from polyai.messages import LLMParameter, Provider
    from polyai.responses import MessageResponse, StreamChunk


@dataclass(frozen=True)
class ProviderCapabilities:
    """Feature flags exposed by providers."""

    #: Vendor has a dedicated system-prompt field. When set, the first system
    #: message is lifted out of the message list; otherwise every system
    #: message is sent inline.
    system_instruction: bool


@runtime_checkable
class ProviderClient(Protocol):
    """Minimal provider protocol: one-shot call, streamed call, close."""

    provider: Provider

    async def create_message(self, parameter: LLMParameter) -> MessageResponse:
        """Issue a one-shot completion and adapt the reply."""
        ...

    def stream_message(self, parameter: LLMParameter) -> AsyncIterator[StreamChunk]:
        """Issue a streamed completion, adapting each vendor event lazily."""
        ...

    @property
    def capabilities(self) -> ProviderCapabilities:
        """Declares which system-message rule the provider's requests follow."""
        ...

    async def aclose(self) -> None:
        """Release the underlying SDK client, if one was created."""
        ...
