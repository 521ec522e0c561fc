"""Vendor-agnostic request model: messages, provider tags and parameters."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class Role(str, Enum):
    """Author of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Provider(str, Enum):
    """Provider tag shared by parameters, configurations and clients."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    OLLAMA = "ollama"
    GROQ = "groq"
    DEEPSEEK = "deepseek"
    OPENROUTER = "openrouter"

    @property
    def label(self) -> str:
        """Human-readable provider name used in error messages."""
        return _LABELS[self]


_LABELS: dict[Provider, str] = {
    Provider.OPENAI: "OpenAI",
    Provider.ANTHROPIC: "Anthropic",
    Provider.GEMINI: "Gemini",
    Provider.OLLAMA: "Ollama",
    Provider.GROQ: "Groq",
    Provider.DEEPSEEK: "DeepSeek",
    Provider.OPENROUTER: "OpenRouter",
}


@dataclass(frozen=True)
class LLMMessage:
    """A single chat turn.

    ``role`` accepts a :class:`Role` or its string value.
    """

    role: Role
    content: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "role", Role(self.role))


@dataclass(frozen=True)
class LLMParameter:
    """Request parameters common to every provider.

    Concrete subclasses fix the ``provider`` tag, which decides routing.
    ``messages`` keeps the caller's conversation order.
    """

    provider: ClassVar[Provider]

    model: str
    messages: Sequence[LLMMessage]
    max_tokens: int | None = None
    stream: bool = False

    def __post_init__(self) -> None:
        if not hasattr(type(self), "provider"):
            raise TypeError(
                f"{type(self).__name__} has no provider tag; use a provider "
                "variant such as OpenAIParameter"
            )
        object.__setattr__(self, "messages", tuple(self.messages))


@dataclass(frozen=True)
class OpenAIParameter(LLMParameter):
    provider: ClassVar[Provider] = Provider.OPENAI


@dataclass(frozen=True)
class AnthropicParameter(LLMParameter):
    provider: ClassVar[Provider] = Provider.ANTHROPIC


@dataclass(frozen=True)
class GeminiParameter(LLMParameter):
    provider: ClassVar[Provider] = Provider.GEMINI


@dataclass(frozen=True)
class OllamaParameter(LLMParameter):
    provider: ClassVar[Provider] = Provider.OLLAMA


@dataclass(frozen=True)
class GroqParameter(LLMParameter):
    provider: ClassVar[Provider] = Provider.GROQ


@dataclass(frozen=True)
class DeepSeekParameter(LLMParameter):
    provider: ClassVar[Provider] = Provider.DEEPSEEK


@dataclass(frozen=True)
class OpenRouterParameter(LLMParameter):
    provider: ClassVar[Provider] = Provider.OPENROUTER
