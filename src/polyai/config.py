"""Configuration: frozen, per-provider connection settings.

Each configuration class carries the ``provider`` tag it serves. Credentials
are not validated here; bad keys surface from the vendor SDK on the first
call. API keys left as *None* are resolved from the provider's standard
environment variable.

Example:
    configs = [
        OpenAIConfiguration(api_key="sk-..."),
        AnthropicConfiguration(),  # resolved from ANTHROPIC_API_KEY
        OllamaConfiguration(),
    ]
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import os
from typing import TYPE_CHECKING, ClassVar

from dotenv import load_dotenv

from polyai.errors import ConfigurationError
from polyai.messages import Provider

if TYPE_CHECKING:
    import httpx

load_dotenv()

# Provider-specific API key environment variable names
_API_KEY_ENV_VARS: dict[Provider, str] = {
    Provider.OPENAI: "OPENAI_API_KEY",
    Provider.ANTHROPIC: "ANTHROPIC_API_KEY",
    Provider.GEMINI: "GEMINI_API_KEY",
    Provider.GROQ: "GROQ_API_KEY",
    Provider.DEEPSEEK: "DEEPSEEK_API_KEY",
    Provider.OPENROUTER: "OPENROUTER_API_KEY",
}

_AZURE_API_KEY_ENV_VAR = "AZURE_OPENAI_API_KEY"
_OLLAMA_HOST_ENV_VAR = "OLLAMA_HOST"

OLLAMA_DEFAULT_HOST = "http://localhost:11434"
GROQ_BASE_URL = "https://api.groq.com/openai/v1"
DEEPSEEK_BASE_URL = "https://api.deepseek.com"
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


def resolve_api_key(provider: Provider, api_key: str | None) -> str | None:
    """Return *api_key*, falling back to the provider's environment variable."""
    if api_key is not None:
        return api_key
    env_var = _API_KEY_ENV_VARS.get(provider)
    return os.environ.get(env_var) if env_var else None


def _redacted(api_key: str | None) -> str | None:
    return "[REDACTED]" if api_key else None


@dataclass(frozen=True)
class LLMConfiguration:
    """Base class for provider configurations."""

    provider: ClassVar[Provider]

    @property
    def label(self) -> str:
        """Descriptive name used in error messages."""
        return self.provider.label


@dataclass(frozen=True, repr=False)
class OpenAIConfiguration(LLMConfiguration):
    """OpenAI platform account."""

    provider: ClassVar[Provider] = Provider.OPENAI

    #: Auto-resolved from ``OPENAI_API_KEY`` when *None*.
    api_key: str | None = None
    organization: str | None = None
    project: str | None = None
    base_url: str | None = None
    default_headers: Mapping[str, str] | None = None
    http_client: httpx.AsyncClient | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "api_key", resolve_api_key(self.provider, self.api_key)
        )

    def __repr__(self) -> str:
        return (
            f"OpenAIConfiguration(api_key={_redacted(self.api_key)}, "
            f"organization={self.organization!r}, base_url={self.base_url!r})"
        )


@dataclass(frozen=True, repr=False)
class AzureOpenAIConfiguration(LLMConfiguration):
    """OpenAI models served from an Azure OpenAI resource.

    Routes under the ``openai`` tag, so it replaces (or is replaced by) an
    :class:`OpenAIConfiguration` given in the same list.
    """

    provider: ClassVar[Provider] = Provider.OPENAI

    azure_endpoint: str
    api_version: str
    #: Auto-resolved from ``AZURE_OPENAI_API_KEY`` when *None*.
    api_key: str | None = None
    azure_deployment: str | None = None
    default_headers: Mapping[str, str] | None = None
    http_client: httpx.AsyncClient | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.api_key is None:
            object.__setattr__(
                self, "api_key", os.environ.get(_AZURE_API_KEY_ENV_VAR)
            )

    @property
    def label(self) -> str:
        return "Azure OpenAI"

    def __repr__(self) -> str:
        return (
            f"AzureOpenAIConfiguration(api_key={_redacted(self.api_key)}, "
            f"azure_endpoint={self.azure_endpoint!r}, "
            f"api_version={self.api_version!r})"
        )


@dataclass(frozen=True, repr=False)
class AnthropicConfiguration(LLMConfiguration):
    """Anthropic Messages API account."""

    provider: ClassVar[Provider] = Provider.ANTHROPIC

    #: Auto-resolved from ``ANTHROPIC_API_KEY`` when *None*.
    api_key: str | None = None
    base_url: str | None = None
    default_headers: Mapping[str, str] | None = None
    http_client: httpx.AsyncClient | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "api_key", resolve_api_key(self.provider, self.api_key)
        )

    def __repr__(self) -> str:
        return (
            f"AnthropicConfiguration(api_key={_redacted(self.api_key)}, "
            f"base_url={self.base_url!r})"
        )


@dataclass(frozen=True, repr=False)
class GeminiConfiguration(LLMConfiguration):
    """Google Gemini via the Developer API, or Vertex AI when ``vertexai``."""

    provider: ClassVar[Provider] = Provider.GEMINI

    #: Auto-resolved from ``GEMINI_API_KEY`` when *None*.
    api_key: str | None = None
    base_url: str | None = None
    default_headers: Mapping[str, str] | None = None
    vertexai: bool = False
    project: str | None = None
    location: str | None = None

    def __post_init__(self) -> None:
        if not self.vertexai:
            object.__setattr__(
                self, "api_key", resolve_api_key(self.provider, self.api_key)
            )

    def __repr__(self) -> str:
        return (
            f"GeminiConfiguration(api_key={_redacted(self.api_key)}, "
            f"vertexai={self.vertexai}, project={self.project!r})"
        )


# Tags whose vendors speak the OpenAI chat-completions wire format.
_OPENAI_WIRE_PROVIDERS = frozenset(
    {
        Provider.OPENAI,
        Provider.OLLAMA,
        Provider.GROQ,
        Provider.DEEPSEEK,
        Provider.OPENROUTER,
    }
)


@dataclass(frozen=True, repr=False)
class OpenAICompatibleConfiguration(LLMConfiguration):
    """Any provider speaking the OpenAI chat-completions wire format.

    Unlike the other configurations the tag is an instance field, so one
    class covers every compatible vendor. ``provider`` and ``base_url`` are
    keyword-only; the named subclasses below fix both.
    """

    api_key: str | None = None
    default_headers: Mapping[str, str] | None = None
    http_client: httpx.AsyncClient | None = field(default=None, compare=False)
    provider: Provider = field(kw_only=True)  # type: ignore[misc]
    base_url: str = field(kw_only=True)

    def __post_init__(self) -> None:
        provider = Provider(self.provider)
        if provider not in _OPENAI_WIRE_PROVIDERS:
            raise ConfigurationError(
                f"{provider.label} does not use the OpenAI wire format",
                hint=f"Use {provider.label}Configuration instead.",
            )
        object.__setattr__(self, "provider", provider)
        object.__setattr__(
            self, "api_key", resolve_api_key(self.provider, self.api_key)
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(provider={self.provider.value!r}, "
            f"api_key={_redacted(self.api_key)}, base_url={self.base_url!r})"
        )


def _ollama_base_url() -> str:
    host = os.environ.get(_OLLAMA_HOST_ENV_VAR) or OLLAMA_DEFAULT_HOST
    return f"{host.rstrip('/')}/v1"


@dataclass(frozen=True, repr=False)
class OllamaConfiguration(OpenAICompatibleConfiguration):
    """Local Ollama server through its OpenAI-compatible endpoint.

    The base URL defaults to ``$OLLAMA_HOST/v1`` or the local default port.
    Ollama ignores the API key but the OpenAI SDK requires one.
    """

    api_key: str | None = "ollama"
    provider: Provider = field(default=Provider.OLLAMA, init=False)
    base_url: str = field(default_factory=_ollama_base_url, kw_only=True)


@dataclass(frozen=True, repr=False)
class GroqConfiguration(OpenAICompatibleConfiguration):
    """Groq cloud, resolved from ``GROQ_API_KEY`` when no key is given."""

    provider: Provider = field(default=Provider.GROQ, init=False)
    base_url: str = field(default=GROQ_BASE_URL, kw_only=True)


@dataclass(frozen=True, repr=False)
class DeepSeekConfiguration(OpenAICompatibleConfiguration):
    provider: Provider = field(default=Provider.DEEPSEEK, init=False)
    base_url: str = field(default=DEEPSEEK_BASE_URL, kw_only=True)


@dataclass(frozen=True, repr=False)
class OpenRouterConfiguration(OpenAICompatibleConfiguration):
    provider: Provider = field(default=Provider.OPENROUTER, init=False)
    base_url: str = field(default=OPENROUTER_BASE_URL, kw_only=True)
