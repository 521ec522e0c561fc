"""Provider implementations."""

from .anthropic import AnthropicProvider
from .base import ProviderCapabilities, ProviderClient
from .gemini import GeminiProvider
from .openai import OpenAIProvider

__all__ = [
    "AnthropicProvider",
    "GeminiProvider",
    "OpenAIProvider",
    "ProviderCapabilities",
    "ProviderClient",
]
