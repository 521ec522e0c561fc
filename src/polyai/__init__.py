"""PolyAI: one request/response surface over several LLM vendor APIs.

Public API:
    - service_with(): Build a service from provider configurations
    - LLMMessage / *Parameter: Vendor-agnostic request values
    - *Configuration: Per-provider connection settings
    - MessageResponse / StreamChunk: Normalized replies
"""

from __future__ import annotations

import logging

from polyai.config import (
    AnthropicConfiguration,
    AzureOpenAIConfiguration,
    DeepSeekConfiguration,
    GeminiConfiguration,
    GroqConfiguration,
    LLMConfiguration,
    OllamaConfiguration,
    OpenAICompatibleConfiguration,
    OpenAIConfiguration,
    OpenRouterConfiguration,
)
from polyai.errors import (
    ConfigurationError,
    MissingConfigurationError,
    PolyAIError,
    ProviderUnavailableError,
)
from polyai.factory import service_with
from polyai.messages import (
    AnthropicParameter,
    DeepSeekParameter,
    GeminiParameter,
    GroqParameter,
    LLMMessage,
    LLMParameter,
    OllamaParameter,
    OpenAIParameter,
    OpenRouterParameter,
    Provider,
    Role,
)
from polyai.responses import (
    MessageResponse,
    StreamChunk,
    ToolCall,
    UsageMetrics,
    collect_text,
)
from polyai.service import DefaultPolyAIService, PolyAIService

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("polyai")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("polyai").addHandler(logging.NullHandler())

__all__ = [
    "AnthropicConfiguration",
    "AnthropicParameter",
    "AzureOpenAIConfiguration",
    "ConfigurationError",
    "DeepSeekConfiguration",
    "DeepSeekParameter",
    "DefaultPolyAIService",
    "GeminiConfiguration",
    "GeminiParameter",
    "GroqConfiguration",
    "GroqParameter",
    "LLMConfiguration",
    "LLMMessage",
    "LLMParameter",
    "MessageResponse",
    "MissingConfigurationError",
    "OllamaConfiguration",
    "OllamaParameter",
    "OpenAICompatibleConfiguration",
    "OpenAIConfiguration",
    "OpenAIParameter",
    "OpenRouterConfiguration",
    "OpenRouterParameter",
    "PolyAIError",
    "PolyAIService",
    "Provider",
    "ProviderUnavailableError",
    "Role",
    "StreamChunk",
    "ToolCall",
    "UsageMetrics",
    "collect_text",
    "service_with",
]
