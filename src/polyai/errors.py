"""Exception hierarchy for PolyAI.

Only configuration problems are typed here. Failures raised by vendor SDKs
(``openai``, ``anthropic``, ``google-genai``) reach the caller unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from polyai.messages import Provider


class PolyAIError(Exception):
    """Base exception for all PolyAI errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(PolyAIError):
    """Configuration is missing or unusable."""


class MissingConfigurationError(ConfigurationError):
    """A call targeted a provider that has no configured client."""

    def __init__(self, provider: Provider, *, hint: str | None = None) -> None:
        super().__init__(
            f"You must provide a valid configuration for the {provider.label} API",
            hint=hint
            or f"Pass a {provider.label} configuration to service_with(...).",
        )
        self.provider = provider


class ProviderUnavailableError(ConfigurationError):
    """The vendor SDK backing a provider is not installed."""
