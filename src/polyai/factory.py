"""Factory: build a ready service from a list of configurations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from polyai.service import DefaultPolyAIService

if TYPE_CHECKING:
    from collections.abc import Iterable

    from polyai.config import LLMConfiguration
    from polyai.service import PolyAIService


def service_with(configurations: Iterable[LLMConfiguration]) -> PolyAIService:
    """Return a service routing to one client per configured provider.

    Example:
        service = service_with([OpenAIConfiguration(api_key="sk-...")])
        reply = await service.create_message(
            OpenAIParameter(model="gpt-4o-mini", messages=[LLMMessage("user", "hi")])
        )
    """
    return DefaultPolyAIService(configurations)
