"""Shared utilities for provider implementations."""

from __future__ import annotations

from collections.abc import Sequence
import contextlib
import inspect
import json
from typing import Any

from polyai.messages import LLMMessage, Role


def split_system_messages(
    messages: Sequence[LLMMessage],
) -> tuple[str | None, list[LLMMessage]]:
    """Separate system turns from the conversation.

    Returns the content of the *first* system message (or *None*) and the
    remaining messages in their original order. Later system messages are
    dropped.
    """
    system: str | None = None
    rest: list[LLMMessage] = []
    for message in messages:
        if message.role is Role.SYSTEM:
            if system is None:
                system = message.content
            continue
        rest.append(message)
    return system, rest


def decode_tool_arguments(raw: Any) -> dict[str, Any] | None:
    """Decode tool-call arguments into a mapping.

    Vendors send either a JSON string or an already-decoded mapping.
    Anything that does not decode to a JSON object yields *None*.
    """
    if raw is None:
        return None
    if isinstance(raw, dict):
        return dict(raw)
    if isinstance(raw, str):
        try:
            decoded = json.loads(raw) if raw else {}
        except ValueError:
            return None
        return decoded if isinstance(decoded, dict) else None
    with contextlib.suppress(TypeError, ValueError):
        return dict(raw)
    return None


def as_int(value: Any, default: int = 0) -> int:
    """Coerce a usage counter to ``int``, defaulting absent values."""
    return int(value) if isinstance(value, (int, float)) else default


def as_optional_int(value: Any) -> int | None:
    """Coerce an optional usage counter, keeping absence as *None*."""
    return int(value) if isinstance(value, (int, float)) else None


def as_str(value: Any, default: str = "") -> str:
    """Return *value* when it is a string, else *default*."""
    return value if isinstance(value, str) else default


async def close_stream(stream: Any) -> None:
    """Release a vendor stream; SDK streams expose ``aclose`` or ``close``."""
    closer = getattr(stream, "aclose", None) or getattr(stream, "close", None)
    if closer is None:
        return
    result = closer()
    if inspect.isawaitable(result):
        await result
