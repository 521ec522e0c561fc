"""Shared provider-side error helpers.

Vendor SDK exceptions are never wrapped or re-typed. These helpers only
extract diagnostics for logging before the original exception propagates.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator
    import logging

    from polyai.messages import Provider


def _walk_exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield *exc* and its ``__cause__``/``__context__`` chain without repeats."""
    seen: set[int] = set()
    stack: list[BaseException] = [exc]
    while stack:
        cur = stack.pop()
        if id(cur) in seen:
            continue
        seen.add(id(cur))
        yield cur

        cause = cur.__cause__
        if isinstance(cause, BaseException):
            stack.append(cause)
        context = cur.__context__
        if isinstance(context, BaseException):
            stack.append(context)


def extract_status_code(exc: BaseException) -> int | None:
    """Walk the exception chain to find an HTTP status code."""
    for e in _walk_exception_chain(exc):
        for attr in ("status_code", "status", "code"):
            value = getattr(e, attr, None)
            if isinstance(value, int) and 100 <= value <= 599:
                return value
        response = getattr(e, "response", None)
        value = getattr(response, "status_code", None)
        if isinstance(value, int) and 100 <= value <= 599:
            return value
    return None


def log_vendor_failure(
    log: logging.Logger,
    exc: BaseException,
    *,
    provider: Provider,
    phase: str,
) -> None:
    """Record a vendor failure at debug level; the caller re-raises *exc*."""
    status_code = extract_status_code(exc)
    status_note = f" (status={status_code})" if status_code is not None else ""
    log.debug(
        "%s %s failed%s: %s: %s",
        provider.label,
        phase,
        status_note,
        type(exc).__name__,
        exc,
    )
