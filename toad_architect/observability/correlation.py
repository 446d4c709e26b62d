"""
Correlation ID tracking.

Each HTTP request and each cleanup run gets one correlation ID. It is held
in a contextvar so log records and provider calls made while serving the
request pick it up without threading it through every call.

Dependencies: contextvars
System role: Request tracing across service boundaries
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
import uuid

CORRELATION_HEADER = "X-Correlation-ID"

_current_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def new_correlation_id() -> str:
    """Fresh random (v4) correlation ID."""
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Bind a correlation ID to the current context.

    Args:
        correlation_id: Incoming ID; a new one is generated when empty

    Returns:
        str: The bound correlation ID
    """
    correlation_id = (correlation_id or "").strip() or new_correlation_id()
    _current_correlation_id.set(correlation_id)
    return correlation_id


def get_correlation_id() -> str:
    """Correlation ID of the current context, empty outside a request."""
    return _current_correlation_id.get()


def clear_correlation_id() -> None:
    _current_correlation_id.set("")


@contextmanager
def bind_correlation_id(correlation_id: str | None = None) -> Iterator[str]:
    """
    Bind a correlation ID for the duration of a block.

    The previous value is restored on exit, including when the block raises.
    """
    token = _current_correlation_id.set(
        (correlation_id or "").strip() or new_correlation_id()
    )
    try:
        yield _current_correlation_id.get()
    finally:
        _current_correlation_id.reset(token)
