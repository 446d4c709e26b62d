"""
Prompt context-window trimming.

Bounds the payload sent to the completion provider: once the assembled
prompt (system prompt plus history) grows past the limit, a summary entry is
inserted after the system prompt and only the most recent turns are kept.

Dependencies: None
System role: Completion payload size policy
"""

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

CONTEXT_WINDOW_LIMIT = 15
CONTEXT_TAIL_SIZE = 5


def needs_trimming(assembled: Sequence[T], limit: int = CONTEXT_WINDOW_LIMIT) -> bool:
    """Whether the assembled prompt exceeds the context-window limit."""
    return len(assembled) > limit


def trim_context_window(
    assembled: Sequence[T],
    summary_entry: T,
    tail_size: int = CONTEXT_TAIL_SIZE,
) -> list[T]:
    """
    Replace older history with a summary entry.

    Args:
        assembled: System prompt followed by the full history
        summary_entry: Summary entry placed right after the system prompt
        tail_size: Number of most recent history entries to keep

    Returns:
        list: [system prompt, summary entry, *last tail_size entries]
    """
    if not assembled:
        return [summary_entry]

    system_entry, history = assembled[0], list(assembled[1:])
    tail = history[-tail_size:] if tail_size > 0 else []
    return [system_entry, summary_entry, *tail]
