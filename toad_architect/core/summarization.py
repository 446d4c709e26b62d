"""
Conversation summarizers.

Two interchangeable strategies behind one protocol:
- HeuristicSummarizer: deterministic local digest, run on every append once
  the history grows past the summary threshold.
- CompletionSummarizer: asks the completion provider for a digest. Only run
  on explicit request or when trimming the prompt context window.

Dependencies: toad_architect.models
System role: Conversation summary policy
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from toad_architect.models.session import (
    ConversationSummary,
    Message,
    MessageRole,
    utcnow,
)

KEY_POINT_COUNT = 5
KEY_POINT_LENGTH = 100
KEY_POINT_ELLIPSIS = "..."
PHASE_WINDOW = 3
DEFAULT_PHASE = 1
DEFAULT_NEXT_STEPS = ("Continue architectural discussion",)

# Checked in order; the first rule with a matching keyword wins.
PHASE_RULES: tuple[tuple[int, tuple[str, ...]], ...] = (
    (2, ("architectural option", "cost estimate")),
    (3, ("trade-off", "scoring")),
    (5, ("milestone", "planning")),
)


@runtime_checkable
class ConversationSummarizer(Protocol):
    """Anything that can digest a conversation into a ConversationSummary."""

    async def summarize(self, messages: Sequence[Message]) -> ConversationSummary:
        ...


def infer_phase(messages: Sequence[Message]) -> int:
    """
    Infer the advisory phase from the most recent messages.

    Lower-cases and space-joins the content of the last three messages
    (any role) and returns the phase of the first keyword rule that matches.

    Args:
        messages: Conversation history in chronological order

    Returns:
        int: Phase 2, 3 or 5 on a keyword match, otherwise 1
    """
    recent = messages[-PHASE_WINDOW:]
    text = " ".join(message.content for message in recent).lower()

    for phase, keywords in PHASE_RULES:
        if any(keyword in text for keyword in keywords):
            return phase
    return DEFAULT_PHASE


def extract_key_points(messages: Sequence[Message]) -> list[str]:
    """Last five user messages, each cut to 100 characters plus an ellipsis."""
    user_messages = [m for m in messages if m.role == MessageRole.USER]
    return [
        m.content[:KEY_POINT_LENGTH] + KEY_POINT_ELLIPSIS
        for m in user_messages[-KEY_POINT_COUNT:]
    ]


class HeuristicSummarizer:
    """Local keyword-based summarizer; makes no external calls."""

    def build(self, messages: Sequence[Message]) -> ConversationSummary:
        """Build the summary synchronously."""
        return ConversationSummary(
            key_points=extract_key_points(messages),
            current_phase=infer_phase(messages),
            next_steps=list(DEFAULT_NEXT_STEPS),
            last_updated=utcnow(),
        )

    async def summarize(self, messages: Sequence[Message]) -> ConversationSummary:
        return self.build(messages)


class CompletionSummarizer:
    """Summarizer backed by the completion provider."""

    def __init__(self, completion_client, correlation_id: str | None = None) -> None:
        """
        Args:
            completion_client: Object exposing async summarize_conversation()
            correlation_id: Correlation ID forwarded to provider logs
        """
        self.completion_client = completion_client
        self.correlation_id = correlation_id

    async def summarize(self, messages: Sequence[Message]) -> ConversationSummary:
        return await self.completion_client.summarize_conversation(
            list(messages),
            correlation_id=self.correlation_id,
        )
