"""
Session domain models and schemas.

Conversation records (Session, Message, ConversationSummary) and the
request/response schemas of the session API. Field names are snake_case in
Python and camelCase on the wire.

Dependencies: pydantic
System role: Session API contracts and domain records
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base schema serialized with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MessageRole(str, Enum):
    """Author of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(CamelModel):
    """Single immutable conversation turn."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=utcnow)
    role: MessageRole
    content: str

    @classmethod
    def user(cls, content: str) -> "Message":
        """Build a fresh user message."""
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        """Build a fresh assistant message."""
        return cls(role=MessageRole.ASSISTANT, content=content)


class ConversationSummary(CamelModel):
    """Derived digest of a conversation, recomputed wholesale."""

    key_points: list[str] = Field(default_factory=list)
    current_phase: int = Field(default=1, ge=1, le=5)
    next_steps: list[str] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=utcnow)


class Session(CamelModel):
    """Persisted conversational thread."""

    session_id: uuid.UUID
    created_at: datetime
    last_accessed: datetime
    current_phase: int = Field(default=1, ge=1, le=5)
    custom_instructions: str | None = None
    conversation_history: list[Message] = Field(default_factory=list)
    summary: ConversationSummary | None = None


class CreateSessionRequest(CamelModel):
    """Request schema for creating a new session."""

    custom_instructions: Annotated[
        str, StringConstraints(strip_whitespace=True, max_length=2000)
    ] | None = Field(
        default=None,
        description="Extra system guidance injected into every completion request",
    )


class SendMessageRequest(CamelModel):
    """Request schema for sending a user message."""

    content: Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=1, max_length=5000)
    ] = Field(description="User message text")


class SendMessageResponse(CamelModel):
    """Response schema for a completed conversation turn."""

    session_id: uuid.UUID
    message: Message
    conversation_history: list[Message]
