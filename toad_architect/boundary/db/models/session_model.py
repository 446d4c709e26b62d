"""
Session ORM model.

Represents one architecture-advisory conversation: its phase, optional
custom instructions, full message history, and derived summary. History and
summary are stored as JSON documents and rewritten wholesale.

Dependencies: sqlalchemy, toad_architect.boundary.db.base
System role: Session persistence for conversation state
"""

import uuid

from sqlalchemy import JSON, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from toad_architect.boundary.db.base import AccessTimestampMixin, Base


class SessionModel(Base, AccessTimestampMixin):
    """
    Session ORM model.

    Attributes:
        session_id: UUID v4 primary key, assigned by the service
        current_phase: Advisory phase 1..5
        custom_instructions: Optional extra system guidance, immutable
        conversation_history: JSON list of serialized messages
        summary: JSON summary document, absent until the history is long enough
        created_at: Session creation timestamp (UTC)
        last_accessed: Last mutation timestamp (UTC)
    """

    __tablename__ = "sessions"

    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )
    current_phase: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
    )
    custom_instructions: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )
    conversation_history: Mapped[list] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="Serialized messages in chronological order",
    )
    summary: Mapped[dict | None] = mapped_column(
        JSON,
        nullable=True,
        default=None,
        doc="Serialized ConversationSummary",
    )
