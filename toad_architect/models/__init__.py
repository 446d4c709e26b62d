"""
Domain models and API schemas.

Exports:
  - Message, MessageRole, ConversationSummary, Session: conversation records
  - CreateSessionRequest, SendMessageRequest, SendMessageResponse: API contracts
  - ErrorResponse, HealthResponse: shared response bodies
"""

from toad_architect.models.common import ErrorResponse, HealthResponse, ServiceStatus
from toad_architect.models.session import (
    ConversationSummary,
    CreateSessionRequest,
    Message,
    MessageRole,
    SendMessageRequest,
    SendMessageResponse,
    Session,
)

__all__ = [
    "ConversationSummary",
    "CreateSessionRequest",
    "ErrorResponse",
    "HealthResponse",
    "Message",
    "MessageRole",
    "SendMessageRequest",
    "SendMessageResponse",
    "ServiceStatus",
    "Session",
]
