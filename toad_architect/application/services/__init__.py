"""Service orchestrators."""

from .session_locks import SessionLockRegistry, session_locks
from .session_service import SendMessageResult, SessionService

__all__ = [
    "SendMessageResult",
    "SessionLockRegistry",
    "SessionService",
    "session_locks",
]
