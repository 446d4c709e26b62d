"""
Structured logging helpers.

Session lifecycle events are logged as a short message plus an ``extra``
dict carrying an ``action`` tag and the session ID, so log
pipelines can filter by event without parsing the message text.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

MAX_VALUE_LENGTH = 500

# Event tags carried in the "action" field
SESSION_CREATED = "session_created"
MESSAGE_SENT = "message_sent"
AI_RESPONSE = "ai_response"
SESSION_SUMMARIZED = "session_summarized"
SESSION_DELETED = "session_deleted"
SESSION_CLEANUP = "session_cleanup"
ERROR = "error"


def safe_log_value(value: Any, max_length: int = MAX_VALUE_LENGTH) -> str:
    """
    Render a context value as a bounded string.

    Collections are reduced to their size so message bodies and histories
    never end up in the logs.
    """
    if value is None:
        return "None"
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return f"{type(value).__name__}({len(value)} items)"
    if isinstance(value, dict):
        return f"dict({len(value)} keys)"

    try:
        text = value if isinstance(value, str) else str(value)
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"

    if len(text) > max_length:
        return f"{text[:max_length]}... (truncated, {len(text)} total)"
    return text


def _context(**fields: Any) -> dict[str, Any]:
    return {
        key: value if isinstance(value, (int, float, bool)) else safe_log_value(value)
        for key, value in fields.items()
        if value is not None
    }


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any,
) -> None:
    """
    Log a message with structured context.

    Numbers and booleans are kept as-is; everything else is passed through
    safe_log_value. None values are dropped.
    """
    logger.log(level, message, extra=_context(**context))


def log_session_event(
    logger: logging.Logger,
    action: str,
    message: str,
    session_id: UUID | str | None = None,
    **context: Any,
) -> None:
    """Log an INFO-level session lifecycle event tagged with its action."""
    log_with_context(
        logger, logging.INFO, message, action=action, session_id=session_id, **context
    )


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context: Any,
) -> None:
    """Log an ERROR with traceback, error type and error text."""
    extra = _context(action=ERROR, **context)
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(str(exc))
    logger.error(message, exc_info=exc, extra=extra)
