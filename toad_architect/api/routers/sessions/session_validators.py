"""
Session request validators.

Checks applied to session endpoints beyond what the request schemas enforce.
"""

from uuid import UUID

from toad_architect.core.exceptions import ValidationError

SESSION_ID_VERSION = 4


def validate_session_id(session_id: UUID) -> UUID:
    """
    Ensure a session ID is a version 4 UUID.

    Args:
        session_id: Parsed path parameter

    Returns:
        UUID: The same session ID

    Raises:
        ValidationError: If the UUID is not version 4
    """
    if session_id.version != SESSION_ID_VERSION:
        raise ValidationError("Session ID must be a valid UUID", field="sessionId")
    return session_id
