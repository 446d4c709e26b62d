"""
Markdown export of a session.

Renders a session's metadata, summary, and full history into a
human-readable document. Read-only.

Dependencies: toad_architect.models
System role: Session export formatting
"""

from datetime import datetime, timezone
from uuid import UUID

from toad_architect.models.session import MessageRole, Session

ROLE_HEADINGS = {
    MessageRole.USER: "User",
    MessageRole.ASSISTANT: "AI Assistant",
}


def _iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def export_filename(session_id: UUID) -> str:
    """Attachment filename for an exported session."""
    return f"session-{session_id}.md"


def render_session_markdown(session: Session) -> str:
    """
    Render a session as a markdown document.

    Args:
        session: Session to export

    Returns:
        str: Markdown with metadata, optional custom instructions and
            summary, and the full conversation history
    """
    lines = [
        "# Software Architecture Session",
        "",
        f"**Session ID:** {session.session_id}",
        f"**Created:** {_iso(session.created_at)}",
        f"**Last Accessed:** {_iso(session.last_accessed)}",
        f"**Current Phase:** {session.current_phase}",
        "",
    ]

    if session.custom_instructions:
        lines += ["## Custom Instructions", "", session.custom_instructions, ""]

    if session.summary is not None:
        lines += ["## Conversation Summary", "", "**Key Points:**"]
        lines += [f"- {point}" for point in session.summary.key_points]
        lines += ["", f"**Current Phase:** {session.summary.current_phase}", "**Next Steps:**"]
        lines += [f"- {step}" for step in session.summary.next_steps]
        lines.append("")

    lines += ["## Conversation History", ""]

    history = session.conversation_history
    for index, message in enumerate(history):
        lines += [
            f"### {ROLE_HEADINGS[message.role]} ({_iso(message.timestamp)})",
            "",
            message.content,
            "",
        ]
        if index < len(history) - 1:
            lines += ["---", ""]

    return "\n".join(lines)
