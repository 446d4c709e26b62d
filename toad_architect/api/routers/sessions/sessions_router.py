"""
Session API endpoints.

Routes:
- POST /sessions - Create new session
- GET /sessions/{id} - Get session
- POST /sessions/{id}/messages - Send a message and get the assistant reply
- GET /sessions/{id}/export - Download the session as markdown
- POST /sessions/{id}/summary - Regenerate the summary with the completion provider
- DELETE /sessions/{id} - Delete session

Dependencies: toad_architect.application.services, toad_architect.models
System role: Session lifecycle HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Response

from toad_architect.api.deps.dependencies import get_session_service
from toad_architect.application.services.session_service import SessionService
from toad_architect.core.export import export_filename
from toad_architect.models.session import (
    CreateSessionRequest,
    SendMessageRequest,
    SendMessageResponse,
    Session,
)
from toad_architect.observability.correlation import get_correlation_id

from .session_error_handling import handle_session_errors
from .session_validators import validate_session_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])

MARKDOWN_MEDIA_TYPE = "text/markdown"


@router.post("", response_model=Session, status_code=201)
@handle_session_errors("Failed to create session")
async def create_session(
    request: CreateSessionRequest | None = None,
    session_service: SessionService = Depends(get_session_service),
) -> Session:
    """
    Create new session with optional custom instructions.

    Args:
        request: CreateSessionRequest with customInstructions (body optional)
        session_service: Injected SessionService

    Returns:
        Session: Created session
    """
    custom_instructions = request.custom_instructions if request else None
    return await session_service.create_session(custom_instructions=custom_instructions or None)


@router.get("/{session_id}", response_model=Session)
@handle_session_errors("Failed to get session")
async def get_session(
    session_id: UUID,
    session_service: SessionService = Depends(get_session_service),
) -> Session:
    """
    Get session by ID.

    Args:
        session_id: Session UUID (version 4)
        session_service: Injected SessionService

    Returns:
        Session: Session with full history and summary
    """
    validate_session_id(session_id)
    return await session_service.get_session(session_id)


@router.post("/{session_id}/messages", response_model=SendMessageResponse)
@handle_session_errors("Failed to send message")
async def send_message(
    session_id: UUID,
    request: SendMessageRequest,
    session_service: SessionService = Depends(get_session_service),
) -> SendMessageResponse:
    """
    Send a user message and return the assistant reply.

    The user message is persisted even when the completion provider fails.

    Args:
        session_id: Session UUID (version 4)
        request: SendMessageRequest with content
        session_service: Injected SessionService

    Returns:
        SendMessageResponse: Assistant message and full conversation history
    """
    validate_session_id(session_id)
    result = await session_service.send_message(
        session_id,
        request.content,
        correlation_id=get_correlation_id(),
    )
    return SendMessageResponse(
        session_id=result.session_id,
        message=result.message,
        conversation_history=result.conversation_history,
    )


@router.get("/{session_id}/export")
@handle_session_errors("Failed to export session")
async def export_session(
    session_id: UUID,
    session_service: SessionService = Depends(get_session_service),
) -> Response:
    """
    Download a session as a markdown document.

    Args:
        session_id: Session UUID (version 4)
        session_service: Injected SessionService

    Returns:
        Response: Markdown attachment named session-<id>.md
    """
    validate_session_id(session_id)
    markdown = await session_service.export_session(session_id)
    return Response(
        content=markdown,
        media_type=MARKDOWN_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(session_id)}"'
        },
    )


@router.post("/{session_id}/summary", response_model=Session)
@handle_session_errors("Failed to summarize session")
async def summarize_session(
    session_id: UUID,
    session_service: SessionService = Depends(get_session_service),
) -> Session:
    """
    Regenerate a session's summary with the completion provider.

    Args:
        session_id: Session UUID (version 4)
        session_service: Injected SessionService

    Returns:
        Session: Session carrying the new summary
    """
    validate_session_id(session_id)
    return await session_service.summarize_session(
        session_id, correlation_id=get_correlation_id()
    )


@router.delete("/{session_id}", status_code=204)
@handle_session_errors("Failed to delete session")
async def delete_session(
    session_id: UUID,
    session_service: SessionService = Depends(get_session_service),
) -> Response:
    """
    Delete session by ID.

    Args:
        session_id: Session UUID (version 4)
        session_service: Injected SessionService

    Returns:
        204 No Content on success
    """
    validate_session_id(session_id)
    await session_service.delete_session(session_id)
    return Response(status_code=204)
