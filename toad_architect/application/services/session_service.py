"""
Session service orchestrator.

Coordinates the session conversation lifecycle: creation, message append
with history-length-triggered summarization, conversation turns through the
completion provider, export, and the age-based cleanup sweep.

Dependencies: toad_architect.boundary, toad_architect.core, sqlalchemy
System role: Session lifecycle use case orchestration
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID, uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from toad_architect.application.services.session_locks import (
    SessionLockRegistry,
    session_locks,
)
from toad_architect.boundary.db.CRUD.session_crud import session_crud
from toad_architect.boundary.db.models.session_model import SessionModel
from toad_architect.boundary.llm.completion_client import (
    CompletionClient,
    classify_provider_error,
)
from toad_architect.core.exceptions import (
    MessageSendError,
    QuotaExceededError,
    RateLimitError,
    SessionNotFoundError,
    StoreError,
    ThrottledError,
    ValidationError,
)
from toad_architect.core.export import render_session_markdown
from toad_architect.core.summarization import (
    CompletionSummarizer,
    ConversationSummarizer,
    HeuristicSummarizer,
)
from toad_architect.models.session import (
    ConversationSummary,
    Message,
    Session,
    utcnow,
)
from toad_architect.observability import log_utils
from toad_architect.observability.correlation import get_correlation_id
from toad_architect.observability.log_utils import (
    log_exception_with_context,
    log_session_event,
    log_with_context,
)

SUMMARY_THRESHOLD = 20
DEFAULT_RETENTION_DAYS = 30
MIN_PHASE = 1
MAX_PHASE = 5


@dataclass(frozen=True)
class SendMessageResult:
    """Outcome of a completed conversation turn."""

    session_id: UUID
    message: Message
    conversation_history: list[Message]


def to_session(row: SessionModel) -> Session:
    """Map a SessionModel row to the Session domain record."""
    return Session(
        session_id=row.session_id,
        created_at=row.created_at,
        last_accessed=row.last_accessed,
        current_phase=row.current_phase,
        custom_instructions=row.custom_instructions,
        conversation_history=[
            Message.model_validate(item) for item in row.conversation_history or []
        ],
        summary=(
            ConversationSummary.model_validate(row.summary)
            if row.summary
            else None
        ),
    )


def _dump_history(history: list[Message]) -> list[dict]:
    return [message.model_dump(mode="json", by_alias=True) for message in history]


class SessionService:
    """
    Session lifecycle manager.

    Owns session creation, message append, summarization, and phase
    tracking. Each mutation commits its own transaction; history
    read-modify-write cycles run under the per-session lock.
    """

    def __init__(
        self,
        db: AsyncSession,
        completion_client: CompletionClient | None = None,
        summarizer: ConversationSummarizer | None = None,
        locks: SessionLockRegistry | None = None,
        summary_threshold: int = SUMMARY_THRESHOLD,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize session service.

        Args:
            db: Async SQLAlchemy session
            completion_client: Completion provider for conversation turns
            summarizer: Summarizer run on append (defaults to the local heuristic)
            locks: Per-session lock registry (defaults to the process-wide one)
            summary_threshold: History length above which the summary is recomputed
            retention_days: Default retention window of the cleanup sweep
            logger: Logger to report through (defaults to the module logger)
        """
        self.db = db
        self.completion_client = completion_client
        self.summarizer = summarizer or HeuristicSummarizer()
        self.locks = locks if locks is not None else session_locks
        self.summary_threshold = summary_threshold
        self.retention_days = retention_days
        self.logger = logger or logging.getLogger(__name__)

    async def _commit(self, operation: str, session_id: UUID | None = None) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError(
                f"Failed to {operation} session",
                operation=operation,
                session_id=session_id,
            ) from e

    async def _load(self, session_id: UUID, fresh: bool = False) -> SessionModel:
        try:
            if fresh:
                row = await session_crud.get_current(self.db, session_id)
            else:
                row = await session_crud.get_by_id(self.db, session_id)
        except SQLAlchemyError as e:
            raise StoreError(
                "Failed to read session", operation="get", session_id=session_id
            ) from e

        if row is None:
            raise SessionNotFoundError(session_id)
        return row

    async def _write(self, session_id: UUID, operation: str, **fields) -> SessionModel:
        try:
            row = await session_crud.update_session(self.db, session_id, **fields)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError(
                f"Failed to {operation} session",
                operation=operation,
                session_id=session_id,
            ) from e
        if row is None:
            await self.db.rollback()
            raise SessionNotFoundError(session_id)
        await self._commit(operation, session_id)
        return row

    async def create_session(self, custom_instructions: str | None = None) -> Session:
        """
        Create a new empty session.

        Args:
            custom_instructions: Optional extra system guidance, fixed for the session

        Returns:
            Session: Persisted session with phase 1 and empty history

        Raises:
            StoreError: If the session cannot be persisted
        """
        session_id = uuid4()
        now = utcnow()

        try:
            row = await session_crud.create(
                self.db,
                session_id=session_id,
                created_at=now,
                last_accessed=now,
                current_phase=MIN_PHASE,
                custom_instructions=custom_instructions,
                conversation_history=[],
                summary=None,
            )
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError(
                "Failed to create session", operation="create", session_id=session_id
            ) from e
        await self._commit("create", session_id)

        log_session_event(
            self.logger, log_utils.SESSION_CREATED, "Session created", session_id
        )
        return to_session(row)

    async def get_session(self, session_id: UUID) -> Session:
        """
        Get session by ID. Never mutates the session.

        Raises:
            SessionNotFoundError: If the session does not exist
            StoreError: If the store cannot be read
        """
        return to_session(await self._load(session_id))

    async def append_message(self, session_id: UUID, message: Message) -> Session:
        """
        Append a message to a session's history.

        Once the history is longer than the summary threshold, the summary
        is recomputed wholesale and the session phase is raised to the
        inferred phase if that is higher. Shorter histories leave the
        summary untouched.

        Args:
            session_id: Session UUID
            message: Message to append

        Returns:
            Session: Updated session

        Raises:
            SessionNotFoundError: If the session does not exist
            StoreError: If the store cannot be read or written
        """
        async with self.locks.hold(session_id):
            row = await self._load(session_id, fresh=True)
            current = to_session(row)
            history = [*current.conversation_history, message]

            fields: dict = {"conversation_history": _dump_history(history)}
            if len(history) > self.summary_threshold:
                summary = await self.summarizer.summarize(history)
                fields["summary"] = summary.model_dump(mode="json", by_alias=True)
                fields["current_phase"] = max(current.current_phase, summary.current_phase)

            updated = await self._write(session_id, "update", **fields)

        return to_session(updated)

    async def send_message(
        self,
        session_id: UUID,
        content: str,
        correlation_id: str | None = None,
    ) -> SendMessageResult:
        """
        Run one conversation turn.

        Flow:
        1. Append the user message (persisted before anything else)
        2. Ask the completion provider for a reply over the full history
        3. Append the assistant message
        4. Return the reply and the full history

        A provider failure leaves the user message persisted and no
        assistant message appended.

        Args:
            session_id: Session UUID
            content: User message text
            correlation_id: Correlation ID for logs (defaults to the request's)

        Returns:
            SendMessageResult: Assistant message and full history

        Raises:
            SessionNotFoundError: If the session does not exist
            ThrottledError: If the provider signalled a rate limit or quota
            MessageSendError: If the provider failed for any other reason
            StoreError: If the store cannot be read or written
        """
        correlation_id = correlation_id or get_correlation_id()
        user_message = Message.user(content)
        session = await self.append_message(session_id, user_message)
        log_session_event(
            self.logger,
            log_utils.MESSAGE_SENT,
            "Message sent",
            session_id,
            correlation_id=correlation_id,
            message_length=len(content),
        )

        try:
            reply = await self.completion_client.generate_response(
                session.conversation_history,
                session.custom_instructions,
                correlation_id=correlation_id,
            )
        except Exception as e:
            error = classify_provider_error(e)
            log_with_context(
                self.logger,
                logging.ERROR,
                f"Completion failed: {error.message}",
                action=log_utils.ERROR,
                session_id=session_id,
                correlation_id=correlation_id,
                error_type=type(error).__name__,
            )
            if isinstance(error, (RateLimitError, QuotaExceededError)):
                raise ThrottledError(error.message, session_id=session_id) from e
            raise MessageSendError("Failed to send message", session_id=session_id) from e

        assistant_message = Message.assistant(reply)
        session = await self.append_message(session_id, assistant_message)
        log_session_event(
            self.logger,
            log_utils.AI_RESPONSE,
            "Assistant reply stored",
            session_id,
            correlation_id=correlation_id,
            response_length=len(reply),
        )

        return SendMessageResult(
            session_id=session_id,
            message=assistant_message,
            conversation_history=session.conversation_history,
        )

    async def summarize_session(
        self,
        session_id: UUID,
        correlation_id: str | None = None,
    ) -> Session:
        """
        Replace a session's summary with a provider-generated one.

        Explicit upgrade path over the local heuristic; never run
        automatically on append.

        Raises:
            SessionNotFoundError: If the session does not exist
            StoreError: If the store cannot be read or written
        """
        correlation_id = correlation_id or get_correlation_id()
        summarizer = CompletionSummarizer(self.completion_client, correlation_id=correlation_id)

        session = await self.get_session(session_id)
        summary = await summarizer.summarize(session.conversation_history)

        async with self.locks.hold(session_id):
            row = await self._load(session_id, fresh=True)
            updated = await self._write(
                session_id,
                "summarize",
                summary=summary.model_dump(mode="json", by_alias=True),
                current_phase=max(row.current_phase, summary.current_phase),
            )

        log_session_event(
            self.logger,
            log_utils.SESSION_SUMMARIZED,
            "Session summarized",
            session_id,
            correlation_id=correlation_id,
            current_phase=updated.current_phase,
        )
        return to_session(updated)

    async def update_session(
        self,
        session_id: UUID,
        current_phase: int | None = None,
    ) -> Session:
        """
        Explicitly update a session and stamp its last access.

        The phase never decreases: a lower value leaves the stored phase in place.

        Raises:
            ValidationError: If the phase is outside 1..5
            SessionNotFoundError: If the session does not exist
        """
        if current_phase is not None and not MIN_PHASE <= current_phase <= MAX_PHASE:
            raise ValidationError(
                f"Phase must be between {MIN_PHASE} and {MAX_PHASE}", field="current_phase"
            )

        async with self.locks.hold(session_id):
            row = await self._load(session_id, fresh=True)
            fields = {}
            if current_phase is not None:
                fields["current_phase"] = max(row.current_phase, current_phase)
            updated = await self._write(session_id, "update", **fields)
        return to_session(updated)

    async def export_session(self, session_id: UUID) -> str:
        """
        Render a session as a markdown document.

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        session = await self.get_session(session_id)
        return render_session_markdown(session)

    async def delete_session(self, session_id: UUID) -> None:
        """
        Delete a session.

        Raises:
            SessionNotFoundError: If the session does not exist
            StoreError: If the delete fails
        """
        try:
            deleted = await session_crud.delete_by_id(self.db, session_id)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError(
                "Failed to delete session", operation="delete", session_id=session_id
            ) from e
        if not deleted:
            raise SessionNotFoundError(session_id)
        await self._commit("delete", session_id)
        log_session_event(
            self.logger, log_utils.SESSION_DELETED, "Session deleted", session_id
        )

    async def cleanup_old_sessions(self, days_old: int | None = None) -> int:
        """
        Delete sessions not accessed within the retention window.

        Best effort: a failed delete is logged and the sweep continues.

        Args:
            days_old: Retention window in days (defaults to the configured window)

        Returns:
            int: Number of sessions deleted

        Raises:
            StoreError: If expired sessions cannot be listed
        """
        days_old = self.retention_days if days_old is None else days_old
        cutoff = utcnow() - timedelta(days=days_old)

        try:
            expired = await session_crud.get_older_than(self.db, cutoff)
        except SQLAlchemyError as e:
            raise StoreError("Failed to list expired sessions", operation="query") from e

        expired_ids = [row.session_id for row in expired]
        deleted_count = 0
        for session_id in expired_ids:
            try:
                deleted = await session_crud.delete_by_id(self.db, session_id)
                await self.db.commit()
                if deleted:
                    deleted_count += 1
            except SQLAlchemyError as e:
                await self.db.rollback()
                log_exception_with_context(
                    self.logger,
                    "Error deleting old session",
                    e,
                    session_id=session_id,
                )

        log_session_event(
            self.logger,
            log_utils.SESSION_CLEANUP,
            "Session cleanup completed",
            deleted_count=deleted_count,
            days_old=days_old,
        )
        return deleted_count

    async def check_store(self) -> bool:
        """Whether the session store answers a trivial query."""
        try:
            await session_crud.ping(self.db)
            return True
        except SQLAlchemyError as e:
            self.logger.error(f"Session store health check failed: {type(e).__name__}: {e}")
            return False
