"""
Session CRUD operations.

Queries over the sessions table: insert, lookup, partial update with
last-access stamping, delete, and the age-based sweep query.

Dependencies: sqlalchemy, toad_architect.boundary.db.models
System role: Session persistence operations
"""

from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import delete, select, text, update
from sqlalchemy.ext.asyncio import AsyncSession

from toad_architect.boundary.db.base import utcnow
from toad_architect.boundary.db.models.session_model import SessionModel


class SessionCRUD:
    """
    CRUD operations for SessionModel.

    Methods flush but never commit; the caller owns the transaction.
    Every mutation through update_session stamps last_accessed.
    """

    async def create(self, session: AsyncSession, **fields: Any) -> SessionModel:
        """
        Insert a session row.

        Returns:
            SessionModel with server-side defaults loaded
        """
        row = SessionModel(**fields)
        session.add(row)
        await session.flush()
        await session.refresh(row)
        return row

    async def get_by_id(self, session: AsyncSession, id: UUID) -> SessionModel | None:
        """Session by ID, or None."""
        stmt = select(SessionModel).where(SessionModel.session_id == id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_current(self, session: AsyncSession, id: UUID) -> SessionModel | None:
        """
        Re-read a session from the database, overwriting any stale copy
        held in the session identity map.

        Args:
            session: Async database session
            id: Session UUID

        Returns:
            SessionModel if found, None otherwise
        """
        stmt = (
            select(SessionModel)
            .where(SessionModel.session_id == id)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def exists(self, session: AsyncSession, id: UUID) -> bool:
        stmt = select(SessionModel.session_id).where(SessionModel.session_id == id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def update_session(
        self,
        session: AsyncSession,
        id: UUID,
        **fields: Any,
    ) -> SessionModel | None:
        """
        Partially update a session and stamp last_accessed.

        Args:
            session: Async database session
            id: Session UUID
            **fields: Columns to overwrite (history and summary are replaced wholesale)

        Returns:
            Updated SessionModel if found, None otherwise
        """
        fields.setdefault("last_accessed", utcnow())
        stmt = (
            update(SessionModel)
            .where(SessionModel.session_id == id)
            .values(**fields)
            .returning(SessionModel)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_by_id(self, session: AsyncSession, id: UUID) -> bool:
        """
        Delete a session.

        Returns:
            True if a row was deleted, False if the session did not exist
        """
        stmt = delete(SessionModel).where(SessionModel.session_id == id)
        result = await session.execute(stmt)
        return result.rowcount > 0

    async def get_older_than(
        self,
        session: AsyncSession,
        cutoff: datetime,
    ) -> Sequence[SessionModel]:
        """
        Retrieve sessions last accessed strictly before the cutoff.

        Args:
            session: Async database session
            cutoff: Exclusive upper bound on last_accessed

        Returns:
            Sequence of expired SessionModels, oldest first
        """
        stmt = (
            select(SessionModel)
            .where(SessionModel.last_accessed < cutoff)
            .order_by(SessionModel.last_accessed)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def ping(self, session: AsyncSession) -> None:
        """
        Run a trivial query to verify the store is reachable.

        Raises:
            SQLAlchemyError: If the database cannot be reached
        """
        await session.execute(text("SELECT 1"))


session_crud = SessionCRUD()
