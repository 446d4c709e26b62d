"""
Test suite for SessionCRUD database operations.

Runs against an in-memory SQLite database through aiosqlite.

System role: Verification of session persistence layer
"""

import uuid
from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from toad_architect.boundary.db.base import utcnow
from toad_architect.boundary.db.CRUD.session_crud import SessionCRUD


@pytest.fixture
def session_crud() -> SessionCRUD:
    """Provide SessionCRUD instance for testing."""
    return SessionCRUD()


class TestSessionCRUDGetCurrent:
    """Test suite for SessionCRUD.get_current()."""

    @pytest.mark.asyncio
    async def test_get_current_should_see_commits_from_other_sessions(
        self, session_crud: SessionCRUD, test_async_db: AsyncSession
    ) -> None:
        # Arrange
        row = await session_crud.create(test_async_db)
        await test_async_db.commit()
        async with AsyncSession(test_async_db.bind, expire_on_commit=False) as other:
            await session_crud.update_session(other, row.session_id, current_phase=4)
            await other.commit()

        # Act
        current = await session_crud.get_current(test_async_db, row.session_id)

        # Assert
        assert current is row
        assert current.current_phase == 4

    @pytest.mark.asyncio
    async def test_get_current_should_return_none_for_unknown_id(
        self, session_crud: SessionCRUD, test_async_db: AsyncSession
    ) -> None:
        assert await session_crud.get_current(test_async_db, uuid.uuid4()) is None


class TestSessionCRUDCreate:
    """Test suite for SessionCRUD.create()."""

    @pytest.mark.asyncio
    async def test_create_should_apply_defaults(
        self, session_crud: SessionCRUD, test_async_db: AsyncSession
    ) -> None:
        # Act
        row = await session_crud.create(test_async_db)

        # Assert
        assert isinstance(row.session_id, uuid.UUID)
        assert row.current_phase == 1
        assert row.conversation_history == []
        assert row.summary is None
        assert row.custom_instructions is None

    @pytest.mark.asyncio
    async def test_get_by_id_should_return_none_for_unknown_id(
        self, session_crud: SessionCRUD, test_async_db: AsyncSession
    ) -> None:
        assert await session_crud.get_by_id(test_async_db, uuid.uuid4()) is None


class TestSessionCRUDUpdateSession:
    """Test suite for SessionCRUD.update_session()."""

    @pytest.mark.asyncio
    async def test_update_session_should_stamp_last_accessed(
        self, session_crud: SessionCRUD, test_async_db: AsyncSession
    ) -> None:
        # Arrange
        stale = utcnow() - timedelta(days=3)
        row = await session_crud.create(test_async_db, created_at=stale, last_accessed=stale)
        await test_async_db.commit()

        # Act
        updated = await session_crud.update_session(
            test_async_db, row.session_id, current_phase=3
        )
        await test_async_db.commit()

        # Assert
        assert updated is not None
        assert updated.current_phase == 3
        reloaded = await session_crud.get_current(test_async_db, row.session_id)
        assert reloaded.last_accessed.replace(tzinfo=None) > stale.replace(tzinfo=None)
        assert reloaded.created_at.replace(tzinfo=None) == stale.replace(tzinfo=None)

    @pytest.mark.asyncio
    async def test_update_session_should_return_none_for_unknown_id(
        self, session_crud: SessionCRUD, test_async_db: AsyncSession
    ) -> None:
        result = await session_crud.update_session(test_async_db, uuid.uuid4(), current_phase=2)

        assert result is None


class TestSessionCRUDGetOlderThan:
    """Test suite for SessionCRUD.get_older_than()."""

    @pytest.mark.asyncio
    async def test_get_older_than_should_use_strict_cutoff(
        self, session_crud: SessionCRUD, test_async_db: AsyncSession
    ) -> None:
        # Arrange
        now = utcnow()
        old = await session_crud.create(
            test_async_db, created_at=now - timedelta(days=40), last_accessed=now - timedelta(days=40)
        )
        await session_crud.create(
            test_async_db, created_at=now - timedelta(days=10), last_accessed=now - timedelta(days=10)
        )
        await test_async_db.commit()

        # Act
        expired = await session_crud.get_older_than(test_async_db, now - timedelta(days=30))

        # Assert
        assert [row.session_id for row in expired] == [old.session_id]


class TestSessionCRUDDelete:
    """Test suite for SessionCRUD.delete_by_id() and exists()."""

    @pytest.mark.asyncio
    async def test_delete_by_id_should_remove_session(
        self, session_crud: SessionCRUD, test_async_db: AsyncSession
    ) -> None:
        # Arrange
        row = await session_crud.create(test_async_db)
        await test_async_db.commit()

        # Act
        deleted = await session_crud.delete_by_id(test_async_db, row.session_id)
        await test_async_db.commit()

        # Assert
        assert deleted is True
        assert await session_crud.exists(test_async_db, row.session_id) is False

    @pytest.mark.asyncio
    async def test_delete_by_id_should_return_false_for_unknown_id(
        self, session_crud: SessionCRUD, test_async_db: AsyncSession
    ) -> None:
        assert await session_crud.delete_by_id(test_async_db, uuid.uuid4()) is False


class TestSessionCRUDPing:
    """Test suite for SessionCRUD.ping()."""

    @pytest.mark.asyncio
    async def test_ping_should_succeed_on_live_database(
        self, session_crud: SessionCRUD, test_async_db: AsyncSession
    ) -> None:
        await session_crud.ping(test_async_db)
