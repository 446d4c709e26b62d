"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory async database, completion client mocks, message builders
Dependencies: pytest, pytest_asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from toad_architect.models.session import ConversationSummary, Message


@pytest_asyncio.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from toad_architect.boundary.db import init_models
    from toad_architect.boundary.db.base import Base

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    await init_models(engine)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def provider_summary() -> ConversationSummary:
    """Summary returned by the mocked completion provider."""
    return ConversationSummary(
        key_points=["Evaluated event sourcing"],
        current_phase=3,
        next_steps=["Score the options"],
        last_updated=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def mock_completion_client(provider_summary: ConversationSummary) -> MagicMock:
    """
    Create mock CompletionClient for testing.

    Returns:
        MagicMock: Mocked client with async provider methods
    """
    client = MagicMock()
    client.generate_response = AsyncMock(return_value="Consider a modular monolith first.")
    client.summarize_conversation = AsyncMock(return_value=provider_summary)
    client.validate_credentials = AsyncMock(return_value=True)
    return client


def build_conversation(turns: int, content: str = "Tell me about caching") -> list[Message]:
    """Build alternating user/assistant messages, user first."""
    messages = []
    for index in range(turns):
        if index % 2 == 0:
            messages.append(Message.user(f"{content} #{index}"))
        else:
            messages.append(Message.assistant(f"Reply #{index}"))
    return messages
