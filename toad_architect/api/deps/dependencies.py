"""
Dependency injection container.

The completion client and the per-session lock registry live for the whole
process; the database session and SessionService are built per request.

Dependencies: toad_architect.configs, toad_architect.application, toad_architect.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from toad_architect.application.services import SessionService
from toad_architect.application.services.session_locks import (
    SessionLockRegistry,
    session_locks,
)
from toad_architect.boundary.db import get_async_db
from toad_architect.boundary.llm import CompletionClient
from toad_architect.configs import Settings, get_settings


class ServiceCache:
    """Process-wide holder for the completion client."""

    def __init__(self) -> None:
        self._completion_client: CompletionClient | None = None

    @property
    def completion_client(self) -> CompletionClient:
        # Built on first use so the app starts without provider credentials
        if self._completion_client is None:
            self._completion_client = CompletionClient.from_settings(get_settings())
        return self._completion_client

    def clear(self) -> None:
        self._completion_client = None


_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    return get_settings()


def get_completion_client() -> CompletionClient:
    """Shared completion client (lazily built from settings)."""
    return get_service_cache().completion_client


def get_session_locks() -> SessionLockRegistry:
    return session_locks


def get_session_service(
    db: AsyncSession = Depends(get_async_db),
    completion_client: CompletionClient = Depends(get_completion_client),
    locks: SessionLockRegistry = Depends(get_session_locks),
    settings: Settings = Depends(get_settings_dependency),
) -> SessionService:
    """
    Build the request's SessionService.

    Summary threshold and retention window come from SessionSettings.
    """
    return SessionService(
        db=db,
        completion_client=completion_client,
        locks=locks,
        summary_threshold=settings.session.summary_threshold,
        retention_days=settings.session.cleanup_days,
    )
