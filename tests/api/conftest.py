"""
API test fixtures.

Builds the real application with service dependencies overridden by mocks.
The lifespan is not entered, so no database is touched.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from toad_architect.api.deps import get_completion_client, get_session_service
from toad_architect.api.main import create_app


@pytest.fixture
def mock_session_service() -> AsyncMock:
    """Provide mocked SessionService."""
    return AsyncMock()


@pytest.fixture
def app(mock_session_service: AsyncMock, mock_completion_client: MagicMock):
    app = create_app()
    app.dependency_overrides[get_session_service] = lambda: mock_session_service
    app.dependency_overrides[get_completion_client] = lambda: mock_completion_client
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
