"""
Test suite for session API endpoints.

System role: Verification of session HTTP surface and error mapping
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from toad_architect.api.routers.sessions import session_error_handling
from toad_architect.application.services.session_service import SendMessageResult
from toad_architect.core.exceptions import (
    MessageSendError,
    SessionNotFoundError,
    StoreError,
    ThrottledError,
)
from toad_architect.models.session import ConversationSummary, Message, Session

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def session_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def session(session_id: uuid.UUID) -> Session:
    """Session returned by the mocked service."""
    return Session(
        session_id=session_id,
        created_at=NOW,
        last_accessed=NOW,
        current_phase=1,
        custom_instructions="Prefer serverless",
    )


class TestCreateSession:
    """Test suite for POST /api/sessions."""

    def test_create_session_should_return_201_with_camel_case_body(
        self, client: TestClient, mock_session_service: AsyncMock, session: Session
    ) -> None:
        # Arrange
        mock_session_service.create_session.return_value = session

        # Act
        response = client.post("/api/sessions", json={"customInstructions": "  Prefer serverless  "})

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["sessionId"] == str(session.session_id)
        assert data["currentPhase"] == 1
        assert data["conversationHistory"] == []
        assert data["customInstructions"] == "Prefer serverless"
        mock_session_service.create_session.assert_awaited_once_with(
            custom_instructions="Prefer serverless"
        )

    def test_create_session_should_accept_missing_body(
        self, client: TestClient, mock_session_service: AsyncMock, session: Session
    ) -> None:
        mock_session_service.create_session.return_value = session

        response = client.post("/api/sessions")

        assert response.status_code == 201
        mock_session_service.create_session.assert_awaited_once_with(custom_instructions=None)

    def test_create_session_should_reject_long_instructions(
        self, client: TestClient, mock_session_service: AsyncMock
    ) -> None:
        # Act
        response = client.post("/api/sessions", json={"customInstructions": "x" * 2001})

        # Assert
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        assert body["message"] == "Invalid input data"
        assert body["details"]
        mock_session_service.create_session.assert_not_awaited()

    def test_create_session_should_map_store_failure_to_500(
        self, client: TestClient, mock_session_service: AsyncMock
    ) -> None:
        # Arrange
        mock_session_service.create_session.side_effect = StoreError(
            "Failed to create session", operation="create"
        )

        # Act
        response = client.post("/api/sessions", json={})

        # Assert
        assert response.status_code == 500
        assert response.json()["error"] == "Failed to create session"
        assert response.json()["message"] == "Internal server error"

    def test_store_failure_should_be_logged_with_session_id(
        self, client: TestClient, mock_session_service: AsyncMock, session_id: uuid.UUID
    ) -> None:
        # Arrange
        mock_session_service.delete_session.side_effect = StoreError(
            "Failed to delete session", operation="delete", session_id=session_id
        )

        # Act
        with patch.object(session_error_handling, "logger") as logger:
            response = client.delete(f"/api/sessions/{session_id}")

        # Assert
        assert response.status_code == 500
        assert response.json()["error"] == "Failed to delete session"
        assert response.json()["message"] == "Internal server error"
        _, kwargs = logger.error.call_args
        assert kwargs["extra"] == {"session_id": str(session_id), "operation": "delete"}


class TestGetSession:
    """Test suite for GET /api/sessions/{id}."""

    def test_get_session_should_return_session(
        self, client: TestClient, mock_session_service: AsyncMock, session: Session
    ) -> None:
        # Arrange
        mock_session_service.get_session.return_value = session.model_copy(
            update={
                "summary": ConversationSummary(
                    key_points=["Caching..."], current_phase=2, next_steps=["Next"]
                )
            }
        )

        # Act
        response = client.get(f"/api/sessions/{session.session_id}")

        # Assert
        assert response.status_code == 200
        assert response.json()["summary"]["keyPoints"] == ["Caching..."]
        mock_session_service.get_session.assert_awaited_once_with(session.session_id)

    def test_get_session_should_return_404_with_correlation_id(
        self, client: TestClient, mock_session_service: AsyncMock, session_id: uuid.UUID
    ) -> None:
        # Arrange
        mock_session_service.get_session.side_effect = SessionNotFoundError(session_id)

        # Act
        response = client.get(
            f"/api/sessions/{session_id}", headers={"X-Correlation-ID": "corr-404"}
        )

        # Assert
        assert response.status_code == 404
        assert response.json() == {
            "error": "Session not found",
            "message": "The requested session does not exist",
            "correlationId": "corr-404",
        }
        assert response.headers["X-Correlation-ID"] == "corr-404"

    def test_get_session_should_reject_malformed_id(
        self, client: TestClient, mock_session_service: AsyncMock
    ) -> None:
        response = client.get("/api/sessions/not-a-uuid")

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"
        mock_session_service.get_session.assert_not_awaited()

    def test_get_session_should_reject_non_v4_uuid(
        self, client: TestClient, mock_session_service: AsyncMock
    ) -> None:
        response = client.get(f"/api/sessions/{uuid.uuid1()}")

        assert response.status_code == 400
        assert response.json()["details"] == ["Session ID must be a valid UUID"]
        mock_session_service.get_session.assert_not_awaited()

    def test_get_session_should_hide_unexpected_errors(
        self, client: TestClient, mock_session_service: AsyncMock, session_id: uuid.UUID
    ) -> None:
        mock_session_service.get_session.side_effect = RuntimeError("secret stack detail")

        response = client.get(f"/api/sessions/{session_id}")

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to get session"
        assert "secret" not in response.text


class TestSendMessage:
    """Test suite for POST /api/sessions/{id}/messages."""

    def test_send_message_should_return_reply_and_history(
        self, client: TestClient, mock_session_service: AsyncMock, session_id: uuid.UUID
    ) -> None:
        # Arrange
        user_message = Message.user("How do we scale?")
        reply = Message.assistant("Start with read replicas.")
        mock_session_service.send_message.return_value = SendMessageResult(
            session_id=session_id,
            message=reply,
            conversation_history=[user_message, reply],
        )

        # Act
        response = client.post(
            f"/api/sessions/{session_id}/messages",
            json={"content": "  How do we scale?  "},
            headers={"X-Correlation-ID": "corr-send"},
        )

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["sessionId"] == str(session_id)
        assert data["message"]["content"] == "Start with read replicas."
        assert data["message"]["role"] == "assistant"
        assert [m["role"] for m in data["conversationHistory"]] == ["user", "assistant"]
        mock_session_service.send_message.assert_awaited_once_with(
            session_id, "How do we scale?", correlation_id="corr-send"
        )

    @pytest.mark.parametrize("content", ["", "   ", "x" * 5001])
    def test_send_message_should_reject_invalid_content(
        self,
        client: TestClient,
        mock_session_service: AsyncMock,
        session_id: uuid.UUID,
        content: str,
    ) -> None:
        response = client.post(f"/api/sessions/{session_id}/messages", json={"content": content})

        assert response.status_code == 400
        mock_session_service.send_message.assert_not_awaited()

    def test_send_message_should_return_404_for_unknown_session(
        self, client: TestClient, mock_session_service: AsyncMock, session_id: uuid.UUID
    ) -> None:
        mock_session_service.send_message.side_effect = SessionNotFoundError(session_id)

        response = client.post(f"/api/sessions/{session_id}/messages", json={"content": "Hi"})

        assert response.status_code == 404

    def test_send_message_should_return_429_when_throttled(
        self, client: TestClient, mock_session_service: AsyncMock, session_id: uuid.UUID
    ) -> None:
        # Arrange
        mock_session_service.send_message.side_effect = ThrottledError(
            "Rate limit exceeded. Please try again in a moment.", session_id=session_id
        )

        # Act
        response = client.post(f"/api/sessions/{session_id}/messages", json={"content": "Hi"})

        # Assert
        assert response.status_code == 429
        assert response.json()["error"] == "Rate limit exceeded"
        assert response.json()["message"] == "Rate limit exceeded. Please try again in a moment."

    def test_send_message_should_return_500_on_provider_failure(
        self, client: TestClient, mock_session_service: AsyncMock, session_id: uuid.UUID
    ) -> None:
        # Arrange
        mock_session_service.send_message.side_effect = MessageSendError(
            "Failed to send message", session_id=session_id
        )

        # Act
        response = client.post(f"/api/sessions/{session_id}/messages", json={"content": "Hi"})

        # Assert
        assert response.status_code == 500
        assert response.json()["error"] == "Failed to send message"
        assert response.json()["message"] == "Internal server error"
        assert response.json()["correlationId"] == response.headers["X-Correlation-ID"]


class TestExportSession:
    """Test suite for GET /api/sessions/{id}/export."""

    def test_export_session_should_return_markdown_attachment(
        self, client: TestClient, mock_session_service: AsyncMock, session_id: uuid.UUID
    ) -> None:
        # Arrange
        mock_session_service.export_session.return_value = "# Software Architecture Session\n"

        # Act
        response = client.get(f"/api/sessions/{session_id}/export")

        # Assert
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/markdown")
        assert response.headers["content-disposition"] == (
            f'attachment; filename="session-{session_id}.md"'
        )
        assert response.text == "# Software Architecture Session\n"

    def test_export_session_should_return_404_for_unknown_session(
        self, client: TestClient, mock_session_service: AsyncMock, session_id: uuid.UUID
    ) -> None:
        mock_session_service.export_session.side_effect = SessionNotFoundError(session_id)

        response = client.get(f"/api/sessions/{session_id}/export")

        assert response.status_code == 404


class TestSummarizeSession:
    """Test suite for POST /api/sessions/{id}/summary."""

    def test_summarize_session_should_return_updated_session(
        self, client: TestClient, mock_session_service: AsyncMock, session: Session
    ) -> None:
        # Arrange
        mock_session_service.summarize_session.return_value = session.model_copy(
            update={"current_phase": 3}
        )

        # Act
        response = client.post(f"/api/sessions/{session.session_id}/summary")

        # Assert
        assert response.status_code == 200
        assert response.json()["currentPhase"] == 3
        mock_session_service.summarize_session.assert_awaited_once()


class TestDeleteSession:
    """Test suite for DELETE /api/sessions/{id}."""

    def test_delete_session_should_return_204(
        self, client: TestClient, mock_session_service: AsyncMock, session_id: uuid.UUID
    ) -> None:
        response = client.delete(f"/api/sessions/{session_id}")

        assert response.status_code == 204
        mock_session_service.delete_session.assert_awaited_once_with(session_id)

    def test_delete_session_should_return_404_for_unknown_session(
        self, client: TestClient, mock_session_service: AsyncMock, session_id: uuid.UUID
    ) -> None:
        mock_session_service.delete_session.side_effect = SessionNotFoundError(session_id)

        response = client.delete(f"/api/sessions/{session_id}")

        assert response.status_code == 404
