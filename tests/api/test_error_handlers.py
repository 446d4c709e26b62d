"""
Test suite for app-level error handlers.

Covers responses produced outside the session routes: unknown paths, wrong
methods, and exceptions no route handled.

System role: Verification of uniform error bodies
"""

from fastapi import FastAPI
from fastapi.testclient import TestClient


class TestUnknownRoutes:
    """Test suite for framework HTTP errors."""

    def test_unknown_path_should_return_not_found_error_body(self, client: TestClient) -> None:
        # Act
        response = client.get("/api/nope", headers={"X-Correlation-ID": "corr-404"})

        # Assert
        assert response.status_code == 404
        assert response.json() == {
            "error": "Not found",
            "message": "The requested resource does not exist",
            "correlationId": "corr-404",
        }

    def test_wrong_method_should_keep_error_shape(self, client: TestClient) -> None:
        # Act
        response = client.put("/api/sessions", headers={"X-Correlation-ID": "corr-405"})

        # Assert
        assert response.status_code == 405
        data = response.json()
        assert data["error"] == "Method Not Allowed"
        assert data["message"] == "Method Not Allowed"
        assert data["correlationId"] == "corr-405"
        assert "POST" in response.headers["allow"]


class TestUnhandledExceptions:
    """Test suite for the last-resort 500 handler."""

    def test_unhandled_error_should_return_internal_error_body(self, app: FastAPI) -> None:
        # Arrange
        async def explode() -> dict:
            raise RuntimeError("connection string leaked")

        app.add_api_route("/api/explode", explode)
        client = TestClient(app, raise_server_exceptions=False)

        # Act
        response = client.get("/api/explode", headers={"X-Correlation-ID": "corr-500"})

        # Assert
        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal server error",
            "message": "An unexpected error occurred",
            "correlationId": "corr-500",
        }
        assert "leaked" not in response.text
