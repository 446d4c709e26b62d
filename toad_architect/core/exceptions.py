"""
Exception hierarchy for TOAD Architect.

Two families hang off ToadArchitectError:
  - SessionError: failures tied to one session (missing session, store
    failure, failed or throttled conversation turn). The API layer maps
    each subclass to a status code.
  - CompletionProviderError: classified failures of the completion
    provider, raised by the LLM boundary and translated by the service.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class ToadArchitectError(Exception):
    """Base exception carrying a client-safe message and log context."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = dict(details or {})
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(ToadArchitectError):
    """Raised when a request value is outside what the session accepts."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        if field:
            self.details["field"] = field


class SessionError(ToadArchitectError):
    """
    Failure tied to a single session.

    Attributes:
        session_id: String form of the session ID, or None when unknown
    """

    def __init__(
        self,
        message: str,
        session_id: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.session_id = str(session_id) if session_id is not None else None
        if self.session_id is not None:
            self.details["session_id"] = self.session_id


class SessionNotFoundError(SessionError):
    """No session exists with the given ID."""

    def __init__(self, session_id: Any, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"Session not found: {session_id}", session_id, details)


class StoreError(SessionError):
    """
    The session store failed to read or write.

    Args:
        operation: Store operation that failed (create, get, update, delete, ...)
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        session_id: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, session_id, details)
        self.operation = operation
        if operation:
            self.details["operation"] = operation


class ThrottledError(SessionError):
    """
    A conversation turn was refused by provider rate limiting or quota.

    The message is the provider's own and is passed through to the client.
    """


class MessageSendError(SessionError):
    """A conversation turn failed for any non-throttling reason."""


class CompletionProviderError(ToadArchitectError):
    """Raised when the completion provider fails to produce text."""


class RateLimitError(CompletionProviderError):
    """Provider rejected the request because of request-rate limits."""


class QuotaExceededError(CompletionProviderError):
    """Provider rejected the request because the account quota is spent."""


class InvalidCredentialsError(CompletionProviderError):
    """Provider rejected the configured API key."""
