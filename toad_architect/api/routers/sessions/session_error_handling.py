"""
Session error handling utilities.

Provides a decorator that turns session-layer exceptions into uniform JSON
error bodies on session endpoints, and app-level handlers that give request
validation failures, unknown routes and unhandled exceptions the same shape.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from toad_architect.core.exceptions import (
    MessageSendError,
    SessionNotFoundError,
    StoreError,
    ThrottledError,
    ValidationError,
)
from toad_architect.models.common import ErrorResponse
from toad_architect.observability.correlation import get_correlation_id

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])

INTERNAL_ERROR_MESSAGE = "Internal server error"
NOT_FOUND_MESSAGE = "The requested session does not exist"
UNKNOWN_ROUTE_MESSAGE = "The requested resource does not exist"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


def error_response(
    status_code: int,
    error: str,
    message: str,
    details: list[str] | None = None,
    correlation_id: str | None = None,
) -> JSONResponse:
    """Build a JSON error response carrying the request's correlation ID."""
    body = ErrorResponse(
        error=error,
        message=message,
        correlation_id=correlation_id or get_correlation_id() or None,
        details=details,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


def handle_session_errors(failure_label: str) -> Callable[[F], F]:
    """
    Decorator to handle session-related errors and map them to JSON error bodies.

    This centralizes:
    - Logging of errors with context (session_id, correlation_id)
    - Mapping specific exceptions to HTTP status codes
    - Ensuring uniform error response formats without leaking internals

    Args:
        failure_label: Error label used for unexpected failures of the operation
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)

            except SessionNotFoundError as e:
                logger.warning(
                    "Session not found",
                    extra={"session_id": e.session_id},
                )
                return error_response(
                    status.HTTP_404_NOT_FOUND, "Session not found", NOT_FOUND_MESSAGE
                )

            except ValidationError as e:
                logger.warning("Invalid session request", extra={"error": e.message})
                return error_response(
                    status.HTTP_400_BAD_REQUEST,
                    "Validation failed",
                    "Invalid input data",
                    details=[e.message],
                )

            except ThrottledError as e:
                logger.warning(
                    "Completion provider throttled",
                    extra={"session_id": e.session_id, "error": e.message},
                )
                return error_response(
                    status.HTTP_429_TOO_MANY_REQUESTS, "Rate limit exceeded", e.message
                )

            except MessageSendError as e:
                logger.error(
                    "Message send failed",
                    extra={"session_id": e.session_id, "error": e.message},
                )
                return error_response(
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                    "Failed to send message",
                    INTERNAL_ERROR_MESSAGE,
                )

            except StoreError as e:
                logger.error(
                    f"Session store failure: {failure_label}",
                    exc_info=e,
                    extra={"session_id": e.session_id, "operation": e.operation},
                )
                return error_response(
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                    failure_label,
                    INTERNAL_ERROR_MESSAGE,
                )

            except Exception as e:
                logger.exception(
                    f"Unexpected failure in session operation: {failure_label}",
                    extra={"error_type": type(e).__name__},
                )
                return error_response(
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                    failure_label,
                    INTERNAL_ERROR_MESSAGE,
                )

        return wrapper  # type: ignore

    return decorator


def _format_validation_error(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    return f"{location}: {error.get('msg')}" if location else str(error.get("msg"))


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Map FastAPI request validation failures to a 400 error body."""
    details = [_format_validation_error(error) for error in exc.errors()]
    logger.warning(
        "Validation error",
        extra={"errors": details, "path": request.url.path, "method": request.method},
    )
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Validation failed",
        "Invalid input data",
        details=details,
    )


def _request_correlation_id(request: Request) -> str | None:
    # The contextvar is unset once CorrelationMiddleware has exited
    return getattr(request.state, "correlation_id", None) or get_correlation_id() or None


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render framework HTTP errors (unknown route, wrong method) as error bodies."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        error, message = "Not found", UNKNOWN_ROUTE_MESSAGE
    else:
        error, message = str(exc.detail), str(exc.detail)
    logger.warning(
        f"HTTP {exc.status_code} for {request.method} {request.url.path}",
        extra={"path": request.url.path, "method": request.method},
    )
    response = error_response(
        exc.status_code, error, message, correlation_id=_request_correlation_id(request)
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort 500 for exceptions raised outside the session routes."""
    correlation_id = _request_correlation_id(request)
    logger.error(
        "Unhandled error",
        exc_info=exc,
        extra={
            "path": request.url.path,
            "method": request.method,
            "correlation_id": correlation_id,
        },
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        INTERNAL_ERROR_MESSAGE,
        UNEXPECTED_ERROR_MESSAGE,
        correlation_id=correlation_id,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install app-level exception handlers."""
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
