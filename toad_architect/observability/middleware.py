"""
HTTP observability middleware.

CorrelationMiddleware binds the request's correlation ID and echoes it on
the response. RequestLoggingMiddleware emits one api_request and one
api_response record per call.

Dependencies: fastapi, starlette, toad_architect.observability
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from toad_architect.observability.correlation import (
    CORRELATION_HEADER,
    bind_correlation_id,
)

logger = logging.getLogger(__name__)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each API call with method, path, status and duration."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        route = f"{request.method} {request.url.path}"
        base_extra = {"method": request.method, "path": request.url.path}

        logger.info(
            route,
            extra={
                **base_extra,
                "action": "api_request",
                "user_agent": request.headers.get("user-agent", "-"),
                "client_host": request.client.host if request.client else "-",
            },
        )

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{route} failed",
                extra={
                    **base_extra,
                    "action": "error",
                    "duration_ms": _elapsed_ms(started),
                    "error_type": type(e).__name__,
                },
            )
            raise

        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            f"{route} {response.status_code}",
            extra={
                **base_extra,
                "action": "api_response",
                "status_code": response.status_code,
                "duration_ms": _elapsed_ms(started),
            },
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """
    Bind a correlation ID for the request.

    Uses the incoming X-Correlation-ID header when present, otherwise a new
    v4 UUID. The ID is echoed on the response and stored on request.state.
    """

    async def dispatch(self, request: Request, call_next):
        with bind_correlation_id(request.headers.get(CORRELATION_HEADER)) as correlation_id:
            request.state.correlation_id = correlation_id
            response: Response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
