"""
Health check API endpoints.

Routes: GET /health

Dependencies: toad_architect.application, toad_architect.boundary
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from toad_architect.api.deps.dependencies import (
    get_completion_client,
    get_session_service,
)
from toad_architect.application.services.session_service import SessionService
from toad_architect.boundary.llm import CompletionClient
from toad_architect.models.common import DependencyStatus, HealthResponse, ServiceStatus
from toad_architect.models.session import utcnow
from toad_architect.observability.correlation import get_correlation_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


def _status(ok: bool) -> ServiceStatus:
    return ServiceStatus.CONNECTED if ok else ServiceStatus.ERROR


@router.get("", response_model=HealthResponse)
async def health_check(
    response: Response,
    session_service: SessionService = Depends(get_session_service),
    completion_client: CompletionClient = Depends(get_completion_client),
) -> HealthResponse:
    """
    Report reachability of the session store and the completion provider.

    Returns 200 when both are reachable, 503 otherwise.
    """
    try:
        database_ok = await session_service.check_store()
    except Exception as e:
        logger.error(f"Database health check failed: {type(e).__name__}: {e}")
        database_ok = False

    provider_ok = await completion_client.validate_credentials()

    healthy = database_ok and provider_ok
    if not healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        timestamp=utcnow(),
        correlation_id=get_correlation_id() or None,
        services=DependencyStatus(
            database=_status(database_ok),
            completion_provider=_status(provider_ok),
        ),
    )
