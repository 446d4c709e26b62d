"""
Common response models.

Error and health response bodies shared by all routers.

Dependencies: pydantic
System role: Common API response structures
"""

from datetime import datetime
from enum import Enum

from pydantic import Field

from toad_architect.models.session import CamelModel


class ErrorResponse(CamelModel):
    """Error response schema."""

    error: str = Field(description="Stable error label")
    message: str = Field(description="Human-readable error message")
    correlation_id: str | None = Field(default=None, description="Request correlation ID")
    details: list[str] | None = Field(default=None, description="Validation failures")


class ServiceStatus(str, Enum):
    """Reachability of a downstream collaborator."""

    CONNECTED = "connected"
    ERROR = "error"


class DependencyStatus(CamelModel):
    """Per-collaborator health."""

    database: ServiceStatus
    completion_provider: ServiceStatus


class HealthResponse(CamelModel):
    """Health check response model."""

    status: str
    timestamp: datetime
    correlation_id: str | None = None
    services: DependencyStatus
