"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_completion_client,
    get_service_cache,
    get_session_locks,
    get_session_service,
    get_settings_dependency,
)

__all__ = [
    "get_completion_client",
    "get_service_cache",
    "get_session_locks",
    "get_session_service",
    "get_settings_dependency",
]
