"""
Sessions router package.

Exports the router for session lifecycle endpoints.
"""

from .sessions_router import router

__all__ = ["router"]
