"""
API routes module.

FastAPI routers for all HTTP endpoints.
"""

from fastapi import APIRouter

from .routers import sessions_router

api_router = APIRouter()

# Session routes are mounted under /api; health stays at the root
api_router.include_router(sessions_router)

__all__ = ["api_router"]
