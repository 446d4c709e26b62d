"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, AccessTimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - init_models(), dispose_engine(): Schema and pool lifecycle
  - SessionModel: Session entity
  - session_crud: CRUD operation singleton

Dependencies: sqlalchemy, toad_architect.configs
System role: Database adapter providing persistent storage for sessions
"""

from toad_architect.boundary.db.base import AccessTimestampMixin, Base
from toad_architect.boundary.db.connection import (
    dispose_engine,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
    init_models,
)
from toad_architect.boundary.db.models.session_model import SessionModel
from toad_architect.boundary.db.CRUD import SessionCRUD, session_crud

__all__ = [
    # Base classes
    "AccessTimestampMixin",
    "Base",
    # Connection
    "dispose_engine",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "init_models",
    # Models
    "SessionModel",
    # CRUD
    "SessionCRUD",
    "session_crud",
]
