"""
CRUD operations for database models.

Usage:
    from toad_architect.boundary.db.CRUD import session_crud

    row = await session_crud.get_by_id(db, session_id)
"""

from toad_architect.boundary.db.CRUD.session_crud import SessionCRUD, session_crud

__all__ = [
    "SessionCRUD",
    "session_crud",
]
