"""
Database models package.

Exports:
  - SessionModel: Session ORM model

Dependencies: sqlalchemy, toad_architect.boundary.db.base
System role: Database model definitions for domain entities
"""

from toad_architect.boundary.db.models.session_model import SessionModel

__all__ = ["SessionModel"]
