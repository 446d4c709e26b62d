"""Boundary adapters: session store (SQLAlchemy) and completion provider (Gemini)."""
