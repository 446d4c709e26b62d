"""TOAD Architect backend: session-based architecture advisory chat service."""

__version__ = "1.0.0"
