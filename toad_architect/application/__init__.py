"""Application layer: session lifecycle orchestration."""
