"""
Completion provider boundary.

Exports:
  - CompletionClient: Gemini-backed reply generation, summarization, credential check
  - classify_provider_error: map raw provider failures onto the error taxonomy
"""

from toad_architect.boundary.llm.completion_client import (
    CompletionClient,
    classify_provider_error,
)

__all__ = ["CompletionClient", "classify_provider_error"]
