"""
Session lifecycle configuration settings.

Thresholds for history summarization, context-window trimming,
input length bounds, and the retention window of the cleanup sweep.

Dependencies: pydantic, pydantic_settings
System role: Conversation policy configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from toad_architect.configs.base import BaseSettings


class SessionSettings(BaseSettings):
    """Conversation lifecycle policy."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SESSION_",
        case_sensitive=False,
        extra="ignore",
    )

    cleanup_days: int = Field(
        default=30,
        ge=0,
        description="Sessions not accessed for this many days are swept",
    )
    summary_threshold: int = Field(
        default=20,
        description="History length above which the summary is recomputed",
    )
    context_window_limit: int = Field(
        default=15,
        description="Assembled prompt size above which history is trimmed",
    )
    context_tail_size: int = Field(
        default=5,
        description="Recent messages kept after trimming",
    )
