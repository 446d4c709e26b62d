"""
Completion provider configuration settings.

Model selection and generation parameters for the Gemini chat model
used to answer conversation turns and to summarize long conversations.

Dependencies: pydantic, pydantic_settings
System role: LLM provider configuration
"""

from pydantic import AliasChoices, Field
from pydantic_settings import SettingsConfigDict

from toad_architect.configs.base import BaseSettings


class CompletionSettings(BaseSettings):
    """Gemini completion provider configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="COMPLETION_",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GOOGLE_API_KEY", "COMPLETION_API_KEY"),
        description="Google API key for Gemini access",
    )
    model: str = Field(default="gemini-2.5-flash", description="Gemini model ID")
    temperature: float = Field(default=0.7, description="Sampling temperature for replies")
    max_output_tokens: int = Field(default=2000, description="Reply token budget")

    summary_temperature: float = Field(
        default=0.3,
        description="Sampling temperature for conversation summaries",
    )
    summary_max_output_tokens: int = Field(
        default=1000,
        description="Token budget for conversation summaries",
    )
