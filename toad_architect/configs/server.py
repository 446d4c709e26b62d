"""
HTTP server configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Uvicorn and CORS configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from toad_architect.configs.base import BaseSettings


class ServerSettings(BaseSettings):
    """Uvicorn bind address and CORS origins."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SERVER_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Bind host")
    port: int = Field(default=3001, description="Bind port")
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed to call the API",
    )
