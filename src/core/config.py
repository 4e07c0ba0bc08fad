"""Application configuration using pydantic-settings."""
from functools import lru_cache
from typing import Literal
from urllib.parse import urlparse

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Upstream NerdyChefs API
    api_base_url: str = Field(
        default="https://api.nerdychefs.ai",
        validation_alias="NERDYCHEFS_API_URL",
    )
    api_timeout: float = Field(default=30.0, validation_alias="NERDYCHEFS_API_TIMEOUT")

    # Freshness window shared by all cached documents (seconds)
    cache_ttl_seconds: float = Field(
        default=300.0,
        gt=0,
        validation_alias="NERDYCHEFS_CACHE_TTL",
    )

    # MCP transport
    mcp_transport: Literal["stdio", "http"] = Field(
        default="stdio",
        validation_alias="MCP_TRANSPORT",
    )
    mcp_host: str = Field(default="0.0.0.0", validation_alias="MCP_HOST")
    # MCP_PORT for local dev, PORT for PaaS platforms (Railway, Heroku, etc.)
    mcp_port: int = Field(default=8003, validation_alias=AliasChoices("MCP_PORT", "PORT"))

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Normalize the base URL so paths can be joined with a leading slash."""
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Accept log levels in any case."""
        return value.upper()

    @model_validator(mode="after")
    def validate_api_base_url(self) -> "Settings":
        """Reject base URLs that httpx cannot fetch from."""
        parsed = urlparse(self.api_base_url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(
                f"NERDYCHEFS_API_URL must be an http(s) URL, got '{self.api_base_url}'",
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
