"""Application configuration using pydantic-settings."""
from functools import lru_cache
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Service identifiers partitioning the remote whitelist.
    # Accepts a comma-separated string (env var) or a list.
    whitelist_ids: Annotated[list[str], NoDecode] = []

    whitelist_list_url: str = "http://whitelist.twitchapps.com/list.php"
    whitelist_activation_url: str = "http://whitelist.twitchapps.com"

    # Upper bound for one request to the whitelist server
    fetch_timeout_seconds: float = 10.0

    log_level: str = "INFO"

    @field_validator("whitelist_ids", mode="before")
    @classmethod
    def parse_whitelist_ids(cls, value: str | list[str]) -> list[str]:
        """Split comma-separated ids, stripping whitespace and dropping empties."""
        if isinstance(value, str):
            value = value.split(",")
        return [item.strip() for item in value if item.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
