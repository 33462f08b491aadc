"""Runtime settings for anime-episodes."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Upstream endpoints, credentials and timeouts, read from env / .env."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Credentials
    crysoline_api_key: str = Field(..., min_length=1, description="Crysoline API key")

    # Upstream base URLs
    anizip_url: str = Field(default="https://api.ani.zip", description="Anizip mappings API")
    anilist_url: str = Field(default="https://graphql.anilist.co", description="AniList GraphQL")
    kitsu_url: str = Field(default="https://kitsu.app/api/edge", description="Kitsu JSON:API")
    jikan_url: str = Field(default="https://api.jikan.moe/v4", description="Jikan (MAL) REST API")
    crysoline_url: str = Field(
        default="https://api.crysoline.moe/api", description="Crysoline provider API"
    )

    # Network
    http_timeout: float = Field(default=15.0, gt=0, description="Default request timeout (s)")
    provider_timeout: float = Field(
        default=2.0, gt=0, description="Timeout for each streaming-provider episode fetch (s)"
    )
    mapping_timeout: float = Field(
        default=15.0, gt=0, description="Timeout for the Crysoline mapping lookup (s)"
    )
    kitsu_page_size: int = Field(default=20, ge=1, le=20, description="Kitsu page[limit]")
    max_workers: int = Field(default=8, ge=1, description="Thread pool width for fan-out")
    user_agent: str = Field(default="anime-episodes-mcp/0.1", description="User-Agent header")

    log_level: str = Field(default="INFO", description="Root log level")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
