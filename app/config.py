"""
Application configuration using pydantic-settings.

Nothing here is persisted: every value is read from the environment (or a
local .env file) once per process and cached by get_settings().

VNDB API (vndb_api_url) is the metadata source for search, VN details and
releases. The torrent index (torrent_index_url) is a best-effort supplement
shown on detail pages.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "VN Realm"
    debug: bool = False
    log_level: str = "INFO"

    # VNDB API
    vndb_api_url: str = "https://api.vndb.org/kana"
    vndb_api_token: str | None = None  # Optional, sent as "Authorization: Token ..."

    # Torrent index
    torrent_index_url: str = "https://torrents-csv.com/service/search"

    http_request_timeout: int = 30  # Seconds, applies to both upstreams

    # CORS: production deployments should set CORS_ORIGINS explicitly
    cors_origins: list[str] = [
        "http://localhost:8000",
    ]

    # Inbound rate limiting (slowapi)
    rate_limit_enabled: bool = True
    rate_limit_default: str = "100/minute"
    search_rate_limit: str = "30/minute"

    # Search
    search_min_query: int = 2
    search_default_limit: int = 9
    search_max_limit: int = 20

    # Fixed upstream result caps
    release_results: int = 50
    torrent_results: int = 10

    # UI
    snippet_length: int = 160
    display_tag_limit: int = 12
    image_hosts: list[str] = [
        "s.vndb.org",
        "t.vndb.org",
        "beta.vndb.org",
    ]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
