"""Centralized configuration using Pydantic Settings.

Every tunable of the client lives here instead of being hardcoded in the
stores:
- API base URL and transport timeout
- token cookie name, attributes and default lifetime
- destination cache TTL, capacity and storage location
- logging level and format

Configuration can be overridden via environment variables:
- TD_API_BASE_URL=https://travel.example.com/api
- TD_SESSION_DEFAULT_TOKEN_TTL_SECONDS=1800
- TD_CACHE_STORAGE_DIR=/var/cache/travel-desk
- etc.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "http://localhost:91/api"


class ApiConfig(BaseSettings):
    """REST API configuration.

    Environment variables prefixed with TD_API_.
    """

    model_config = SettingsConfigDict(env_prefix="TD_API_")

    base_url: str = DEFAULT_API_BASE_URL
    timeout_seconds: Optional[float] = None


class SessionConfig(BaseSettings):
    """Session and token cookie configuration.

    Environment variables prefixed with TD_SESSION_.
    """

    model_config = SettingsConfigDict(env_prefix="TD_SESSION_")

    cookie_name: str = "jwt"
    cookie_path: str = "/"
    same_site: Literal["Lax", "Strict", "None"] = "Lax"
    default_token_ttl_seconds: int = 60 * 15
    cookie_file: Optional[Path] = None


class CacheConfig(BaseSettings):
    """Destination search cache configuration.

    Environment variables prefixed with TD_CACHE_.
    """

    model_config = SettingsConfigDict(env_prefix="TD_CACHE_")

    ttl_seconds: float = 60 * 60 * 6
    max_entries: int = 20
    search_limit: int = 10
    storage_key: str = "travel-destinations-cache"
    storage_dir: Optional[Path] = None


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Environment variables prefixed with TD_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="TD_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

        config = get_config()
        print(config.api.base_url)
        print(config.cache.ttl_seconds)

    Environment variables prefixed with TD_.
    """

    model_config = SettingsConfigDict(env_prefix="TD_")

    api: ApiConfig = Field(default_factory=ApiConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache."""
    get_config.cache_clear()
