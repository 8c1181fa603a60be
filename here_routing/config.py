"""Centralized configuration using Pydantic Settings.

Configuration can be overridden via environment variables:
- HERE_API_KEY=...
- HERE_ROUTING_BASE_URL=https://router.hereapi.com/v8/
- HERE_TRANSPORT_TIMEOUT_SECONDS=5
- HERE_LOG_LEVEL=DEBUG
- etc.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.errors import ConfigurationError


class HereConfig(BaseSettings):
    """Service endpoints and credentials.

    Environment variables prefixed with HERE_.
    """

    model_config = SettingsConfigDict(env_prefix="HERE_")

    routing_base_url: str = "https://router.hereapi.com/v8/"
    matrix_base_url: str = "https://matrix.router.hereapi.com/v8/"
    api_key: Optional[SecretStr] = None

    @field_validator("routing_base_url", "matrix_base_url")
    @classmethod
    def _require_http(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"must be an http(s) URL, got {value!r}")
        return value


class TransportConfig(BaseSettings):
    """HTTP transport configuration.

    Environment variables prefixed with HERE_TRANSPORT_.
    """

    model_config = SettingsConfigDict(env_prefix="HERE_TRANSPORT_")

    timeout_seconds: float = 10.0
    chunk_size: int = 64 * 1024
    user_agent: str = "here-routing"
    max_workers: int = 8


class ObservabilityConfig(BaseSettings):
    """Logging and observability configuration.

    Environment variables prefixed with HERE_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="HERE_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False  # Set True for JSON logging


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

        config = get_config()
        print(config.here.routing_base_url)
        print(config.transport.timeout_seconds)
    """

    model_config = SettingsConfigDict(env_prefix="HERE_APP_")

    here: HereConfig = Field(default_factory=HereConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.

    Returns:
        The application configuration instance.

    Raises:
        ConfigurationError: If an environment variable holds an invalid value.
    """
    try:
        return AppConfig(
            here=HereConfig(),
            transport=TransportConfig(),
            observability=ObservabilityConfig(),
        )
    except ValidationError as e:
        first = e.errors()[0]
        setting = ".".join(str(part) for part in (e.title, *first["loc"]))
        raise ConfigurationError(
            f"invalid configuration for {setting}: {first['msg']}",
            setting_name=setting,
        ) from e


def reset_config() -> None:
    """Reset the configuration cache.

    Call this in tests to ensure a fresh configuration is loaded.
    """
    get_config.cache_clear()
