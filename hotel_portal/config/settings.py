"""Application settings and configuration management."""
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    """Booking API configuration."""

    base_url: str = "http://localhost:3000/api"
    request_timeout: int = 30
    user_agent: str = "HotelPortal/1.0"

    model_config = SettingsConfigDict(env_prefix="API_")


class TokenStoreSettings(BaseSettings):
    """Where the bearer token is persisted between runs."""

    backend: Literal["memory", "file", "redis"] = "file"
    key: str = "token"  # Single well-known storage key
    path: str = str(Path.home() / ".hotel_portal" / "storage.json")

    model_config = SettingsConfigDict(env_prefix="TOKEN_STORE_")


class RedisSettings(BaseSettings):
    """Redis configuration for the shared token store."""

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: Optional[str] = None
    ssl: bool = False
    socket_timeout: int = 5
    socket_connect_timeout: int = 5

    model_config = SettingsConfigDict(env_prefix="REDIS_")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "console"

    model_config = SettingsConfigDict(env_prefix="LOG_")


class Settings(BaseSettings):
    """Main application settings."""

    environment: Literal["dev", "staging", "prod"] = "dev"
    debug: bool = False

    # Sub-settings
    api: ApiSettings = ApiSettings()
    token_store: TokenStoreSettings = TokenStoreSettings()
    redis: RedisSettings = RedisSettings()
    logging: LoggingSettings = LoggingSettings()

    # API_URL is accepted as a flat override, like the web client's REACT_APP_API_URL
    api_url: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def api_base_url(self) -> str:
        """Booking API base URL without a trailing slash."""
        return (self.api_url.strip() or self.api.base_url).rstrip("/")


# Global settings instance
settings = Settings()
