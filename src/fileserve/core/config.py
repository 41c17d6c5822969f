"""Configuration management for FileServe.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded at application
startup and is immutable during runtime.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# List settings are decoded by the validators below so that both JSON arrays
# and comma-separated strings work from the environment.
StrList = Annotated[list[str], NoDecode]


def _split_list(value: str) -> list[str]:
    value = value.strip()
    if value.startswith("["):
        return [str(item) for item in json.loads(value)]
    return value.split(",")


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FILESERVE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "FileServe"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1

    # File Storage Settings
    root_path: str = "./files"
    allowed_extensions: StrList = Field(
        default=[".jpg", ".jpeg", ".png", ".gif", ".webp"],
        description="Extensions tried, in order, when a requested path has none",
    )

    # Image Processing Settings
    thumbnail_max_width: int = Field(default=150, ge=1)
    thumbnail_max_height: int = Field(default=150, ge=1)
    mobile_max_width: int = Field(default=800, ge=1)
    mobile_max_height: int = Field(default=800, ge=1)
    compression_quality: int = Field(default=75, ge=1, le=100)
    cache_duration_seconds: int = Field(default=3600, ge=0)
    enable_response_caching: bool = True

    # Batch Settings
    batch_max_items: int = Field(default=100, ge=1)

    # Authentication Settings
    auth_enabled: bool = False
    auth_allow_anonymous: bool = False
    jwt_secret_key: str = Field(
        default="change-me-in-production-use-openssl-rand-hex-32",
        description="Secret key for JWT token signing",
    )
    jwt_issuer: str = "fileserve"
    jwt_audience: str = "fileserve-clients"
    access_token_expire_minutes: int = 60
    allowed_users: StrList = Field(default=[])
    allowed_groups: StrList = Field(default=[])

    # CORS Settings
    cors_origins: StrList = Field(default=["*"])
    cors_allow_credentials: bool = False
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])

    # Security Headers Settings
    security_headers_enabled: bool = True
    csp_policy: str = "default-src 'none'; img-src 'self' data:; frame-ancestors 'none'"
    hsts_max_age: int = 31536000

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @field_validator("cors_origins", "allowed_users", "allowed_groups", mode="before")
    @classmethod
    def parse_comma_separated(cls, v: str | list[str]) -> list[str]:
        """Parse a list from a JSON array, a comma-separated string or a list."""
        if isinstance(v, str):
            return [item.strip() for item in _split_list(v) if item.strip()]
        return v

    @field_validator("allowed_extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, v: str | list[str]) -> list[str]:
        """Lowercase extensions and ensure each carries a leading dot.

        Order is preserved; it decides which candidate wins when a
        requested path omits its extension.
        """
        if isinstance(v, str):
            v = _split_list(v)
        normalized: list[str] = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext:
                continue
            if not ext.startswith("."):
                ext = f".{ext}"
            if ext not in normalized:
                normalized.append(ext)
        return normalized

    @property
    def storage_root(self) -> Path:
        """Absolute storage root; relative paths resolve against the cwd."""
        return Path(self.root_path).expanduser().absolute()

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function caches the settings instance to avoid reloading
    configuration on every call. Settings are loaded once at startup.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
