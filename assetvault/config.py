"""Application configuration with Pydantic Settings.

Settings are loaded from environment variables and .env files. Limits are
process-global.

Examples:
    >>> from assetvault.config import get_settings
    >>> settings = get_settings()
    >>> settings.MAX_FILE_SIZE_BYTES
    10485760
    >>> settings.upload_policy().allowed_mime_types
    frozenset({'image/png', 'image/jpeg', 'image/webp'})

Tests:
    - tests/unit/test_config.py
"""

from enum import Enum
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from assetvault.core.manager import UploadPolicy
from assetvault.core.rate_limiter import RateLimitPolicy
from assetvault.storage.config import StorageBackendType, StorageConfig

DEV_SIGNED_URL_SECRET = "assetvault-dev-signing-secret"


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class RepositoryBackendType(str, Enum):
    SQL = "sql"
    MEMORY = "memory"


class LoggerMode(str, Enum):
    """Log sink selection."""

    CONSOLE = "console"
    FILE = "file"
    CLOUD = "cloud"
    NONE = "none"


class Settings(BaseSettings):
    """Application settings.

    Attributes:
        DATABASE_URL: Database connection string (SQLite or PostgreSQL)
        STORAGE_BACKEND: Blob store adapter (local or memory)
        MAX_FILE_SIZE_BYTES: Upload ceiling
        ALLOWED_MIME_TYPES: Server-held MIME allow-list
        SIGNED_URL_SECRET: HMAC key for delivery links
        RATE_LIMIT_ENABLED: Global rate limiting switch
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (docs, error detail)",
    )

    # Metadata store
    REPOSITORY_BACKEND: RepositoryBackendType = Field(
        default=RepositoryBackendType.SQL,
        description="Metadata repository adapter",
    )
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./assetvault.db",
        description="Database connection string",
    )

    # Blob store
    STORAGE_BACKEND: StorageBackendType = Field(
        default=StorageBackendType.LOCAL,
        description="Blob storage adapter",
    )
    STORAGE_ROOT: str = Field(
        default="./data/assets",
        description="Local storage root directory",
    )
    PUBLIC_BASE_URL: str | None = Field(
        default=None,
        description="Public URL prefix for stored objects",
    )

    # Cache
    CACHE_ENABLED: bool = Field(default=True, description="Enable in-process cache")
    CACHE_TTL_SECONDS: int = Field(default=300, ge=1, description="Cache entry TTL")
    CACHE_MAX_ENTRIES: int = Field(default=1024, ge=1, description="Cache size bound")

    # Upload limits
    MAX_FILE_SIZE_BYTES: int = Field(
        default=10 * 1024 * 1024,
        gt=0,
        description="Maximum upload size in bytes",
    )
    ALLOWED_MIME_TYPES: Annotated[list[str], NoDecode] = Field(
        default=["image/png", "image/jpeg", "image/webp"],
        description="Allowed MIME types (comma-separated in the environment)",
    )
    MAX_JSON_UPLOAD_BYTES: int = Field(
        default=2 * 1024 * 1024,
        gt=0,
        description="Maximum decoded size for base64 JSON uploads",
    )

    # Transport
    OWNER_HEADER: str = Field(
        default="m1as-user-id",
        description="Request header carrying the owner id",
    )

    # Signed URLs
    SIGNED_URL_SECRET: str = Field(
        default=DEV_SIGNED_URL_SECRET,
        min_length=16,
        description="HMAC secret for signed delivery links",
    )
    SIGNED_URL_DEFAULT_TTL_SECONDS: int = Field(default=900, ge=1)
    SIGNED_URL_MAX_TTL_SECONDS: int = Field(default=86400, ge=1)

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = Field(default=True, description="Enable rate limiting")
    RATE_LIMIT_WINDOW_SECONDS: int = Field(default=1200, ge=1, description="Window length")
    RATE_LIMIT_UPLOAD_MAX: int = Field(default=10, ge=0)
    RATE_LIMIT_READ_MAX: int = Field(default=60, ge=0)
    RATE_LIMIT_DELETE_MAX: int = Field(default=10, ge=0)

    # Logging
    LOGGER: LoggerMode = Field(default=LoggerMode.CONSOLE, description="Log sink")
    LOG_FILE: str = Field(default="./logs/assetvault.log", description="File sink path")
    LOG_LEVEL: str = Field(default="INFO", description="Log level")

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format."""
        valid_prefixes = ("sqlite", "postgresql", "postgres")
        if not any(v.startswith(prefix) for prefix in valid_prefixes):
            raise ValueError(f"DATABASE_URL must start with one of: {valid_prefixes}")
        return v

    @field_validator("ALLOWED_MIME_TYPES", mode="before")
    @classmethod
    def split_mime_types(cls, v):
        if isinstance(v, str):
            v = [item.strip() for item in v.split(",")]
        return [item for item in v if item]

    @field_validator("ALLOWED_MIME_TYPES")
    @classmethod
    def validate_mime_types(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("ALLOWED_MIME_TYPES must not be empty")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return level

    @model_validator(mode="after")
    def validate_production_secret(self) -> "Settings":
        """Refuse the development signing secret in production."""
        if self.is_production and self.SIGNED_URL_SECRET == DEV_SIGNED_URL_SECRET:
            raise ValueError("SIGNED_URL_SECRET must be set in production")
        if self.SIGNED_URL_DEFAULT_TTL_SECONDS > self.SIGNED_URL_MAX_TTL_SECONDS:
            raise ValueError("SIGNED_URL_DEFAULT_TTL_SECONDS exceeds SIGNED_URL_MAX_TTL_SECONDS")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == Environment.PRODUCTION

    @property
    def is_sqlite(self) -> bool:
        """Check if using SQLite database."""
        return self.DATABASE_URL.startswith("sqlite")

    def storage_config(self) -> StorageConfig:
        return StorageConfig(
            backend=self.STORAGE_BACKEND,
            root=self.STORAGE_ROOT,
            public_base_url=self.PUBLIC_BASE_URL,
        )

    def upload_policy(self) -> UploadPolicy:
        return UploadPolicy(
            allowed_mime_types=frozenset(self.ALLOWED_MIME_TYPES),
            max_file_size_bytes=self.MAX_FILE_SIZE_BYTES,
        )

    def rate_limit_policy(self) -> RateLimitPolicy:
        """Build a fresh limiter policy (each call owns its own buckets)."""
        return RateLimitPolicy(
            enabled=self.RATE_LIMIT_ENABLED,
            window_seconds=self.RATE_LIMIT_WINDOW_SECONDS,
            upload_max=self.RATE_LIMIT_UPLOAD_MAX,
            read_max=self.RATE_LIMIT_READ_MAX,
            delete_max=self.RATE_LIMIT_DELETE_MAX,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
