"""Application configuration with Pydantic Settings.

This module provides centralized configuration management using pydantic-settings.
Settings are loaded from environment variables and .env files.

Examples:
    >>> from cloudfolders.config import get_settings
    >>> settings = get_settings()
    >>> settings.MISSING_PARENT_POLICY
    <MissingParentPolicy.FAIL: 'fail'>

Tests:
    - tests/unit/test_config.py::TestSettings
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class MissingParentPolicy(str, Enum):
    """What create_folder does when the referenced parent does not exist.

    - FAIL: raise NotFoundError
    - ROOT: create the folder as a root folder instead
    """

    FAIL = "fail"
    ROOT = "root"


class BlobBackend(str, Enum):
    """Where uploaded bytes are stored."""

    LOCAL = "local"
    CLOUDINARY = "cloudinary"


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables and .env file.

    Attributes:
        DATABASE_URL: Database connection string (SQLite or PostgreSQL)
        JWT_SECRET_KEY: HS256 signing key for access and share tokens
        SHARE_TOKEN_TTL_HOURS: Lifetime of a share link
        MISSING_PARENT_POLICY: Behaviour when a folder's parent is missing
        ALLOW_ROOT_FILES: Whether files may live directly in a root folder
        BLOB_BACKEND: Blob store used for uploaded bytes
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./cloudfolders.db",
        description="Database connection string",
    )

    # Application Settings
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    PUBLIC_BASE_URL: str = Field(
        default="http://localhost:8000",
        description="Externally visible base URL, used to build share and blob links",
    )

    # Auth
    JWT_SECRET_KEY: str = Field(
        default="cloudfolders-dev-secret-change-in-production",
        description="Secret for HS256 tokens",
    )
    JWT_ACCESS_EXPIRE_MINUTES: int = Field(
        default=60,
        description="Access token lifetime in minutes",
        ge=1,
    )
    SESSION_COOKIE_NAME: str = Field(
        default="cloudfolders_session",
        description="Cookie carrying the share-scoped session token",
    )

    # Share links
    SHARE_TOKEN_TTL_HOURS: int = Field(
        default=24,
        description="Share link lifetime in hours",
        ge=1,
    )
    SHARE_TOKEN_BYTES: int = Field(
        default=16,
        description="Random bytes per share token (hex encoded)",
        ge=16,
    )

    # Tree policies
    MISSING_PARENT_POLICY: MissingParentPolicy = Field(
        default=MissingParentPolicy.FAIL,
        description="fail: reject unknown parents; root: create as root folder",
    )
    ALLOW_ROOT_FILES: bool = Field(
        default=True,
        description="Allow files directly inside root folders",
    )
    NAME_MAX_LENGTH: int = Field(
        default=30,
        description="Maximum folder/file name length",
        ge=1,
        le=255,
    )

    # Blob storage
    BLOB_BACKEND: BlobBackend = Field(
        default=BlobBackend.LOCAL,
        description="Blob store backend",
    )
    BLOB_LOCAL_ROOT: str = Field(
        default="./output/blobs",
        description="Root directory for the local blob store",
    )
    CLOUDINARY_CLOUD_NAME: str | None = Field(default=None)
    CLOUDINARY_API_KEY: str | None = Field(default=None)
    CLOUDINARY_API_SECRET: str | None = Field(default=None)
    CLOUDINARY_FOLDER: str = Field(
        default="cloudfolders",
        description="Cloudinary folder for uploads",
    )
    ALLOWED_UPLOAD_EXTENSIONS: list[str] = Field(
        default=["jpg", "jpeg", "png"],
        description="Accepted upload extensions (empty list accepts anything)",
    )
    MAX_UPLOAD_BYTES: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum upload size in bytes",
        ge=1,
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format."""
        valid_prefixes = ("sqlite", "postgresql", "postgres")
        if not any(v.startswith(prefix) for prefix in valid_prefixes):
            raise ValueError(
                f"DATABASE_URL must start with one of: {valid_prefixes}"
            )
        return v

    @field_validator("ALLOWED_UPLOAD_EXTENSIONS")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        """Lowercase extensions and drop leading dots."""
        return [ext.lower().lstrip(".") for ext in v if ext.strip()]

    @field_validator("PUBLIC_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_blob_backend(self) -> "Settings":
        """Cloudinary needs a complete credential set."""
        if self.BLOB_BACKEND == BlobBackend.CLOUDINARY:
            missing = [
                name
                for name in (
                    "CLOUDINARY_CLOUD_NAME",
                    "CLOUDINARY_API_KEY",
                    "CLOUDINARY_API_SECRET",
                )
                if not getattr(self, name)
            ]
            if missing:
                raise ValueError(
                    f"BLOB_BACKEND=cloudinary requires: {', '.join(missing)}"
                )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == Environment.PRODUCTION

    @property
    def is_sqlite(self) -> bool:
        """Check if using SQLite database."""
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def share_url_prefix(self) -> str:
        """Base URL that share tokens are appended to."""
        return f"{self.PUBLIC_BASE_URL}/api/v1/share"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: The application settings.
    """
    return Settings()
