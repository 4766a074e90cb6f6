# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache
from typing import Literal
from urllib.parse import urlparse

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key (used for the auth code exchange)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret for verifying session tokens"
    )

    # -------------------------------------------------------------------------
    # Storage Buckets
    # -------------------------------------------------------------------------

    ALBUM_ART_BUCKET: str = Field(
        default="album-art",
        description="Storage bucket holding album cover images"
    )

    PROFILE_PHOTO_BUCKET: str = Field(
        default="profile-photos",
        description="Storage bucket holding profile photos"
    )

    STORAGE_CACHE_CONTROL: str = Field(
        default="3600",
        description="Cache-Control max-age (seconds) set on uploaded images"
    )

    # -------------------------------------------------------------------------
    # Metadata Search (MusicBrainz / Cover Art Archive)
    # -------------------------------------------------------------------------

    MUSICBRAINZ_BASE_URL: str = Field(
        default="https://musicbrainz.org/ws/2",
        description="MusicBrainz web service root"
    )

    COVER_ART_ARCHIVE_URL: str = Field(
        default="https://coverartarchive.org",
        description="Cover Art Archive root"
    )

    METADATA_USER_AGENT: str = Field(
        default="VinylCollection/1.0 (contact@example.com)",
        description="User-Agent sent to MusicBrainz (anonymous clients are rejected)"
    )

    METADATA_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for metadata lookups"
    )

    SEARCH_RESULT_LIMIT: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Max releases requested from MusicBrainz per search"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    SESSION_COOKIE_NAME: str = Field(
        default="",
        description="Auth session cookie name (defaults to sb-<project-ref>-auth-token)"
    )

    # -------------------------------------------------------------------------
    # Image Upload Settings
    # -------------------------------------------------------------------------

    MAX_IMAGE_SIZE_MB: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum cover/profile image size in MB"
    )

    ALLOWED_IMAGE_EXTENSIONS: str = Field(
        default=".jpg,.jpeg,.png,.gif,.webp",
        description="Allowed image file extensions (comma-separated)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def allowed_image_extensions_list(self) -> list[str]:
        """
        Parse ALLOWED_IMAGE_EXTENSIONS string into a list.

        Example: ".jpg, .PNG" -> [".jpg", ".png"]
        """
        return [ext.strip().lower() for ext in self.ALLOWED_IMAGE_EXTENSIONS.split(",")]

    @property
    def max_image_size_bytes(self) -> int:
        """Convert MB to bytes for file size validation."""
        return self.MAX_IMAGE_SIZE_MB * 1024 * 1024

    @property
    def supabase_project_ref(self) -> str:
        """
        Project ref is the first label of the Supabase host.

        Example: "https://abcd1234.supabase.co" -> "abcd1234"
        """
        host = urlparse(self.SUPABASE_URL).hostname or ""
        return host.split(".")[0]

    @property
    def session_cookie_name(self) -> str:
        """Cookie the Supabase SSR helpers store the session under."""
        if self.SESSION_COOKIE_NAME:
            return self.SESSION_COOKIE_NAME
        return f"sb-{self.supabase_project_ref}-auth-token"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
