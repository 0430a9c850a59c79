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

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Data Backend
    # -------------------------------------------------------------------------
    # "supabase" for deployments, "memory" for local development and tests

    DATA_BACKEND: Literal["supabase", "memory"] = Field(
        default="supabase",
        description="Row store backend"
    )

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # Required when DATA_BACKEND=supabase (checked below)

    SUPABASE_URL: str = Field(
        default="",
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        default="",
        description="Supabase anon/public API key"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        default="",
        description="Supabase service_role key (bypasses database RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 secret used to verify Supabase access tokens"
    )

    PRODUCT_IMAGE_BUCKET: str = Field(
        default="product-images",
        description="Storage bucket for product images"
    )

    CURRICULUM_BUCKET: str = Field(
        default="curriculum",
        description="Storage bucket for curriculum manuals and code files"
    )

    # -------------------------------------------------------------------------
    # OpenAI / Assistant Configuration
    # -------------------------------------------------------------------------
    # Without a key the assistant answers "Assistant unavailable" instead of
    # failing application startup.

    OPENAI_API_KEY: str = Field(
        default="",
        description="OpenAI API key for the chat assistant"
    )

    OPENAI_MODEL: str = Field(
        default="gpt-4o-mini",
        description="Chat completion model"
    )

    OPENAI_TEMPERATURE: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
    )

    QUIZ_MAX_QUESTIONS: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Maximum questions kept from a generated quiz"
    )

    QUIZ_TIME_LIMIT_SECONDS: int = Field(default=300, ge=30)

    QUIZ_CODE_MAX_CHARS: int = Field(
        default=2400,
        ge=0,
        description="Code included in the quiz prompt is trimmed to this length"
    )

    # -------------------------------------------------------------------------
    # Catalog Cache
    # -------------------------------------------------------------------------

    CATALOG_CACHE_TTL_SECONDS: float = Field(
        default=60,
        ge=0,
        description="How long public catalog reads are served from cache"
    )

    CATALOG_CACHE_MAX_STALE_SECONDS: float = Field(
        default=24 * 60 * 60,
        ge=0,
        description="How old a cached catalog may be when served as a fallback"
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
        description="Enable debug mode (verbose logging)"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=25,
        ge=1,
        le=500,
        description="Maximum file upload size in MB"
    )

    # -------------------------------------------------------------------------
    # Admin Bootstrap (scripts/seed_admin.py)
    # -------------------------------------------------------------------------

    DEFAULT_ADMIN_EMAIL: str | None = None
    DEFAULT_ADMIN_PASSWORD: str | None = None
    DEFAULT_ADMIN_NAME: str = "Administrator"

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_supabase_credentials(self) -> "Settings":
        if self.DATA_BACKEND == "supabase":
            missing = [
                name for name in ("SUPABASE_URL", "SUPABASE_SERVICE_KEY")
                if not getattr(self, name)
            ]
            if missing:
                raise ValueError(
                    f"{', '.join(missing)} must be set when DATA_BACKEND=supabase "
                    "(or set DATA_BACKEND=memory for local development)"
                )
        return self

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def max_upload_size_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def is_production(self) -> bool:
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
