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
#
# Missing storage configuration is fatal: the process exits with code 1
# before the FastAPI app is built.
# =============================================================================

import logging
import sys
from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


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
        min_length=1,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        min_length=1,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUBMISSIONS_TABLE: str = Field(
        default="submissions",
        description="Table holding quiz submissions"
    )

    # -------------------------------------------------------------------------
    # Storage Connection Behaviour
    # -------------------------------------------------------------------------

    STORAGE_CONNECT_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for establishing a connection to storage"
    )

    STORAGE_SOCKET_TIMEOUT_SECONDS: float = Field(
        default=45.0,
        gt=0,
        description="Idle/read timeout for storage requests"
    )

    STORAGE_RETRY_DELAY_SECONDS: float = Field(
        default=5.0,
        ge=0,
        description="Delay before the single connection retry after a failed startup probe"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: str = Field(
        default="development",
        description="Environment label (development, staging, production, ...)"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug logging"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    PORT: int = Field(
        default=5000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="*",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Front-end
    # -------------------------------------------------------------------------

    STATIC_DIR: str = Field(
        default="public",
        description="Directory holding the front-end build (index.html)"
    )

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


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


def load_settings_or_exit() -> Settings:
    """
    Load settings, terminating the process if storage config is missing.

    This is the one startup condition that is fatal; every storage failure
    after this point degrades to an unhealthy health check instead.
    """
    try:
        return get_settings()
    except ValidationError as e:
        missing = ", ".join(str(err["loc"][0]) for err in e.errors())
        logging.basicConfig(level=logging.INFO)
        logger.critical(f"Invalid or missing configuration: {missing}")
        sys.exit(1)


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = load_settings_or_exit()
