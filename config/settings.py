"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # SUPABASE
    # ===================
    supabase_url: str = Field(
        ...,
        description="Supabase project URL"
    )
    supabase_key: str = Field(
        ...,
        description="Supabase anon/public key"
    )
    supabase_service_key: Optional[str] = Field(
        None,
        description="Supabase service role key (for clearing missing product reports)"
    )

    # ===================
    # SCANNING
    # ===================
    scan_cooldown_seconds: float = Field(
        default=1.0,
        ge=0.1,
        le=3.0,
        description="Seconds before the same barcode is accepted again"
    )
    lookup_history_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Product lookups kept in the lookup history"
    )

    # ===================
    # OPERATOR UI
    # ===================
    collapse_panel_while_scanning: bool = Field(
        default=True,
        description="Collapse the organizer panel when shelf scanning starts"
    )
    notification_buffer_size: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Notifications kept for the UI to poll"
    )
    notification_language: str = Field(
        default="es",
        pattern="^(en|es)$",
        description="Language of operator messages"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def admin_configured(self) -> bool:
        """Check if the service role key is available."""
        return bool(self.supabase_service_key)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
