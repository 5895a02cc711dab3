"""
Application settings using pydantic-settings for type-safe configuration.

All environment variables are centralized here with proper typing, validation,
and sensible defaults. Settings are loaded once at startup and cached.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Device(StrEnum):
    """Client layout; page sizes differ between mobile and desktop."""

    MOBILE = "mobile"
    DESKTOP = "desktop"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for local development.
    Production values should be set via environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars not defined here
        case_sensitive=False,
    )

    skip_pb_auth: bool = Field(
        default=False,
        description="Skip PocketBase authentication on startup (for testing)",
    )

    # === PocketBase Configuration ===
    pocketbase_url: str = Field(
        default="http://127.0.0.1:8090",
        description="PocketBase server URL",
    )
    pocketbase_admin_email: str = Field(
        default="admin@booking.local",
        description="PocketBase admin email for API authentication",
    )
    pocketbase_admin_password: str = Field(
        default="",
        description="PocketBase admin password (required - no default for security)",
    )

    @field_validator("pocketbase_admin_password", mode="after")
    @classmethod
    def validate_admin_password(cls, v: str) -> str:
        """Warn when the admin password is unset or a well-known default."""
        insecure_defaults = {"password", "admin", "123456", ""}
        if v in insecure_defaults:
            logger.warning(
                "SECURITY WARNING: POCKETBASE_ADMIN_PASSWORD is not set or uses an insecure default. "
                "Set a strong password in your .env file for production use."
            )
        return v

    # === CORS Configuration ===
    # Note: Use str type for env var parsing, convert to list via property
    allowed_origins_str: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        alias="ALLOWED_ORIGINS",
        description="Allowed CORS origins (comma-separated)",
    )

    # === System Settings ===
    tz: str = Field(
        default="Europe/Paris",
        description="IANA timezone of the calendar filters and statistics",
    )

    # === Cache ===
    cache_duration_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Staleness window of the per-client cache stores",
    )
    max_client_sessions: int = Field(
        default=200,
        gt=0,
        description="Client sessions kept in memory; the least recently used is evicted",
    )

    # === Page sizes ===
    sessions_page_size_mobile: int = Field(default=3, gt=0, description="Sessions per grid page on mobile")
    sessions_page_size_desktop: int = Field(default=6, gt=0, description="Sessions per grid page on desktop")
    bookings_page_size_mobile: int = Field(default=1, gt=0, description="Months per bookings page on mobile")
    bookings_page_size_desktop: int = Field(default=3, gt=0, description="Months per bookings page on desktop")

    @property
    def allowed_origins(self) -> list[str]:
        """Parse comma-separated origins string into list."""
        return [origin.strip() for origin in self.allowed_origins_str.split(",") if origin.strip()]

    def sessions_page_size(self, device: Device) -> int:
        if device == Device.MOBILE:
            return self.sessions_page_size_mobile
        return self.sessions_page_size_desktop

    def bookings_page_size(self, device: Device) -> int:
        if device == Device.MOBILE:
            return self.bookings_page_size_mobile
        return self.bookings_page_size_desktop


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for the lifetime of the application.
    Use this function to access settings throughout the codebase.
    """
    return Settings()
