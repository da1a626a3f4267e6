from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application-level settings for the FastAPI service.

    This is separate from content_api.db.config.Settings, which focuses on the database layer.
    """

    # FastAPI metadata
    APP_NAME: str = Field(default="Content API")
    APP_DESCRIPTION: str = Field(
        default=(
            "Content-management backend: site menus with localised items, "
            "user and role administration."
        )
    )
    APP_VERSION: str = Field(default="0.1.0")

    # CORS
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Comma-separated list or JSON array of allowed origins. Default: *",
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True)
    CORS_ALLOW_METHODS: List[str] = Field(default_factory=lambda: ["*"])
    CORS_ALLOW_HEADERS: List[str] = Field(default_factory=lambda: ["*"])

    # Startup behavior
    RUN_MIGRATIONS_ON_STARTUP: bool = Field(
        default=True,
        description="If true, run Alembic migrations (upgrade head) at app startup.",
    )
    AUTO_SEED: bool = Field(
        default=False,
        description="If true, run minimal database seeding after migrations.",
    )

    # Bearer tokens are issued elsewhere; this service only verifies them.
    JWT_SECRET_KEY: str = Field(default="change-me", description="Shared secret used to verify bearer tokens")
    JWT_ALGORITHM: str = Field(default="HS256")

    # Pseudo-role names used by the authorization check
    EVERYONE_ROLE_NAME: str = Field(default="Everyone")
    REGISTERED_ROLE_NAME: str = Field(default="Registered")
    ANONYMOUS_ROLE_NAME: str = Field(default="Anonymous")

    # Role required by the administration routes
    ADMIN_ROLE_NAME: str = Field(default="Administrator")

    # Roles (real or pseudo) allowed to read menus
    MENU_VIEW_ROLES: List[str] = Field(default_factory=lambda: ["Everyone"])

    # Seeding defaults
    DEFAULT_SITE_ID: UUID = Field(default=UUID("00000000-0000-0000-0000-000000000001"))
    DEFAULT_MENU_NAME: str = Field(default="Main")

    # Environment label
    ENVIRONMENT: Optional[str] = Field(
        default=None, description="Environment label (dev/test/prod)"
    )

    # Automatically load from .env at runtime.
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        """
        Accept both JSON array format and comma-separated formats for CORS origins.
        """
        if v is None:
            return ["*"]
        if isinstance(v, str):
            # Try comma-separated
            parts = [p.strip() for p in v.split(",") if p.strip()]
            return parts or ["*"]
        if isinstance(v, list):
            return v or ["*"]
        return ["*"]


# PUBLIC_INTERFACE
def get_app_settings() -> AppSettings:
    """
    Return a new AppSettings instance populated from environment variables.

    Note:
      A new instance is built on each call so tests can change the environment
      between calls.
    """
    return AppSettings()
