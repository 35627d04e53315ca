"""
Application Configuration

Settings class using pydantic-settings for environment variable loading.
Defines storage backend selection, security and HTTP limits.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For example, STORAGE_BACKEND can be set to "supabase" to talk to
    PostgREST instead of a SQL database.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="GetStreetCred API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="0.1.0", description="API version")
    log_level: str = Field(default="INFO", description="Root log level")

    # Security
    secret_key: str = Field(
        default="change-me-in-production-min-32-chars",
        description="Secret key for JWT signing (min 32 characters)",
    )
    access_token_expire_hours: int = Field(
        default=24,
        description="Access token expiration time in hours",
    )
    bcrypt_rounds: int = Field(
        default=12,
        ge=4,
        le=31,
        description="bcrypt cost factor used for password hashes",
    )
    trust_client_identity: bool = Field(
        default=True,
        description=(
            "Accept userId/userRole asserted in request bodies when no bearer "
            "token is sent. Spoofable; disable once all clients send tokens."
        ),
    )
    admin_email: str = Field(
        default="admin@getstreetcred.com",
        description="The single username granted the admin role at signup",
    )

    # Storage
    storage_backend: Literal["sql", "supabase"] = Field(
        default="sql",
        description="Persistence backend: SQLAlchemy ('sql') or PostgREST ('supabase')",
    )
    database_url: str = Field(
        default="sqlite+aiosqlite:///./streetcred.db",
        description="SQLAlchemy database URL for the sql backend",
    )
    sql_echo: bool = Field(default=False, description="Echo SQL statements")
    create_tables_on_startup: bool = Field(
        default=True,
        description="Create missing tables at startup (sql backend only)",
    )
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (https://<ref>.supabase.co)",
    )
    supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Supabase anon/service key sent as apikey header",
    )
    supabase_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for PostgREST requests",
    )

    # HTTP limits
    max_request_size: int = Field(
        default=10 * 1024 * 1024,  # 10MB
        description="Maximum request body size in bytes",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:5173",
        description="Comma-separated list of allowed CORS origins",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string to list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings instance.

    Uses lru_cache to ensure settings are only loaded once per process.

    Returns:
        Settings: Application settings instance

    Example:
        >>> settings = get_settings()
        >>> print(settings.admin_email)
        admin@getstreetcred.com
    """
    return Settings()
