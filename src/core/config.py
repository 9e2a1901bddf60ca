"""Application configuration using pydantic-settings."""
from functools import lru_cache
from urllib.parse import urlparse

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOCAL_DATABASE_HOSTS = frozenset({"localhost", "127.0.0.1", "0.0.0.0", "::1"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database
    database_url: str
    db_pool_size: int = Field(default=5, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=10, validation_alias="DB_MAX_OVERFLOW")

    # Hosted auth service (GoTrue-compatible)
    auth_url: str = Field(default="", validation_alias="AUTH_URL")
    auth_api_key: str = Field(default="", validation_alias="AUTH_API_KEY")
    auth_timeout: float = Field(default=10.0, validation_alias="AUTH_TIMEOUT")

    # When set, bearer JWTs are verified locally instead of via the hosted service
    auth_jwt_secret: str = Field(default="", validation_alias="AUTH_JWT_SECRET")
    auth_jwt_audience: str = Field(default="authenticated", validation_alias="AUTH_JWT_AUDIENCE")

    # Development mode - bypasses auth for local development
    dev_mode: bool = Field(default=False, validation_alias="DEV_MODE")

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(
        default="http://localhost:5173",
        validation_alias="CORS_ORIGINS",
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @model_validator(mode="after")
    def validate_dev_mode_security(self) -> "Settings":
        """
        Refuse DEV_MODE unless the database is local.

        DEV_MODE hands every request the same fixed identity, so pointing it at a
        shared database would expose every user's decks. SQLite URLs and loopback
        hosts are accepted.
        """
        if not self.dev_mode or self.is_sqlite:
            return self

        hostname = (urlparse(self.database_url).hostname or "").lower()
        if hostname not in LOCAL_DATABASE_HOSTS:
            raise ValueError(
                f"DEV_MODE requires a local database, but DATABASE_URL points at "
                f"'{hostname}'. Disable DEV_MODE or use a localhost/SQLite database.",
            )
        return self

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins string into a list."""
        if not self.cors_origins_str:
            return []
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite (no connection pool sizing)."""
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
