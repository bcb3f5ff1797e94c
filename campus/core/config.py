"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. DATABASE_URL is optional at load time so that unit
tests and tooling can import the package without a database; it is
validated for the async Postgres driver when set.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ASYNC_POSTGRES_SCHEME = "postgresql+asyncpg://"


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "campus-rbac"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (Postgres via asyncpg; schema managed by Alembic)
    database_url: str = ""
    database_echo: bool = False
    # Optional pool/driver overrides (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # Redis cache (permission sets per user)
    redis_enabled: bool = False
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    redis_max_connections: int = 10
    cache_ttl_permissions: int = 300

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_database_and_cache(self) -> "Settings":
        """Validate DATABASE_URL driver and cache TTL."""
        if self.database_url and not self.database_url.startswith(
            _ASYNC_POSTGRES_SCHEME
        ):
            raise ValueError(
                f"DATABASE_URL must use the async Postgres driver ({_ASYNC_POSTGRES_SCHEME}...), "
                f"got: {self.database_url.split('://', 1)[0]!r}"
            )
        if self.cache_ttl_permissions <= 0:
            raise ValueError("CACHE_TTL_PERMISSIONS must be a positive number of seconds")
        return self

    @property
    def database_configured(self) -> bool:
        """True when a Postgres URL is set."""
        return bool(self.database_url)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
