"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (e.g. SECRET_KEY, and DATABASE_URL for
the postgres backend) are validated at load time.
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except those validated in
    validate_required (secret_key, and database_url when the backend is
    'postgres').
    """

    # App
    app_name: str = "prize-wheel-codes"
    app_version: str = "1.0.0"
    debug: bool = False

    # Code store: "postgres" (SQLAlchemy + Alembic) or "memory" (single process, dev/tests)
    database_backend: str = "postgres"
    database_url: str = ""
    database_echo: bool = False
    # Optional pool/driver overrides (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # Security (JWT verification for operator routes)
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 480  # 8 hours

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Codes
    code_validity_hours: float = Field(default=24, gt=0)
    code_length: int = Field(default=8, ge=4, le=64)
    code_max_generation_attempts: int = Field(default=5, ge=1, le=50)

    # Rate limits (slowapi limit strings)
    rate_limit_enabled: bool = True
    validate_rate_limit: str = "100 per 15 minutes"
    write_rate_limit: str = "120/minute"

    # Request / middleware
    request_timeout_seconds: int = 30
    request_id_header: str = "X-Request-ID"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def code_validity_window(self) -> timedelta:
        """Validity window applied to every newly issued code."""
        return timedelta(hours=self.code_validity_hours)

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required env and the store backend.

        - Postgres: DATABASE_URL required.
        - Memory: no database; codes live only as long as the process.
        """
        if self.database_backend == "postgres":
            if not self.database_url:
                raise ValueError(
                    "DATABASE_URL is required when database_backend is 'postgres'. "
                    "Set in environment or .env file."
                )
        elif self.database_backend != "memory":
            raise ValueError(
                f"database_backend must be 'postgres' or 'memory', got: {self.database_backend!r}"
            )
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        return self


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
