"""Settings validation (backend, DATABASE_URL, SECRET_KEY)."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from app.core.config import Settings


def _settings(**overrides) -> Settings:
    values = {"secret_key": "s3cret", "database_backend": "memory"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_memory_backend_needs_no_database_url() -> None:
    settings = _settings(database_url="")
    assert settings.database_backend == "memory"


def test_postgres_backend_requires_database_url() -> None:
    with pytest.raises(ValidationError, match="DATABASE_URL"):
        _settings(database_backend="postgres", database_url="")


def test_postgres_backend_with_url() -> None:
    settings = _settings(
        database_backend="postgres",
        database_url="postgresql+asyncpg://u:p@localhost:5432/codes",
    )
    assert settings.database_url.startswith("postgresql+asyncpg")


def test_unknown_backend_rejected() -> None:
    with pytest.raises(ValidationError, match="database_backend"):
        _settings(database_backend="mongo")


def test_secret_key_required() -> None:
    with pytest.raises(ValidationError, match="SECRET_KEY"):
        _settings(secret_key="")


def test_code_defaults() -> None:
    settings = _settings()
    assert settings.code_length == 8
    assert settings.code_max_generation_attempts == 5
    assert settings.code_validity_window == timedelta(hours=24)
    assert settings.validate_rate_limit == "100 per 15 minutes"


def test_code_validity_hours_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        _settings(code_validity_hours=0)
