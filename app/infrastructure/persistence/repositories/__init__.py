"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.in_memory_code_store import (
    InMemoryCodeStore,
)
from app.infrastructure.persistence.repositories.unique_code_repo import (
    UniqueCodeRepository,
)

__all__ = [
    "BaseRepository",
    "InMemoryCodeStore",
    "UniqueCodeRepository",
]
