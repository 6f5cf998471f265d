"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.mixins import CuidMixin
from app.infrastructure.persistence.models.unique_code import UniqueCode

__all__ = [
    "CuidMixin",
    "UniqueCode",
]
