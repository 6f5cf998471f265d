"""Domain entities and aggregates.

Pure domain models; no ORM or persistence concerns.
"""

from app.domain.entities.unique_code import (
    DEFAULT_VALIDITY_WINDOW,
    CodeRecord,
    is_expired,
    is_valid,
    new_record,
    status_at,
)

__all__ = [
    "DEFAULT_VALIDITY_WINDOW",
    "CodeRecord",
    "is_expired",
    "is_valid",
    "new_record",
    "status_at",
]
