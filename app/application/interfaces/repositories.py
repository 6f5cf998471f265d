"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities or application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.unique_code import (
        CodeFilter,
        CodePage,
        CodeStatistics,
        InsertResult,
        Pagination,
        RedeemResult,
    )
    from app.domain.entities.unique_code import CodeRecord


class ICodeStore(Protocol):
    """Protocol for the unique code store (DIP).

    The store is the only component that mutates code records and the single
    arbiter of concurrent inserts and redemptions.
    """

    async def insert(self, record: CodeRecord) -> InsertResult:
        """Persist a new record. Concurrent inserts of one code yield exactly one INSERTED."""

    async def find_by_code(self, code: str) -> CodeRecord | None:
        """Return the record for code, or None. No side effects."""

    async def try_mark_used(
        self, code: str, used_by: str, now: datetime
    ) -> RedeemResult:
        """Atomically mark code used iff it exists, is unused and now <= expires_at.

        Under concurrent calls for one code exactly one observes REDEEMED;
        the others observe ALREADY_USED.
        """

    async def list(self, code_filter: CodeFilter, pagination: Pagination) -> CodePage:
        """Return a page of records (newest first) and the filtered total."""

    async def count_statistics(
        self,
        now: datetime,
        prize_id: int | None = None,
        created_since: datetime | None = None,
    ) -> CodeStatistics:
        """Return total/used/expired/active counts for codes created since created_since."""
