"""Process-local code store for development and tests (database_backend='memory').

Same contract as UniqueCodeRepository. Every mutation runs under one
asyncio.Lock, which makes check-and-set atomic within a single event loop.
Not shared across processes; codes vanish on restart.
"""

from __future__ import annotations

import asyncio
from datetime import datetime

from app.application.dtos.unique_code import (
    CodeFilter,
    CodePage,
    CodeStatistics,
    InsertResult,
    Pagination,
    RedeemResult,
)
from app.domain.entities.unique_code import CodeRecord, is_expired, status_at
from app.domain.enums import CodeStatus, InsertStatus, RedeemStatus
from app.shared.utils.datetime import ensure_utc


class InMemoryCodeStore:
    """ICodeStore backed by a dict keyed by code."""

    def __init__(self) -> None:
        self._records: dict[str, CodeRecord] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._records)

    async def insert(self, record: CodeRecord) -> InsertResult:
        async with self._lock:
            if record.code in self._records:
                return InsertResult(status=InsertStatus.DUPLICATE_CODE)
            self._records[record.code] = record
        return InsertResult(status=InsertStatus.INSERTED, record=record)

    async def find_by_code(self, code: str) -> CodeRecord | None:
        return self._records.get(code)

    async def try_mark_used(
        self, code: str, used_by: str, now: datetime
    ) -> RedeemResult:
        async with self._lock:
            current = self._records.get(code)
            if current is None:
                return RedeemResult(status=RedeemStatus.NOT_FOUND)
            if current.is_used:
                return RedeemResult(status=RedeemStatus.ALREADY_USED)
            if is_expired(current, now):
                return RedeemResult(status=RedeemStatus.EXPIRED)
            updated = current.mark_used(used_by, now)
            self._records[code] = updated
        return RedeemResult(status=RedeemStatus.REDEEMED, record=updated)

    def _matching(self, code_filter: CodeFilter) -> list[CodeRecord]:
        return [
            r
            for r in self._records.values()
            if (code_filter.prize_id is None or r.prize_id == code_filter.prize_id)
            and (code_filter.is_used is None or r.is_used == code_filter.is_used)
        ]

    async def list(self, code_filter: CodeFilter, pagination: Pagination) -> CodePage:
        matching = sorted(self._matching(code_filter), key=lambda r: r.code)
        matching.sort(key=lambda r: ensure_utc(r.created_at), reverse=True)
        page = matching[pagination.offset : pagination.offset + pagination.limit]
        return CodePage(records=page, total=len(matching))

    async def count_statistics(
        self,
        now: datetime,
        prize_id: int | None = None,
        created_since: datetime | None = None,
    ) -> CodeStatistics:
        records = [
            r
            for r in self._matching(CodeFilter(prize_id=prize_id))
            if created_since is None or ensure_utc(r.created_at) >= ensure_utc(created_since)
        ]
        statuses = [status_at(r, now) for r in records]
        used = statuses.count(CodeStatus.USED)
        expired = statuses.count(CodeStatus.EXPIRED)
        return CodeStatistics(
            total=len(records),
            used=used,
            expired=expired,
            active=len(records) - used - expired,
            created_since=created_since,
        )
