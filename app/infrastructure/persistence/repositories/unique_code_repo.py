"""Unique code store (Postgres). Returns domain CodeRecord snapshots.

Concurrency is delegated to the database:
- insert relies on the unique index on code (one winner per code);
- try_mark_used is a single conditional UPDATE ... RETURNING, so the row lock
  taken by the first writer makes every concurrent attempt re-check
  is_used and miss.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import and_, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.unique_code import (
    CodeFilter,
    CodePage,
    CodeStatistics,
    InsertResult,
    Pagination,
    RedeemResult,
)
from app.domain.entities.unique_code import CodeRecord, is_valid
from app.domain.enums import InsertStatus, RedeemStatus
from app.infrastructure.persistence.models.unique_code import UniqueCode
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)

_RECORD_COLUMNS = (
    UniqueCode.code,
    UniqueCode.prize_id,
    UniqueCode.created_at,
    UniqueCode.expires_at,
    UniqueCode.is_used,
    UniqueCode.used_at,
    UniqueCode.used_by,
)


def _to_record(row: Any) -> CodeRecord:
    """Map an ORM UniqueCode (or a row with the same columns) to a CodeRecord."""
    return CodeRecord(
        code=row.code,
        prize_id=row.prize_id,
        created_at=ensure_utc(row.created_at),
        expires_at=ensure_utc(row.expires_at),
        is_used=bool(row.is_used),
        used_at=ensure_utc(row.used_at),
        used_by=row.used_by,
    )


def _filter_criteria(code_filter: CodeFilter) -> list[Any]:
    criteria: list[Any] = []
    if code_filter.prize_id is not None:
        criteria.append(UniqueCode.prize_id == code_filter.prize_id)
    if code_filter.is_used is not None:
        criteria.append(UniqueCode.is_used.is_(code_filter.is_used))
    return criteria


def _is_unique_violation(exc: IntegrityError) -> bool:
    """Return True if exc comes from a unique constraint (SQLSTATE 23505)."""
    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == "23505"
    return "unique" in str(orig).lower()


class UniqueCodeRepository(BaseRepository[UniqueCode]):
    """Postgres-backed ICodeStore. One instance per request session."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, UniqueCode)

    async def insert(self, record: CodeRecord) -> InsertResult:
        """Insert inside a SAVEPOINT so a duplicate does not poison the request transaction."""
        row = UniqueCode(
            code=record.code,
            prize_id=record.prize_id,
            created_at=record.created_at,
            expires_at=record.expires_at,
            is_used=record.is_used,
            used_at=record.used_at,
            used_by=record.used_by,
        )
        try:
            async with self.db.begin_nested():
                created = await self.create(row)
        except IntegrityError as e:
            if not _is_unique_violation(e):
                raise
            logger.debug("Duplicate code rejected by unique index")
            return InsertResult(status=InsertStatus.DUPLICATE_CODE)
        return InsertResult(status=InsertStatus.INSERTED, record=_to_record(created))

    async def find_by_code(self, code: str) -> CodeRecord | None:
        result = await self.db.execute(
            select(*_RECORD_COLUMNS).where(UniqueCode.code == code)
        )
        row = result.one_or_none()
        return _to_record(row) if row else None

    async def try_mark_used(
        self, code: str, used_by: str, now: datetime
    ) -> RedeemResult:
        """Mark used with one conditional UPDATE; classify a miss with a follow-up read.

        The follow-up read only explains the failure; it never decides the winner.
        """
        stmt = (
            update(UniqueCode)
            .where(
                UniqueCode.code == code,
                UniqueCode.is_used.is_(False),
                UniqueCode.expires_at >= now,
            )
            .values(is_used=True, used_at=now, used_by=used_by)
            .returning(*_RECORD_COLUMNS)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        row = result.one_or_none()
        if row is not None:
            return RedeemResult(status=RedeemStatus.REDEEMED, record=_to_record(row))

        current = await self.find_by_code(code)
        if current is None:
            return RedeemResult(status=RedeemStatus.NOT_FOUND)
        if current.is_used:
            return RedeemResult(status=RedeemStatus.ALREADY_USED)
        if is_valid(current, now):
            # Inserted after the UPDATE ran: it did not exist for this attempt.
            return RedeemResult(status=RedeemStatus.NOT_FOUND)
        return RedeemResult(status=RedeemStatus.EXPIRED)

    async def list(self, code_filter: CodeFilter, pagination: Pagination) -> CodePage:
        criteria = _filter_criteria(code_filter)
        stmt = (
            select(*_RECORD_COLUMNS)
            .order_by(UniqueCode.created_at.desc(), UniqueCode.code.asc())
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        if criteria:
            stmt = stmt.where(*criteria)
        result = await self.db.execute(stmt)
        records = [_to_record(row) for row in result.all()]
        total = await self.count(*criteria)
        return CodePage(records=records, total=total)

    async def count_statistics(
        self,
        now: datetime,
        prize_id: int | None = None,
        created_since: datetime | None = None,
    ) -> CodeStatistics:
        criteria: list[Any] = []
        if prize_id is not None:
            criteria.append(UniqueCode.prize_id == prize_id)
        if created_since is not None:
            criteria.append(UniqueCode.created_at >= created_since)
        stmt = select(
            func.count(),
            func.count().filter(UniqueCode.is_used.is_(True)),
            func.count().filter(
                and_(UniqueCode.is_used.is_(False), UniqueCode.expires_at < now)
            ),
        ).select_from(UniqueCode)
        if criteria:
            stmt = stmt.where(*criteria)
        result = await self.db.execute(stmt)
        total, used, expired = result.one()
        return CodeStatistics(
            total=total,
            used=used,
            expired=expired,
            active=total - used - expired,
            created_since=created_since,
        )
