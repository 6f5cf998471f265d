"""UniqueCodeRepository integration tests. Require Postgres; session is rolled back after each test."""

import asyncio
import uuid
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import delete

from app.application.dtos.unique_code import CodeFilter, Pagination
from app.domain.entities.unique_code import new_record
from app.domain.enums import InsertStatus, RedeemStatus
from app.infrastructure.persistence import database
from app.infrastructure.persistence.models import UniqueCode
from app.infrastructure.persistence.repositories import UniqueCodeRepository


def _code() -> str:
    return f"T{uuid.uuid4().hex[:10].upper()}"


def _now() -> datetime:
    return datetime.now(UTC).replace(microsecond=0)


@pytest.mark.requires_db
async def test_insert_and_find_by_code(db_session) -> None:
    repo = UniqueCodeRepository(db_session)
    record = new_record(_code(), prize_id=1, now=_now())
    result = await repo.insert(record)
    assert result.status is InsertStatus.INSERTED
    assert result.record == record

    found = await repo.find_by_code(record.code)
    assert found == record


@pytest.mark.requires_db
async def test_find_unknown_returns_none(db_session) -> None:
    repo = UniqueCodeRepository(db_session)
    assert await repo.find_by_code("nonexistent-code-xyz") is None


@pytest.mark.requires_db
async def test_duplicate_insert_reports_duplicate_and_keeps_session_usable(db_session) -> None:
    """The unique index rejects the second insert; the savepoint keeps the transaction alive."""
    repo = UniqueCodeRepository(db_session)
    code = _code()
    await repo.insert(new_record(code, prize_id=1, now=_now()))
    duplicate = await repo.insert(new_record(code, prize_id=2, now=_now()))
    assert duplicate.status is InsertStatus.DUPLICATE_CODE

    found = await repo.find_by_code(code)
    assert found is not None and found.prize_id == 1


@pytest.mark.requires_db
async def test_try_mark_used_outcomes(db_session) -> None:
    repo = UniqueCodeRepository(db_session)
    now = _now()
    fresh = new_record(_code(), prize_id=1, now=now)
    old = new_record(_code(), prize_id=1, now=now - timedelta(days=2))
    await repo.insert(fresh)
    await repo.insert(old)

    redeemed = await repo.try_mark_used(fresh.code, "user-1", now)
    assert redeemed.status is RedeemStatus.REDEEMED
    assert redeemed.record is not None
    assert redeemed.record.used_by == "user-1"

    again = await repo.try_mark_used(fresh.code, "user-2", now)
    assert again.status is RedeemStatus.ALREADY_USED

    expired = await repo.try_mark_used(old.code, "user-1", now)
    assert expired.status is RedeemStatus.EXPIRED

    missing = await repo.try_mark_used("nonexistent-code-xyz", "user-1", now)
    assert missing.status is RedeemStatus.NOT_FOUND


@pytest.mark.requires_db
async def test_list_and_statistics_for_prize(db_session) -> None:
    repo = UniqueCodeRepository(db_session)
    prize_id = 900_000 + uuid.uuid4().int % 100_000
    now = _now()
    codes = []
    for i in range(3):
        record = new_record(_code(), prize_id=prize_id, now=now + timedelta(seconds=i))
        await repo.insert(record)
        codes.append(record.code)
    await repo.try_mark_used(codes[0], "user-1", now + timedelta(seconds=5))

    page = await repo.list(CodeFilter(prize_id=prize_id), Pagination(page=1, limit=2))
    assert page.total == 3
    assert [r.code for r in page.records] == [codes[2], codes[1]]

    unused = await repo.list(CodeFilter(prize_id=prize_id, is_used=False), Pagination())
    assert unused.total == 2

    stats = await repo.count_statistics(now + timedelta(seconds=10), prize_id=prize_id)
    assert (stats.total, stats.used, stats.expired, stats.active) == (3, 1, 0, 2)


@pytest.mark.requires_db
async def test_concurrent_redeem_across_sessions(db_session) -> None:
    """Separate transactions racing on one code: one REDEEMED, the rest ALREADY_USED."""
    code = _code()
    async with database.transactional_session() as session:
        await UniqueCodeRepository(session).insert(new_record(code, prize_id=1, now=_now()))

    async def attempt(subject: str) -> RedeemStatus:
        async with database.transactional_session() as session:
            result = await UniqueCodeRepository(session).try_mark_used(code, subject, _now())
            return result.status

    try:
        statuses = await asyncio.gather(*(attempt(f"user-{i}") for i in range(5)))
        assert statuses.count(RedeemStatus.REDEEMED) == 1
        assert statuses.count(RedeemStatus.ALREADY_USED) == 4
    finally:
        async with database.transactional_session() as session:
            await session.execute(delete(UniqueCode).where(UniqueCode.code == code))


@pytest.mark.requires_db
async def test_concurrent_inserts_of_one_code_across_sessions(db_session) -> None:
    """Separate transactions inserting one code: one INSERTED, the rest DUPLICATE_CODE."""
    code = _code()

    async def attempt(prize_id: int) -> InsertStatus:
        async with database.transactional_session() as session:
            result = await UniqueCodeRepository(session).insert(
                new_record(code, prize_id=prize_id, now=_now())
            )
            return result.status

    try:
        statuses = await asyncio.gather(*(attempt(i) for i in range(1, 6)))
        assert statuses.count(InsertStatus.INSERTED) == 1
        assert statuses.count(InsertStatus.DUPLICATE_CODE) == 4
    finally:
        async with database.transactional_session() as session:
            await session.execute(delete(UniqueCode).where(UniqueCode.code == code))
