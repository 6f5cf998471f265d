"""RedemptionService against the in-memory store (fixed clock) and mocked stores."""

import asyncio
import itertools
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from app.application.dtos.unique_code import (
    CodeFilter,
    CodeStatistics,
    InsertResult,
)
from app.application.use_cases.codes import RedemptionService
from app.domain.entities.unique_code import new_record
from app.domain.enums import InsertStatus, RedeemStatus, StatisticsRange
from app.domain.exceptions import CodeGenerationFailedException
from app.infrastructure.persistence.repositories import InMemoryCodeStore


@pytest.fixture
def service(memory_store: InMemoryCodeStore, clock) -> RedemptionService:
    return RedemptionService(memory_store, clock=clock)


def _sequence(*codes: str):
    """Code generator yielding codes in order."""
    it = iter(codes)
    return lambda: next(it)


async def test_generate_then_details(service: RedemptionService, clock) -> None:
    """A generated code is unused, tied to its prize, and expires 24h later."""
    issued = await service.generate(prize_id=4)
    details = await service.get_details(issued.code)
    assert details is not None
    assert details.prize_id == 4
    assert details.is_used is False
    assert details.used_at is None
    assert details.expires_at == clock() + timedelta(hours=24)


async def test_concurrent_generate_yields_distinct_codes(service: RedemptionService) -> None:
    records = await asyncio.gather(*(service.generate(prize_id=1) for _ in range(50)))
    assert len({r.code for r in records}) == 50


async def test_concurrent_generate_with_colliding_generator(
    memory_store: InMemoryCodeStore, clock
) -> None:
    """Every candidate is drawn twice; concurrent generates retry and still end up unique."""
    pool = itertools.chain.from_iterable((f"DUP{i:05d}", f"DUP{i:05d}") for i in range(100))
    draws: list[str] = []

    def colliding() -> str:
        code = next(pool)
        draws.append(code)
        return code

    svc = RedemptionService(memory_store, code_generator=colliding, clock=clock)
    records = await asyncio.gather(*(svc.generate(prize_id=1) for _ in range(10)))
    assert len({r.code for r in records}) == 10
    assert len(memory_store) == 10
    assert len(draws) > 10


async def test_generate_retries_on_collision(memory_store: InMemoryCodeStore, clock) -> None:
    await memory_store.insert(new_record("TAKEN222", prize_id=1, now=clock()))
    svc = RedemptionService(
        memory_store, code_generator=_sequence("TAKEN222", "FRESH222"), clock=clock
    )
    issued = await svc.generate(prize_id=2)
    assert issued.code == "FRESH222"
    assert issued.prize_id == 2


async def test_generate_gives_up_after_max_attempts(clock) -> None:
    store = AsyncMock()
    store.insert = AsyncMock(return_value=InsertResult(status=InsertStatus.DUPLICATE_CODE))
    counter = itertools.count()
    svc = RedemptionService(
        store,
        code_generator=lambda: f"CODE{next(counter):04d}",
        max_generation_attempts=3,
        clock=clock,
    )
    with pytest.raises(CodeGenerationFailedException) as exc_info:
        await svc.generate(prize_id=9)
    assert store.insert.await_count == 3
    assert exc_info.value.details == {"prize_id": 9, "attempts": 3}


def test_max_attempts_must_be_positive(memory_store: InMemoryCodeStore) -> None:
    with pytest.raises(ValueError):
        RedemptionService(memory_store, max_generation_attempts=0)


async def test_validate_outcomes(service: RedemptionService, clock) -> None:
    missing = await service.validate("NOPE2222")
    assert (missing.exists, missing.is_valid) == (False, False)

    issued = await service.generate(prize_id=1)
    fresh = await service.validate(issued.code)
    assert (fresh.exists, fresh.is_valid) == (True, True)

    await service.redeem(issued.code, "user-1")
    used = await service.validate(issued.code)
    assert (used.exists, used.is_valid) == (True, False)


async def test_validate_does_not_mutate(service: RedemptionService) -> None:
    issued = await service.generate(prize_id=1)
    for _ in range(3):
        await service.validate(issued.code)
    details = await service.get_details(issued.code)
    assert details == issued


async def test_concurrent_redeem_has_single_winner(service: RedemptionService) -> None:
    """K concurrent redeems of one code: exactly one REDEEMED, the rest ALREADY_USED."""
    issued = await service.generate(prize_id=1)
    results = await asyncio.gather(
        *(service.redeem(issued.code, f"user-{i}") for i in range(25))
    )
    statuses = [r.status for r in results]
    assert statuses.count(RedeemStatus.REDEEMED) == 1
    assert statuses.count(RedeemStatus.ALREADY_USED) == 24
    winner = next(r for r in results if r.redeemed)
    details = await service.get_details(issued.code)
    assert details is not None
    assert details.used_by == winner.record.used_by


async def test_redeem_is_idempotent_in_effect(service: RedemptionService, clock) -> None:
    """After a successful redeem, later redeems are ALREADY_USED and is_used stays True."""
    issued = await service.generate(prize_id=1)
    first = await service.redeem(issued.code, "user-1")
    assert first.status is RedeemStatus.REDEEMED
    assert first.record is not None
    assert first.record.used_at == clock()

    clock.advance(timedelta(hours=1))
    for subject in ("user-1", "user-2"):
        again = await service.redeem(issued.code, subject)
        assert again.status is RedeemStatus.ALREADY_USED
        assert again.record is None
    details = await service.get_details(issued.code)
    assert details is not None
    assert details.is_used is True
    assert details.used_by == "user-1"


async def test_expired_code_cannot_be_redeemed(service: RedemptionService, clock) -> None:
    issued = await service.generate(prize_id=1)
    clock.advance(timedelta(hours=24, minutes=1))
    result = await service.redeem(issued.code, "user-1")
    assert result.status is RedeemStatus.EXPIRED
    validation = await service.validate(issued.code)
    assert validation.is_valid is False


async def test_used_then_expired_reports_already_used(service: RedemptionService, clock) -> None:
    issued = await service.generate(prize_id=1)
    await service.redeem(issued.code, "user-1")
    clock.advance(timedelta(days=2))
    result = await service.redeem(issued.code, "user-2")
    assert result.status is RedeemStatus.ALREADY_USED


async def test_validity_window_boundaries(service: RedemptionService, clock) -> None:
    issued = await service.generate(prize_id=1)
    clock.advance(timedelta(hours=23, minutes=59))
    assert (await service.validate(issued.code)).is_valid is True
    clock.advance(timedelta(minutes=2))
    assert (await service.validate(issued.code)).is_valid is False
    assert (await service.redeem(issued.code, "user-1")).status is RedeemStatus.EXPIRED


async def test_redeem_unknown_code(service: RedemptionService) -> None:
    result = await service.redeem("NOPE2222", "user-1")
    assert result.status is RedeemStatus.NOT_FOUND


async def test_list_unused_first_page(service: RedemptionService) -> None:
    """15 unused codes, page 1 of 10: 10 records, total 15, 2 pages."""
    for _ in range(15):
        await service.generate(prize_id=1)
    listing = await service.list_codes(CodeFilter(is_used=False), page=1, limit=10)
    assert len(listing.records) == 10
    assert listing.total == 15
    assert listing.total_pages == 2
    assert listing.page == 1


async def test_list_clamps_pagination(service: RedemptionService) -> None:
    for _ in range(3):
        await service.generate(prize_id=1)
    listing = await service.list_codes(page=0, limit=1000)
    assert listing.page == 1
    assert listing.limit == 100
    assert listing.total == 3
    assert listing.total_pages == 1


async def test_list_newest_first(service: RedemptionService, clock) -> None:
    first = await service.generate(prize_id=1)
    clock.advance(timedelta(minutes=1))
    second = await service.generate(prize_id=1)
    listing = await service.list_codes()
    assert [r.code for r in listing.records] == [second.code, first.code]


async def test_statistics_counts_by_status(service: RedemptionService, clock) -> None:
    await service.generate(prize_id=1)
    clock.advance(timedelta(days=10))
    used = await service.generate(prize_id=1)
    await service.generate(prize_id=1)
    await service.generate(prize_id=2)
    await service.redeem(used.code, "user-1")

    everything = await service.statistics()
    assert everything == CodeStatistics(total=4, used=1, expired=1, active=2)

    week = await service.statistics(StatisticsRange.WEEK, prize_id=1)
    assert (week.total, week.used, week.expired, week.active) == (2, 1, 0, 1)
    assert week.time_range is StatisticsRange.WEEK
    assert week.created_since == clock() - timedelta(days=7)


async def test_statistics_passes_window_to_store(clock) -> None:
    store = AsyncMock()
    store.count_statistics = AsyncMock(
        return_value=CodeStatistics(total=0, used=0, expired=0, active=0)
    )
    svc = RedemptionService(store, clock=clock)
    stats = await svc.statistics(StatisticsRange.MONTH, prize_id=3)
    store.count_statistics.assert_awaited_once_with(
        clock(), prize_id=3, created_since=clock() - timedelta(days=30)
    )
    assert stats.time_range is StatisticsRange.MONTH
