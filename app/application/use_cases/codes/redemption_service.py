"""Redemption service: issue, validate, redeem, and list unique codes.

Orchestrates the code lifecycle rules (app.domain.entities.unique_code) and an
ICodeStore. Holds no locks and no mutable state of its own: concurrent calls
are arbitrated by the store (unique insert, conditional update).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta

from app.application.dtos.unique_code import (
    CodeFilter,
    CodeListing,
    CodeStatistics,
    CodeValidation,
    Pagination,
    RedeemResult,
)
from app.application.interfaces.repositories import ICodeStore
from app.domain.entities.unique_code import (
    DEFAULT_VALIDITY_WINDOW,
    CodeRecord,
    is_valid,
    new_record,
)
from app.domain.enums import RedeemStatus, StatisticsRange
from app.domain.exceptions import CodeGenerationFailedException
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import CodeGenerator, generate_redemption_code

logger = logging.getLogger(__name__)

DEFAULT_MAX_GENERATION_ATTEMPTS = 5


class RedemptionService:
    """Issue and redeem single-use codes on top of a code store."""

    def __init__(
        self,
        store: ICodeStore,
        code_generator: CodeGenerator = generate_redemption_code,
        validity_window: timedelta = DEFAULT_VALIDITY_WINDOW,
        max_generation_attempts: int = DEFAULT_MAX_GENERATION_ATTEMPTS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if max_generation_attempts < 1:
            raise ValueError("max_generation_attempts must be at least 1")
        self.store = store
        self.code_generator = code_generator
        self.validity_window = validity_window
        self.max_generation_attempts = max_generation_attempts
        self.clock = clock

    async def generate(self, prize_id: int) -> CodeRecord:
        """Issue a new code for prize_id.

        Retries with a fresh candidate on DUPLICATE_CODE, at most
        max_generation_attempts times. A duplicate may also be this caller's
        own earlier insert whose outcome was lost to a timeout; retrying with
        a new code covers both cases.

        Raises:
            CodeGenerationFailedException: Every candidate collided.
        """
        for attempt in range(1, self.max_generation_attempts + 1):
            candidate = new_record(
                code=self.code_generator(),
                prize_id=prize_id,
                now=self.clock(),
                validity_window=self.validity_window,
            )
            result = await self.store.insert(candidate)
            if result.inserted and result.record is not None:
                logger.info(
                    "Issued code for prize %s (expires %s)",
                    prize_id,
                    result.record.expires_at.isoformat(),
                )
                return result.record
            logger.warning(
                "Code collision for prize %s on attempt %d/%d; retrying",
                prize_id,
                attempt,
                self.max_generation_attempts,
            )
        logger.error(
            "Code generation exhausted for prize %s after %d attempts",
            prize_id,
            self.max_generation_attempts,
        )
        raise CodeGenerationFailedException(prize_id, self.max_generation_attempts)

    async def validate(self, code: str) -> CodeValidation:
        """Report whether code exists and is currently redeemable. Never mutates."""
        record = await self.store.find_by_code(code)
        if record is None:
            return CodeValidation(exists=False, is_valid=False)
        return CodeValidation(exists=True, is_valid=is_valid(record, self.clock()))

    async def redeem(self, code: str, subject_id: str) -> RedeemResult:
        """Consume code on behalf of subject_id in one atomic store call.

        Returns REDEEMED with the updated record, or NOT_FOUND / ALREADY_USED /
        EXPIRED without a record.
        """
        result = await self.store.try_mark_used(code, subject_id, self.clock())
        if result.status is RedeemStatus.REDEEMED:
            logger.info("Code redeemed by %s", subject_id)
        else:
            logger.info("Redemption refused: %s", result.status.value)
        return result

    async def get_details(self, code: str) -> CodeRecord | None:
        """Return the full record (including used_by). Callers gate access."""
        return await self.store.find_by_code(code)

    async def list_codes(
        self,
        code_filter: CodeFilter | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> CodeListing:
        """List codes newest first with clamped pagination (page >= 1, limit 1..100)."""
        pagination = Pagination.normalized(page, limit)
        result = await self.store.list(code_filter or CodeFilter(), pagination)
        return CodeListing(
            records=result.records,
            total=result.total,
            page=pagination.page,
            limit=pagination.limit,
        )

    async def statistics(
        self,
        time_range: StatisticsRange = StatisticsRange.ALL,
        prize_id: int | None = None,
    ) -> CodeStatistics:
        """Count codes by status for codes created within time_range."""
        now = self.clock()
        days = time_range.days
        created_since = now - timedelta(days=days) if days is not None else None
        stats = await self.store.count_statistics(
            now, prize_id=prize_id, created_since=created_since
        )
        return replace(stats, time_range=time_range, created_since=created_since)
