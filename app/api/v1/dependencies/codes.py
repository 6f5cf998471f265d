"""Code store and redemption service dependencies."""

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, Request

from app.application.interfaces.repositories import ICodeStore
from app.application.use_cases.codes import RedemptionService
from app.core.config import get_settings
from app.infrastructure.persistence.database import transactional_session
from app.infrastructure.persistence.repositories import UniqueCodeRepository
from app.shared.utils.generators import redemption_code_generator


async def get_code_store(request: Request) -> AsyncIterator[ICodeStore]:
    """Yield the code store for this request.

    The in-memory store opened by the lifespan is shared; otherwise a Postgres
    repository over a per-request transaction (commit on success, rollback on error).
    Depend on it with scope="function" so the commit finishes before the response
    is sent: a failed commit must surface as a 5xx, never as a 2xx.
    """
    store = getattr(request.app.state, "code_store", None)
    if store is not None:
        yield store
        return
    async with transactional_session() as session:
        yield UniqueCodeRepository(session)


def get_redemption_service(
    store: Annotated[ICodeStore, Depends(get_code_store, scope="function")],
) -> RedemptionService:
    """RedemptionService configured from settings (code length, validity window, attempts)."""
    settings = get_settings()
    return RedemptionService(
        store,
        code_generator=redemption_code_generator(settings.code_length),
        validity_window=settings.code_validity_window,
        max_generation_attempts=settings.code_max_generation_attempts,
    )
