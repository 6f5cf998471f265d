"""Unique code API: thin routes delegating to RedemptionService.

Validate is public and rate limited; every other route needs a bearer token.
Redemption outcomes come back as RedeemStatus and are raised here as domain
exceptions so the shared handlers render them.
"""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from app.api.v1.dependencies import get_current_subject, get_redemption_service
from app.application.dtos.unique_code import CodeFilter
from app.application.use_cases.codes import RedemptionService
from app.core.limiter import limit_validate, limit_writes
from app.domain.entities.unique_code import CodeRecord, status_at
from app.domain.enums import RedeemStatus, StatisticsRange
from app.domain.exceptions import (
    CodeAlreadyUsedException,
    CodeExpiredException,
    ResourceNotFoundException,
)
from app.infrastructure.security.jwt import TokenSubject
from app.schemas.unique_code import (
    PRIZE_ID_MAX,
    CodeListResponse,
    CodeResponse,
    CodeStatisticsResponse,
    CodeValidationResponse,
    GenerateCodeRequest,
    UseCodeRequest,
)

router = APIRouter()


def _to_response(record: CodeRecord, now: datetime) -> CodeResponse:
    return CodeResponse(
        status=status_at(record, now),
        code=record.code,
        prize_id=record.prize_id,
        created_at=record.created_at,
        expires_at=record.expires_at,
        is_used=record.is_used,
        used_at=record.used_at,
        used_by=record.used_by,
    )


@router.post("/generate", response_model=CodeResponse, status_code=201)
@limit_writes
async def generate_code(
    request: Request,
    body: GenerateCodeRequest,
    svc: Annotated[RedemptionService, Depends(get_redemption_service)],
    _: Annotated[TokenSubject, Depends(get_current_subject)],
):
    """Issue a new unique code for a prize (valid for the configured window)."""
    record = await svc.generate(body.prize_id)
    return _to_response(record, svc.clock())


@router.get("/statistics", response_model=CodeStatisticsResponse)
async def code_statistics(
    svc: Annotated[RedemptionService, Depends(get_redemption_service)],
    _: Annotated[TokenSubject, Depends(get_current_subject)],
    time_range: Annotated[StatisticsRange, Query(alias="timeRange")] = StatisticsRange.ALL,
    prize_id: Annotated[
        int | None, Query(alias="prizeId", ge=1, le=PRIZE_ID_MAX)
    ] = None,
):
    """Count codes created within timeRange by status (used, expired, active)."""
    stats = await svc.statistics(time_range=time_range, prize_id=prize_id)
    return CodeStatisticsResponse(
        total=stats.total,
        used=stats.used,
        expired=stats.expired,
        active=stats.active,
        time_range=stats.time_range,
    )


@router.get(
    "/{code}/validate",
    response_model=CodeValidationResponse,
    responses={404: {"description": "Unknown code", "model": CodeValidationResponse}},
)
@limit_validate
async def validate_code(
    request: Request,
    code: str,
    svc: Annotated[RedemptionService, Depends(get_redemption_service)],
):
    """Public check: is the code redeemable right now? Unknown codes answer 404 {isValid: false}."""
    result = await svc.validate(code)
    if not result.exists:
        return JSONResponse(
            status_code=404,
            content=CodeValidationResponse(is_valid=False).model_dump(by_alias=True),
        )
    return CodeValidationResponse(is_valid=result.is_valid)


@router.post("/{code}/use", response_model=CodeResponse)
@limit_writes
async def use_code(
    request: Request,
    code: str,
    body: UseCodeRequest,
    svc: Annotated[RedemptionService, Depends(get_redemption_service)],
    _: Annotated[TokenSubject, Depends(get_current_subject)],
):
    """Redeem a code for userId. Exactly one concurrent caller succeeds."""
    result = await svc.redeem(code, body.user_id)
    if result.redeemed and result.record is not None:
        return _to_response(result.record, svc.clock())
    if result.status is RedeemStatus.ALREADY_USED:
        raise CodeAlreadyUsedException(code)
    if result.status is RedeemStatus.EXPIRED:
        raise CodeExpiredException(code)
    raise ResourceNotFoundException("code", code)


@router.get("/{code}", response_model=CodeResponse)
async def get_code_details(
    code: str,
    svc: Annotated[RedemptionService, Depends(get_redemption_service)],
    _: Annotated[TokenSubject, Depends(get_current_subject)],
):
    """Full record for a code, including who redeemed it."""
    record = await svc.get_details(code)
    if record is None:
        raise ResourceNotFoundException("code", code)
    return _to_response(record, svc.clock())


@router.get("", response_model=CodeListResponse)
async def list_codes(
    svc: Annotated[RedemptionService, Depends(get_redemption_service)],
    _: Annotated[TokenSubject, Depends(get_current_subject)],
    prize_id: Annotated[
        int | None, Query(alias="prizeId", ge=1, le=PRIZE_ID_MAX)
    ] = None,
    is_used: Annotated[bool | None, Query(alias="isUsed")] = None,
    page: int | None = None,
    limit: int | None = None,
):
    """List codes newest first. page < 1 and limit outside 1..100 are clamped."""
    listing = await svc.list_codes(
        CodeFilter(prize_id=prize_id, is_used=is_used),
        page=page,
        limit=limit,
    )
    now = svc.clock()
    return CodeListResponse(
        codes=[_to_response(r, now) for r in listing.records],
        total=listing.total,
        page=listing.page,
        total_pages=listing.total_pages,
    )
