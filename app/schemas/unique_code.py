"""Unique code API schemas. JSON field names are camelCase (prizeId, usedBy, ...)."""

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.domain.enums import CodeStatus, StatisticsRange

# unique_code.prize_id is a Postgres INTEGER (int4).
PRIZE_ID_MAX = 2**31 - 1


class _CamelModel(BaseModel):
    """Serialize and accept camelCase; snake_case is accepted on input too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class GenerateCodeRequest(_CamelModel):
    """Payload for POST /codes/generate."""

    prize_id: int = Field(
        ..., ge=1, le=PRIZE_ID_MAX, description="Prize the code entitles its holder to"
    )


class UseCodeRequest(_CamelModel):
    """Payload for POST /codes/{code}/use."""

    user_id: str = Field(..., min_length=1, max_length=255)


class CodeResponse(_CamelModel):
    """Full code record (operator routes only) with its status at response time."""

    code: str
    status: CodeStatus
    prize_id: int
    created_at: AwareDatetime
    expires_at: AwareDatetime
    is_used: bool
    used_at: AwareDatetime | None = None
    used_by: str | None = None


class CodeValidationResponse(_CamelModel):
    """Public validity check. Exposes nothing about the record."""

    is_valid: bool


class CodeListResponse(_CamelModel):
    """One page of codes, newest first."""

    codes: list[CodeResponse]
    total: int
    page: int
    total_pages: int


class CodeStatisticsResponse(_CamelModel):
    """Counts by status for codes created within time_range."""

    total: int
    used: int
    expired: int
    active: int
    time_range: StatisticsRange
