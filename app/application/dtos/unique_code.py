"""DTOs for unique code use cases (no dependency on ORM).

Store and service outcomes are typed results: callers branch on the status
enum instead of catching exceptions.
"""

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.entities.unique_code import CodeRecord
from app.domain.enums import InsertStatus, RedeemStatus, StatisticsRange

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
# Keeps OFFSET well inside Postgres BIGINT.
MAX_PAGE = 1_000_000


@dataclass(frozen=True)
class CodeFilter:
    """Closed filter for listing codes. None means 'do not filter on this field'."""

    prize_id: int | None = None
    is_used: bool | None = None


@dataclass(frozen=True)
class Pagination:
    """Offset pagination. Build with Pagination.normalized to clamp raw input."""

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def normalized(cls, page: int | None, limit: int | None) -> "Pagination":
        """Clamp page to 1..MAX_PAGE and limit to 1..MAX_PAGE_SIZE (None -> defaults)."""
        page = 1 if page is None else min(max(1, page), MAX_PAGE)
        limit = DEFAULT_PAGE_SIZE if limit is None else min(max(1, limit), MAX_PAGE_SIZE)
        return cls(page=page, limit=limit)


@dataclass(frozen=True)
class InsertResult:
    """Outcome of ICodeStore.insert. record is set only when INSERTED."""

    status: InsertStatus
    record: CodeRecord | None = None

    @property
    def inserted(self) -> bool:
        return self.status is InsertStatus.INSERTED


@dataclass(frozen=True)
class RedeemResult:
    """Outcome of an atomic redemption. record is set only when REDEEMED."""

    status: RedeemStatus
    record: CodeRecord | None = None

    @property
    def redeemed(self) -> bool:
        return self.status is RedeemStatus.REDEEMED


@dataclass(frozen=True)
class CodePage:
    """One page of records plus the total matching the filter (not the page size)."""

    records: list[CodeRecord]
    total: int


@dataclass(frozen=True)
class CodeListing:
    """Service-level listing: a page with its normalized pagination."""

    records: list[CodeRecord]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return -(-self.total // self.limit) if self.total else 0


@dataclass(frozen=True)
class CodeValidation:
    """Read-only validity check. Carries no record fields (safe for public responses)."""

    exists: bool
    is_valid: bool


@dataclass(frozen=True)
class CodeStatistics:
    """Counts of codes by status."""

    total: int
    used: int
    expired: int
    active: int
    time_range: StatisticsRange = StatisticsRange.ALL
    created_since: datetime | None = field(default=None, compare=False)
