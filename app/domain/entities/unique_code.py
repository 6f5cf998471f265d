"""Unique code domain entity and lifecycle rules.

A code is issued unused, can be redeemed once, and stops being redeemable
after its fixed validity window. Everything here is pure: no I/O, no clock
reads. Callers pass ``now`` in explicitly.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from app.domain.enums import CodeStatus
from app.domain.exceptions import ValidationException
from app.shared.utils.datetime import ensure_utc

DEFAULT_VALIDITY_WINDOW = timedelta(hours=24)


@dataclass(frozen=True)
class CodeRecord:
    """Immutable snapshot of a redeemable code.

    Validation runs on construction. State changes produce a new snapshot
    (see mark_used); only the store persists them.
    """

    code: str
    prize_id: int
    created_at: datetime
    expires_at: datetime
    is_used: bool = False
    used_at: datetime | None = None
    used_by: str | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate code record invariants. Raises ValidationException if invalid."""
        if not self.code:
            raise ValidationException("Code is required", field="code")
        if self.expires_at < self.created_at:
            raise ValidationException(
                "Expiry must not precede creation", field="expires_at"
            )
        if (self.used_at is None) != (self.used_by is None):
            raise ValidationException(
                "used_at and used_by must be set together", field="used_at"
            )
        if self.is_used != (self.used_at is not None):
            raise ValidationException(
                "is_used must match presence of used_at", field="is_used"
            )
        if self.used_at is not None and ensure_utc(self.used_at) < ensure_utc(
            self.created_at
        ):
            raise ValidationException(
                "Code cannot be used before it was created", field="used_at"
            )

    def mark_used(self, used_by: str, now: datetime) -> "CodeRecord":
        """Return the redeemed snapshot. Caller must have checked is_valid(now)."""
        return replace(self, is_used=True, used_at=now, used_by=used_by)


def new_record(
    code: str,
    prize_id: int,
    now: datetime,
    validity_window: timedelta = DEFAULT_VALIDITY_WINDOW,
) -> CodeRecord:
    """Build a freshly issued, unused record expiring validity_window after now."""
    return CodeRecord(
        code=code,
        prize_id=prize_id,
        created_at=now,
        expires_at=now + validity_window,
    )


def is_expired(record: CodeRecord, now: datetime) -> bool:
    """Return True once now is strictly past expires_at."""
    return ensure_utc(now) > ensure_utc(record.expires_at)


def is_valid(record: CodeRecord, now: datetime) -> bool:
    """Return True iff the code is unused and now <= expires_at."""
    return not record.is_used and not is_expired(record, now)


def status_at(record: CodeRecord, now: datetime) -> CodeStatus:
    """Return the display status of the record at now (USED wins over EXPIRED)."""
    if record.is_used:
        return CodeStatus.USED
    if is_expired(record, now):
        return CodeStatus.EXPIRED
    return CodeStatus.ACTIVE
