"""Domain enumerations for the prize wheel codes service.

Enums represent fixed sets of domain values (code status, store outcomes).
"""

from enum import Enum


class CodeStatus(str, Enum):
    """Display status of a code at a given instant.

    USED takes precedence over EXPIRED: a redeemed code stays USED after its
    window closes.
    """

    ACTIVE = "active"
    USED = "used"
    EXPIRED = "expired"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [status.value for status in cls]


class InsertStatus(str, Enum):
    """Outcome of inserting a code record into the store."""

    INSERTED = "inserted"
    DUPLICATE_CODE = "duplicate_code"


class RedeemStatus(str, Enum):
    """Outcome of an atomic redemption attempt."""

    REDEEMED = "redeemed"
    NOT_FOUND = "not_found"
    ALREADY_USED = "already_used"
    EXPIRED = "expired"


class StatisticsRange(str, Enum):
    """Creation-time window for code statistics."""

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"

    @property
    def days(self) -> int | None:
        """Days covered by the window; None for ALL (no lower bound)."""
        return {"week": 7, "month": 30, "year": 365}.get(self.value)
