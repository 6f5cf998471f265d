"""Unique code ORM model. One row per issued redemption code."""

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, Integer, String, false
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin

CODE_MAX_LENGTH = 64
USED_BY_MAX_LENGTH = 255


class UniqueCode(CuidMixin, Base):
    """Redeemable code. Table: unique_code. Unique index on code; used_* set together."""

    __tablename__ = "unique_code"

    code: Mapped[str] = mapped_column(
        String(CODE_MAX_LENGTH), unique=True, nullable=False, index=True
    )
    prize_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    is_used: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false(), index=True
    )
    used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    used_by: Mapped[str | None] = mapped_column(String(USED_BY_MAX_LENGTH), nullable=True)

    __table_args__ = (
        Index("ix_unique_code_prize_created", "prize_id", "created_at"),
        CheckConstraint(
            "(used_at IS NULL) = (used_by IS NULL)",
            name="ck_unique_code_used_fields_together",
        ),
        CheckConstraint(
            "is_used = (used_at IS NOT NULL)",
            name="ck_unique_code_is_used_matches_used_at",
        ),
    )
