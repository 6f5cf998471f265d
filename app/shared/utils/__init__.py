"""Shared utilities: datetime and generators."""

from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import (
    CodeGenerator,
    generate_cuid,
    generate_redemption_code,
    redemption_code_generator,
)

__all__ = [
    "CodeGenerator",
    "generate_cuid",
    "generate_redemption_code",
    "redemption_code_generator",
    "utc_now",
    "ensure_utc",
]
