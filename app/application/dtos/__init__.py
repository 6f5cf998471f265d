"""Application DTOs: results and filters exchanged between layers (no ORM)."""

from app.application.dtos.unique_code import (
    CodeFilter,
    CodeListing,
    CodePage,
    CodeStatistics,
    CodeValidation,
    InsertResult,
    Pagination,
    RedeemResult,
)

__all__ = [
    "CodeFilter",
    "CodeListing",
    "CodePage",
    "CodeStatistics",
    "CodeValidation",
    "InsertResult",
    "Pagination",
    "RedeemResult",
]
