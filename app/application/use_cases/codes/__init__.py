"""Unique code use cases."""

from app.application.use_cases.codes.redemption_service import RedemptionService

__all__ = [
    "RedemptionService",
]
