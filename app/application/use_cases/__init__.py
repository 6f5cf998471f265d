"""Application use cases: one entry point per workflow."""

from app.application.use_cases.codes import RedemptionService

__all__ = [
    "RedemptionService",
]
