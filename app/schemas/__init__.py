"""Pydantic request/response schemas for the API."""

from app.schemas.health import HealthResponse
from app.schemas.unique_code import (
    CodeListResponse,
    CodeResponse,
    CodeStatisticsResponse,
    CodeValidationResponse,
    GenerateCodeRequest,
    UseCodeRequest,
)

__all__ = [
    "CodeListResponse",
    "CodeResponse",
    "CodeStatisticsResponse",
    "CodeValidationResponse",
    "GenerateCodeRequest",
    "HealthResponse",
    "UseCodeRequest",
]
