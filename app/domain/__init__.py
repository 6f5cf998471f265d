"""Domain layer: entities, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import CodeRecord
from app.domain.enums import CodeStatus, InsertStatus, RedeemStatus, StatisticsRange
from app.domain.exceptions import (
    AuthenticationException,
    CodeAlreadyUsedException,
    CodeExpiredException,
    CodeGenerationFailedException,
    PrizeWheelException,
    ResourceNotFoundException,
    ValidationException,
)

__all__ = [
    # Entities
    "CodeRecord",
    # Enums
    "CodeStatus",
    "InsertStatus",
    "RedeemStatus",
    "StatisticsRange",
    # Exceptions
    "AuthenticationException",
    "CodeAlreadyUsedException",
    "CodeExpiredException",
    "CodeGenerationFailedException",
    "PrizeWheelException",
    "ResourceNotFoundException",
    "ValidationException",
]
