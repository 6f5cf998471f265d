"""Application layer: interfaces, DTOs, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (code stores).
"""

from app.application.interfaces import ICodeStore
from app.application.use_cases.codes import RedemptionService

__all__ = [
    "ICodeStore",
    "RedemptionService",
]
