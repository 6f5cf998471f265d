"""FastAPI dependencies (composition root).

Routes depend on these; no repository or service is constructed inside a route.
"""

from app.api.v1.dependencies.auth import get_current_subject
from app.api.v1.dependencies.codes import get_code_store, get_redemption_service

__all__ = [
    "get_code_store",
    "get_current_subject",
    "get_redemption_service",
]
