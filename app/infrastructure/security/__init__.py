"""Security: JWT issuing and verification for operator routes."""

from app.infrastructure.security.jwt import (
    TokenSubject,
    create_access_token,
    verify_token,
)

__all__ = [
    "TokenSubject",
    "create_access_token",
    "verify_token",
]
