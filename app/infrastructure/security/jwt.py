"""JWT token creation and verification for authentication.

Tokens are issued by the operator backend (or create_access_token in scripts
and tests); this service only needs the subject. Uses app.core.config for
secret and algorithm.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import get_settings


@dataclass(frozen=True)
class TokenSubject:
    """Authenticated caller extracted from a verified token."""

    subject_id: str
    claims: dict[str, Any]


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token with the given claims.

    Args:
        data: Claims to encode; must include sub for verify_token to accept it.
        expires_delta: Optional TTL; else uses settings.access_token_expire_minutes.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    to_encode = data.copy()
    if expires_delta is not None:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(
            minutes=settings.access_token_expire_minutes
        )
    to_encode["exp"] = expire
    encoded = jwt.encode(
        to_encode,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> TokenSubject:
    """Verify and decode a JWT.

    Enforces presence of exp and a non-empty sub.

    Args:
        token: JWT string (e.g. from Authorization header).

    Returns:
        TokenSubject with sub as subject_id and the full payload.

    Raises:
        ValueError: If token is invalid, expired, or missing required claims.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    subject = payload.get("sub")
    if not subject or not isinstance(subject, str):
        raise ValueError("Token missing required claim: sub")
    return TokenSubject(subject_id=subject, claims=payload)
