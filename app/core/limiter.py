"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules can use the same
instance without circular imports. Limit strings come from settings and are
resolved per request, so importing this module does not load settings.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import get_settings

limiter = Limiter(key_func=get_remote_address)


def _validate_limit() -> str:
    return get_settings().validate_rate_limit


def _write_limit() -> str:
    return get_settings().write_rate_limit


# Public, unauthenticated code checks (brute-force surface).
limit_validate = limiter.limit(_validate_limit)
# Authenticated writes (generate, redeem).
limit_writes = limiter.limit(_write_limit)
