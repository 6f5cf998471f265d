"""Shared telemetry: logging setup and request-scoped log context."""

from app.shared.telemetry.logging import (
    RequestIdFilter,
    request_id_var,
    setup_logging,
)

__all__ = [
    "RequestIdFilter",
    "setup_logging",
    "request_id_var",
]
