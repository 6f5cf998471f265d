"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (logging, code store,
DB engine dispose).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: logging, then the code store. The memory backend keeps one
    InMemoryCodeStore on app.state.code_store for the life of the process;
    the postgres backend creates the engine eagerly so a bad DATABASE_URL
    fails at boot, and request dependencies open a session per request.
    Shutdown: drop the in-memory store, dispose the SQL engine.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    if settings.database_backend == "memory":
        from app.infrastructure.persistence.repositories import InMemoryCodeStore

        app.state.code_store = InMemoryCodeStore()
        logger.warning("Using in-memory code store; codes are lost on restart")
    else:
        from app.infrastructure.persistence.database import get_session_factory

        get_session_factory()
        app.state.code_store = None
        logger.info("Postgres code store configured")

    yield

    # ---- Shutdown ----
    app.state.code_store = None

    from app.infrastructure.persistence.database import dispose_engine

    await dispose_engine()
