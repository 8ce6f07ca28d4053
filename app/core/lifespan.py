"""Application lifespan: startup and shutdown.

Single place for startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (logging, DB engine dispose).
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
    """Configure logging on startup; dispose the SQL engine on shutdown.

    The engine itself is created lazily by the first request that needs it.
    """
    setup_logging()
    settings = get_settings()
    logger.info("%s %s starting", settings.app_name, settings.app_version)

    yield

    from app.infrastructure.persistence.database import dispose_engine

    await dispose_engine()
    logger.info("Database engine disposed")
