"""
Application lifespan handler.
Manages startup and shutdown events for the FastAPI application.
"""

import asyncio
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI

from tableside_api.models import Base
from tableside_api.seed import seed
from tableside_api.services.domain.table_session_service import purge_expired_sessions
from tableside_api.services.events.outbox_processor import (
    start_outbox_processor,
    stop_outbox_processor,
)
from tableside_shared.config.logging import api_logger as logger, setup_logging
from tableside_shared.config.settings import settings
from tableside_shared.infrastructure.db import engine, get_db_context
from tableside_shared.infrastructure.redis_pool import close_redis_pool


async def sweep_expired_sessions(interval_seconds: float) -> None:
    """
    Close expired table sessions and purge their carts every
    ``interval_seconds``, for sessions whose token is never presented again.
    """
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await asyncio.to_thread(purge_expired_sessions)
        except Exception as e:
            logger.error("Expired session sweep failed", error=str(e), exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    setup_logging()

    # Refuse to start in production with insecure configuration
    secret_errors = settings.validate_production_secrets()
    if secret_errors:
        for error in secret_errors:
            logger.error("Configuration error", error=error)
        if settings.environment == "production":
            raise RuntimeError(
                f"Production configuration errors: {'; '.join(secret_errors)}. "
                "Server will not start with insecure configuration."
            )
        logger.warning("Running with insecure defaults (acceptable for development only)")

    logger.info("Starting Tableside API", port=settings.rest_api_port, env=settings.environment)

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    if settings.seed_on_startup:
        with get_db_context() as db:
            seed(db)

    if settings.outbox_processor_enabled:
        await start_outbox_processor()

    sweeper: asyncio.Task | None = None
    if settings.session_sweep_interval_seconds > 0:
        sweeper = asyncio.create_task(sweep_expired_sessions(settings.session_sweep_interval_seconds))
        logger.info("Expired session sweep started", interval=settings.session_sweep_interval_seconds)

    yield

    logger.info("Shutting down Tableside API")

    if sweeper is not None:
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper

    if settings.outbox_processor_enabled:
        await stop_outbox_processor()

    await close_redis_pool()
    logger.info("Redis connection pool closed")
