"""
Application lifespan handler.
Manages startup and shutdown events for the FastAPI application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from ordo_api.models import Base
from ordo_api.seed import seed
from ordo_shared.config.logging import get_logger, setup_logging
from ordo_shared.config.settings import settings
from ordo_shared.infrastructure.db import engine, get_db_context

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    setup_logging()

    secret_errors = settings.validate_production_secrets()
    if secret_errors:
        for error in secret_errors:
            logger.error("Configuration error: %s", error)
        if settings.is_production:
            raise RuntimeError(
                f"Production configuration errors: {'; '.join(secret_errors)}. "
                "Server will not start with insecure configuration."
            )

    if settings.environment != "production" and settings.jwt_secret == "dev-secret-change-me-in-production":
        logger.warning("Running with insecure defaults (acceptable for development only)")

    logger.info("Starting Ordo API", port=settings.api_port, env=settings.environment)

    if settings.create_tables_on_startup:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified")

    if settings.seed_on_startup:
        with get_db_context() as db:
            seed(db)

    yield

    logger.info("Shutting down Ordo API")
    engine.dispose()
