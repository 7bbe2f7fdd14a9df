"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .config import settings
from .database import engine
from .logging_config import configure_logging, get_logger
from .routers import expansion_router, health_router

configure_logging(
    log_level=settings.log_level,
    json_logs=settings.json_logs,
    library_log_level=settings.library_log_level,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    logger.info("app.starting", name=settings.app_name, version=settings.app_version)

    # The service starts without a database; /health reports degraded
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("app.database.connected")
    except SQLAlchemyError as e:
        logger.warning("app.database.unavailable", error=str(e))

    yield

    logger.info("app.stopping")
    engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# Health check router (no prefix)
app.include_router(health_router)

# Topic expansion API
app.include_router(expansion_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": f"{settings.app_name} API"}
