"""
FastAPI Main Application
Rolling target tracking API
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator
import logging

from fastapi import FastAPI

from rolling_target.api.routes import health, target
from rolling_target.config import settings
from rolling_target.core.logging import setup_logging
from rolling_target.infrastructure.db.database import close_db, init_db

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager
    Handles database startup and shutdown
    """
    logger.info("Starting Rolling Target API")
    await init_db()
    logger.info(f"Database ready (auto create tables: {settings.AUTO_CREATE_TABLES})")
    logger.info(f"Calendar days cut in timezone {settings.TIMEZONE}")

    yield

    logger.info("Shutting down Rolling Target API")
    await close_db()


app = FastAPI(
    title="Rolling Target Tracker",
    description="Compounding daily target plan, today's requirement and adaptive target suggestions",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(health.router, tags=["Health"])
app.include_router(target.router, prefix="/api/v1/rolling-target", tags=["Rolling Target"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rolling_target.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
