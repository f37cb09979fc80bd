"""
Liveness and readiness probes
Ready means the settings table answers a query, not just that the server is up
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from rolling_target.infrastructure.db.database import get_db
from rolling_target.infrastructure.db.models import UserSettingsModel

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/ready")
async def ready(db: AsyncSession = Depends(get_db)):
    try:
        await db.execute(select(UserSettingsModel.id).limit(1))
        db_connected = True
    except SQLAlchemyError as e:
        logger.warning(f"Readiness check failed: {e}")
        db_connected = False

    return {
        "status": "ready" if db_connected else "not_ready",
        "db_connected": db_connected,
    }
