"""
Rolling Target API Routes
Daily plan, today's requirement, adaptive suggestions

Every GET recomputes from the stored trades and settings; nothing derived is
persisted. Only Apply / Dismiss and explicit settings edits write.
"""

import logging
import math

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from rolling_target.config import settings
from rolling_target.domain.schemas.tracker import (
    InitialInvestmentRequest,
    TargetSettingsResponse,
    TargetSettingsUpdate,
    TrackerResponse,
)
from rolling_target.domain.services.target_tracker import SuggestionUnavailableError, TargetTracker
from rolling_target.infrastructure.db.database import get_db
from rolling_target.infrastructure.db.repositories import TargetSettingsRepository, TradeRepository
from rolling_target.utils.time import resolve_timezone

logger = logging.getLogger(__name__)

router = APIRouter()


def build_tracker(db: AsyncSession) -> TargetTracker:
    return TargetTracker(
        trade_repo=TradeRepository(db),
        settings_repo=TargetSettingsRepository(db),
        tz=resolve_timezone(settings.TIMEZONE),
    )


# -------------------------------------------------------------------
# Routes
# -------------------------------------------------------------------

@router.get("/{user_id}", response_model=TrackerResponse)
async def get_tracker(user_id: str, db: AsyncSession = Depends(get_db)):
    """
    Full tracker state: daily ledger, today's requirement, suggestion, summary.

    has_data=false means there are no closed trades or no initial investment yet.
    """
    result = await build_tracker(db).get_state(user_id)
    return TrackerResponse.from_domain(result)


@router.get("/{user_id}/settings", response_model=TargetSettingsResponse)
async def get_settings(user_id: str, db: AsyncSession = Depends(get_db)):
    repo = TargetSettingsRepository(db)
    return TargetSettingsResponse.from_domain(await repo.get(user_id))


@router.patch("/{user_id}/settings", response_model=TargetSettingsResponse)
async def update_settings(
    user_id: str,
    request: TargetSettingsUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Partial settings update; target and carry-over cap are clamped to range"""
    update = request.model_dump(exclude_none=True)
    if not update:
        raise HTTPException(status_code=400, detail="No settings fields provided")

    repo = TargetSettingsRepository(db)
    stored = await repo.set(user_id, update)
    logger.info(f"Updated rolling target settings user={user_id} fields={sorted(update)}")
    return TargetSettingsResponse.from_domain(stored)


@router.put("/{user_id}/initial-investment")
async def set_initial_investment(
    user_id: str,
    request: InitialInvestmentRequest,
    db: AsyncSession = Depends(get_db)
):
    """Starting capital; negative or non-finite amounts are rejected"""
    if not math.isfinite(request.initial_investment) or request.initial_investment < 0:
        raise HTTPException(
            status_code=422,
            detail="initial_investment must be a finite amount >= 0"
        )

    repo = TargetSettingsRepository(db)
    amount = await repo.set_initial_investment(user_id, request.initial_investment)
    return {"user_id": user_id, "initial_investment": amount}


@router.post("/{user_id}/suggestion/apply", response_model=TargetSettingsResponse)
async def apply_suggestion(user_id: str, db: AsyncSession = Depends(get_db)):
    """Adopt the currently offered target (rounded to 2 decimals)"""
    try:
        stored = await build_tracker(db).apply(user_id)
    except SuggestionUnavailableError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return TargetSettingsResponse.from_domain(stored)


@router.post("/{user_id}/suggestion/dismiss", response_model=TargetSettingsResponse)
async def dismiss_suggestion(user_id: str, db: AsyncSession = Depends(get_db)):
    """Hide suggestions until the 7-day cooldown has passed"""
    stored = await build_tracker(db).dismiss(user_id)
    return TargetSettingsResponse.from_domain(stored)
