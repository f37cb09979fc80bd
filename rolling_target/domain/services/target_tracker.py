"""
TARGET TRACKER (ENGINE-6) - ORCHESTRATOR
Runs the full pipeline and owns the suggestion workflow

RESPONSIBILITIES:
- recompute(): trades + capital + settings -> TrackerResult (pure)
- Load inputs through repositories, persist Apply / Dismiss / new cycle

RULES:
❌ No incremental patching, everything recomputed per call
❌ No settings mutation in place
✅ Insufficient data is a result, not an error
"""

import logging
from dataclasses import asdict
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, Iterable, List, Optional, Protocol

from rolling_target.domain.models import TargetSettings, Trade, TrackerResult
from rolling_target.domain.services.daily_aggregator import aggregate_daily
from rolling_target.domain.services.requirement_engine import RequirementEngine
from rolling_target.domain.services.suggestion_engine import (
    AdaptiveSuggestionEngine,
    apply_suggestion,
    dismiss_suggestion,
)
from rolling_target.utils.time import now_utc, to_local_date

logger = logging.getLogger(__name__)


class SuggestionUnavailableError(Exception):
    """Apply requested while no suggestion is on offer"""


class TradeRepository(Protocol):
    """Protocol for trade data access - ASYNC"""

    async def list_closed(self, user_id: str) -> List[Trade]:
        """Get the user's live (not deleted) trades"""
        ...


class TargetSettingsRepository(Protocol):
    """Protocol for settings persistence - ASYNC"""

    async def get(self, user_id: str) -> TargetSettings:
        """Get settings, defaults when none stored"""
        ...

    async def set(self, user_id: str, update: Dict[str, Any]) -> TargetSettings:
        """Partial upsert, last write wins"""
        ...

    async def get_initial_investment(self, user_id: str) -> float:
        """Get the externally edited starting capital"""
        ...


def recompute(
    trades: Iterable[Trade],
    initial_capital: float,
    settings: TargetSettings,
    now: Optional[datetime] = None,
    tz: tzinfo = timezone.utc,
) -> TrackerResult:
    """
    Full pipeline from scratch.

    Args:
        trades: Trade snapshot
        initial_capital: Capital at the start of the plan
        settings: Validated settings snapshot
        now: Current time (cooldown and today's calendar date)
        tz: Zone in which calendar days are cut

    Returns:
        TrackerResult; has_data is False when there is nothing to track
    """
    now = now or now_utc()

    ledger = aggregate_daily(trades, initial_capital, tz)
    if not ledger:
        return TrackerResult()

    requirement_engine = RequirementEngine(settings)
    records = requirement_engine.evaluate(ledger, initial_capital)

    return TrackerResult(
        daily_records=records,
        today=requirement_engine.today(records, initial_capital, to_local_date(now, tz)),
        suggestion=AdaptiveSuggestionEngine(settings).evaluate(records, now),
        summary=requirement_engine.summarize(records),
    )


def _settings_update(before: TargetSettings, after: TargetSettings) -> Dict[str, Any]:
    """Fields that differ between two settings values"""
    old, new = asdict(before), asdict(after)
    return {key: value for key, value in new.items() if old[key] != value}


class TargetTracker:
    """
    Target Tracker
    Repository-backed entry point used by the API
    """

    def __init__(
        self,
        trade_repo: TradeRepository,
        settings_repo: TargetSettingsRepository,
        tz: tzinfo = timezone.utc,
    ):
        """Initialize with repository dependencies"""
        self.trade_repo = trade_repo
        self.settings_repo = settings_repo
        self.tz = tz

    async def _load(self, user_id: str, now: datetime) -> tuple[TargetSettings, TrackerResult]:
        settings = await self.settings_repo.get(user_id)

        renewed = AdaptiveSuggestionEngine(settings).begin_new_cycle(now)
        if renewed is not settings:
            logger.info(f"Suggestion cooldown over for user={user_id}, clearing dismissal")
            settings = await self.settings_repo.set(user_id, _settings_update(settings, renewed))

        trades = await self.trade_repo.list_closed(user_id)
        initial_capital = await self.settings_repo.get_initial_investment(user_id)
        result = recompute(trades, initial_capital, settings, now=now, tz=self.tz)

        logger.debug(
            f"Recomputed tracker user={user_id} days={len(result.daily_records)} "
            f"mode={settings.mode.value} target={settings.target_percent}% "
            f"suggestion={result.suggestion.suggested_percent if result.suggestion else None}"
        )
        return settings, result

    async def get_state(self, user_id: str, now: Optional[datetime] = None) -> TrackerResult:
        """Current tracker output for a user"""
        _, result = await self._load(user_id, now or now_utc())
        return result

    async def apply(self, user_id: str, now: Optional[datetime] = None) -> TargetSettings:
        """
        Adopt the suggestion currently on offer.

        Raises:
            SuggestionUnavailableError: If no suggestion is surfaced right now
        """
        now = now or now_utc()
        settings, result = await self._load(user_id, now)
        if result.suggestion is None:
            raise SuggestionUnavailableError("No target suggestion is currently available")

        updated = apply_suggestion(settings, result.suggestion.suggested_percent, now)
        logger.info(
            f"Applied suggestion user={user_id}: "
            f"{settings.target_percent}% -> {updated.target_percent}%"
        )
        return await self.settings_repo.set(user_id, _settings_update(settings, updated))

    async def dismiss(self, user_id: str, now: Optional[datetime] = None) -> TargetSettings:
        """Dismiss suggestions and start the cooldown"""
        now = now or now_utc()
        settings = await self.settings_repo.get(user_id)
        updated = dismiss_suggestion(settings, now)
        logger.info(f"Dismissed suggestion user={user_id}")
        return await self.settings_repo.set(user_id, _settings_update(settings, updated))
