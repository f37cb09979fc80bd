"""
ADAPTIVE SUGGESTION ENGINE (ENGINE-4)
Proposes a more realistic daily target from recent results

RESPONSIBILITIES:
- Compute a candidate target from the trailing 20 days
- Decide whether the current target is failing (trigger)
- Respect dismissals and the 7-day cooldown (suppression)
- Produce the settings transitions for Apply / Dismiss / new cycle

RULES:
❌ Never writes settings itself, returns new values
❌ No suggestion below 20 days of history
✅ Candidate clamped to the target_percent range
"""

import math
from dataclasses import replace
from datetime import datetime
from typing import List, Optional, Sequence

import numpy as np

from rolling_target.domain.models import (
    MAX_TARGET_PERCENT,
    MIN_TARGET_PERCENT,
    DailyRecord,
    SuggestionMethod,
    SuggestionOffer,
    TargetSettings,
)
from rolling_target.utils.time import days_between


class AdaptiveSuggestionEngine:
    """Adaptive target suggestion heuristics"""

    WINDOW_DAYS = 20
    PERCENTILE = 0.6
    RISK_PENALTY = 0.5
    MIN_HIT_RATE = 0.5
    BEHIND_STREAK_DAYS = 5
    BEHIND_TOLERANCE = 0.05
    COOLDOWN_DAYS = 7

    def __init__(self, settings: TargetSettings):
        self.settings = settings

    def window(self, records: Sequence[DailyRecord]) -> List[DailyRecord]:
        return list(records[-self.WINDOW_DAYS:])

    def candidate(self, window: Sequence[DailyRecord]) -> Optional[float]:
        """
        Candidate target percent, clamped to [0.1, 20].

        median:     60th percentile daily return (index floor(0.6 * n))
        risk-aware: mean - 0.5 * stdev of daily returns

        Degenerate days carry no return and are left out.
        """
        returns = np.array([r.return_percent / 100 for r in window if not r.degenerate], dtype=float)
        if returns.size == 0:
            return None

        if self.settings.suggestion_method == SuggestionMethod.MEDIAN:
            ordered = np.sort(returns)
            suggestion = float(ordered[math.floor(ordered.size * self.PERCENTILE)]) * 100
        else:
            # population stdev
            suggestion = float(returns.mean() - self.RISK_PENALTY * returns.std()) * 100

        return max(MIN_TARGET_PERCENT, min(MAX_TARGET_PERCENT, suggestion))

    def hit_rate(self, window: Sequence[DailyRecord]) -> float:
        """Fraction of days in the window with positive P&L"""
        if not window:
            return 0.0
        return sum(1 for r in window if r.pnl > 0) / len(window)

    def consistently_behind(self, records: Sequence[DailyRecord]) -> bool:
        """Every one of the last 5 days more than 5% under plan"""
        last = records[-self.BEHIND_STREAK_DAYS:]
        if len(last) < self.BEHIND_STREAK_DAYS:
            return False
        return all(r.deviation < -self.BEHIND_TOLERANCE * r.planned_capital for r in last)

    def in_cooldown(self, now: datetime) -> bool:
        last = self.settings.last_suggestion_date
        if last is None:
            return False
        return days_between(last, now) < self.COOLDOWN_DAYS

    def is_suppressed(self, now: datetime) -> bool:
        return self.settings.dismissed_suggestion or self.in_cooldown(now)

    def evaluate(self, records: Sequence[DailyRecord], now: datetime) -> Optional[SuggestionOffer]:
        """
        Suggestion to surface right now, if any.

        Args:
            records: Fully evaluated ledger (planned/deviation filled)
            now: Current time, for the cooldown

        Returns:
            SuggestionOffer or None
        """
        if not self.settings.suggestions_enabled or len(records) < self.WINDOW_DAYS:
            return None

        window = self.window(records)
        suggested = self.candidate(window)
        if suggested is None:
            return None

        hit_rate = self.hit_rate(window)
        behind = self.consistently_behind(records)
        if not (hit_rate < self.MIN_HIT_RATE or behind):
            return None

        if self.is_suppressed(now):
            return None

        return SuggestionOffer(
            suggested_percent=suggested,
            method=self.settings.suggestion_method,
            hit_rate=hit_rate,
            consistently_behind=behind,
        )

    def begin_new_cycle(self, now: datetime) -> TargetSettings:
        """
        Clear a dismissal once its cooldown has run out.

        Returns the same settings object when nothing changes.
        """
        if self.settings.dismissed_suggestion and not self.in_cooldown(now):
            return replace(self.settings, dismissed_suggestion=False)
        return self.settings


def apply_suggestion(settings: TargetSettings, suggested_percent: float, now: datetime) -> TargetSettings:
    """Adopt the suggested target and start the cooldown"""
    return replace(
        settings,
        target_percent=round(suggested_percent, 2),
        last_suggestion_date=now,
        dismissed_suggestion=False,
    )


def dismiss_suggestion(settings: TargetSettings, now: datetime) -> TargetSettings:
    """Hide the suggestion; dismissal also starts the cooldown"""
    return replace(settings, dismissed_suggestion=True, last_suggestion_date=now)
