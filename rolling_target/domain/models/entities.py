"""
Domain Models - Entities
Pure domain objects with no infrastructure dependencies
"""

import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import List, Optional


# Valid ranges, enforced at the settings-write boundary
MIN_TARGET_PERCENT = 0.1
MAX_TARGET_PERCENT = 20.0
CARRY_OVER_CAP_MULTIPLIER = 5.0
DEFAULT_TARGET_PERCENT = 1.0
DEFAULT_CARRY_OVER_CAP = 2.0


class TrackingMode(str, Enum):
    """Requirement policy"""
    ROLLING = "rolling"
    PER_DAY = "per-day"


class SuggestionMethod(str, Enum):
    """How the adaptive target candidate is computed"""
    MEDIAN = "median"
    RISK_AWARE = "risk-aware"


class DayStatus(str, Enum):
    """Position relative to plan"""
    AHEAD = "ahead"
    BEHIND = "behind"


@dataclass(frozen=True)
class Trade:
    """Closed or open trade as read from the trade store - Immutable"""
    closed_at: Optional[datetime]
    profit_loss: Optional[float]
    id: Optional[int] = None
    symbol: Optional[str] = None


@dataclass(frozen=True)
class TargetSettings:
    """Rolling target preferences - Immutable snapshot"""
    mode: TrackingMode = TrackingMode.PER_DAY
    target_percent: float = DEFAULT_TARGET_PERCENT
    carry_over_cap: float = DEFAULT_CARRY_OVER_CAP
    suggestions_enabled: bool = True
    suggestion_method: SuggestionMethod = SuggestionMethod.MEDIAN
    dismissed_suggestion: bool = False
    last_suggestion_date: Optional[datetime] = None
    rollover_weekends: bool = True

    def clamped(self) -> "TargetSettings":
        """
        Return a copy with target and carry-over cap pulled into range.

        target_percent -> [0.1, 20]
        carry_over_cap -> [target_percent, target_percent * 5]

        NaN or infinite values fall back to the defaults first.
        """
        target = self.target_percent if math.isfinite(self.target_percent) else DEFAULT_TARGET_PERCENT
        cap = self.carry_over_cap if math.isfinite(self.carry_over_cap) else DEFAULT_CARRY_OVER_CAP
        target = min(max(target, MIN_TARGET_PERCENT), MAX_TARGET_PERCENT)
        cap = min(max(cap, target), target * CARRY_OVER_CAP_MULTIPLIER)
        return replace(self, target_percent=target, carry_over_cap=cap)

    @property
    def rate(self) -> float:
        """Daily growth rate as a fraction"""
        return self.target_percent / 100


@dataclass(frozen=True)
class DailyRecord:
    """One calendar day with at least one closed trade - Immutable"""
    date: date
    day_index: int
    start_capital: float
    pnl: float
    end_capital: float
    planned_capital: float = 0.0
    deviation: float = 0.0
    required_today: float = 0.0
    headroom: float = 0.0
    return_percent: float = 0.0
    is_ahead: bool = False
    plan_overflow: bool = False

    @property
    def degenerate(self) -> bool:
        """No positive capital base, or a plan beyond float range"""
        return self.start_capital <= 0 or self.plan_overflow

    @property
    def status(self) -> DayStatus:
        return DayStatus.AHEAD if self.is_ahead else DayStatus.BEHIND


@dataclass(frozen=True)
class Forecast:
    """Compounding extrapolation at fixed horizons"""
    capital: float
    target_percent: float
    days_30: float
    days_180: float
    days_365: float
    assumption: str


@dataclass(frozen=True)
class TodaySummary:
    """Forward-looking requirement for the current (in progress) day"""
    day_index: int
    required_today: float
    headroom: float
    is_ahead: bool
    actual_capital: float
    planned_capital: float
    deviation: float
    degenerate: bool
    forecast: Forecast


@dataclass(frozen=True)
class SuggestionOffer:
    """Revised daily target offered to the user"""
    suggested_percent: float
    method: SuggestionMethod
    hit_rate: float
    consistently_behind: bool


@dataclass(frozen=True)
class SummaryMetrics:
    """Aggregate progress against plan"""
    current_status: DayStatus
    drift_percent: float
    drift_amount: float
    success_rate: float
    avg_required_when_behind: float
    total_days: int


@dataclass(frozen=True)
class TrackerResult:
    """Output of one full recomputation"""
    daily_records: List[DailyRecord] = field(default_factory=list)
    today: Optional[TodaySummary] = None
    suggestion: Optional[SuggestionOffer] = None
    summary: Optional[SummaryMetrics] = None

    @property
    def has_data(self) -> bool:
        """False means 'not enough data' (no closed trades or no capital)"""
        return bool(self.daily_records)
