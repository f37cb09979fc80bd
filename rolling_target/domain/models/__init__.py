"""
Domain Models Package
Export all domain entities
"""

from .entities import (
    # Enums
    DayStatus,
    SuggestionMethod,
    TrackingMode,

    # Entities
    DailyRecord,
    Forecast,
    SuggestionOffer,
    SummaryMetrics,
    TargetSettings,
    TodaySummary,
    Trade,
    TrackerResult,

    # Bounds
    CARRY_OVER_CAP_MULTIPLIER,
    DEFAULT_CARRY_OVER_CAP,
    DEFAULT_TARGET_PERCENT,
    MAX_TARGET_PERCENT,
    MIN_TARGET_PERCENT,
)

__all__ = [
    # Enums
    "DayStatus",
    "SuggestionMethod",
    "TrackingMode",

    # Entities
    "DailyRecord",
    "Forecast",
    "SuggestionOffer",
    "SummaryMetrics",
    "TargetSettings",
    "TodaySummary",
    "Trade",
    "TrackerResult",

    # Bounds
    "CARRY_OVER_CAP_MULTIPLIER",
    "DEFAULT_CARRY_OVER_CAP",
    "DEFAULT_TARGET_PERCENT",
    "MAX_TARGET_PERCENT",
    "MIN_TARGET_PERCENT",
]
