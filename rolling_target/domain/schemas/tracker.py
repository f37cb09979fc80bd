from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from rolling_target.domain.models import (
    MAX_TARGET_PERCENT,
    MIN_TARGET_PERCENT,
    DailyRecord,
    SuggestionMethod,
    TargetSettings,
    TrackerResult,
    TrackingMode,
)

RECENT_DAYS = 10


class TargetSettingsResponse(BaseModel):
    mode: TrackingMode
    target_percent: float
    carry_over_cap: float
    suggestions_enabled: bool
    suggestion_method: SuggestionMethod
    dismissed_suggestion: bool
    last_suggestion_date: Optional[datetime] = None
    rollover_weekends: bool

    @classmethod
    def from_domain(cls, settings: TargetSettings) -> "TargetSettingsResponse":
        return cls(
            mode=settings.mode,
            target_percent=settings.target_percent,
            carry_over_cap=settings.carry_over_cap,
            suggestions_enabled=settings.suggestions_enabled,
            suggestion_method=settings.suggestion_method,
            dismissed_suggestion=settings.dismissed_suggestion,
            last_suggestion_date=settings.last_suggestion_date,
            rollover_weekends=settings.rollover_weekends,
        )


class TargetSettingsUpdate(BaseModel):
    """Partial update. Out-of-range or non-finite numbers are clamped on write, not rejected."""
    mode: Optional[TrackingMode] = None
    target_percent: Optional[float] = Field(
        None, description=f"Daily growth target, clamped to [{MIN_TARGET_PERCENT}, {MAX_TARGET_PERCENT}]"
    )
    carry_over_cap: Optional[float] = Field(
        None, description="Max catch-up as % of capital, clamped to [target, target x 5]"
    )
    suggestions_enabled: Optional[bool] = None
    suggestion_method: Optional[SuggestionMethod] = None
    rollover_weekends: Optional[bool] = None


class InitialInvestmentRequest(BaseModel):
    """Range is checked by the route so NaN is never echoed back in an error body"""
    initial_investment: float = Field(..., description="Starting capital for the plan, finite and >= 0")


class DailyRecordResponse(BaseModel):
    date: date
    day_index: int
    start_capital: float
    pnl: float
    end_capital: float
    planned_capital: float
    deviation: float
    required_today: float
    headroom: float
    return_percent: float
    status: str
    degenerate: bool

    @classmethod
    def from_domain(cls, record: DailyRecord) -> "DailyRecordResponse":
        return cls(
            date=record.date,
            day_index=record.day_index,
            start_capital=record.start_capital,
            pnl=record.pnl,
            end_capital=record.end_capital,
            planned_capital=record.planned_capital,
            deviation=record.deviation,
            required_today=record.required_today,
            headroom=record.headroom,
            return_percent=record.return_percent,
            status=record.status.value,
            degenerate=record.degenerate,
        )


class ForecastResponse(BaseModel):
    days_30: float
    days_180: float
    days_365: float
    assumption: str


class TodaySummaryResponse(BaseModel):
    day_index: int
    required_today: float
    headroom: float
    is_ahead: bool
    actual_capital: float
    planned_capital: float
    deviation: float
    degenerate: bool
    forecast: ForecastResponse


class SuggestionResponse(BaseModel):
    suggested_percent: float
    method: SuggestionMethod
    hit_rate: float
    consistently_behind: bool


class SummaryMetricsResponse(BaseModel):
    current_status: str
    drift_percent: float
    drift_amount: float
    success_rate: float
    avg_required_when_behind: float
    total_days: int


class ChartPoint(BaseModel):
    date: date
    actual: float
    planned: float
    required: float


class TrackerResponse(BaseModel):
    has_data: bool
    daily_records: List[DailyRecordResponse] = []
    recent_days: List[DailyRecordResponse] = []
    chart: List[ChartPoint] = []
    today: Optional[TodaySummaryResponse] = None
    suggestion: Optional[SuggestionResponse] = None
    summary: Optional[SummaryMetricsResponse] = None

    @classmethod
    def from_domain(cls, result: TrackerResult) -> "TrackerResponse":
        records = [DailyRecordResponse.from_domain(r) for r in result.daily_records]

        today = None
        if result.today is not None:
            t = result.today
            today = TodaySummaryResponse(
                day_index=t.day_index,
                required_today=t.required_today,
                headroom=t.headroom,
                is_ahead=t.is_ahead,
                actual_capital=t.actual_capital,
                planned_capital=t.planned_capital,
                deviation=t.deviation,
                degenerate=t.degenerate,
                forecast=ForecastResponse(
                    days_30=t.forecast.days_30,
                    days_180=t.forecast.days_180,
                    days_365=t.forecast.days_365,
                    assumption=t.forecast.assumption,
                ),
            )

        suggestion = None
        if result.suggestion is not None:
            s = result.suggestion
            suggestion = SuggestionResponse(
                suggested_percent=round(s.suggested_percent, 2),
                method=s.method,
                hit_rate=s.hit_rate,
                consistently_behind=s.consistently_behind,
            )

        summary = None
        if result.summary is not None:
            m = result.summary
            summary = SummaryMetricsResponse(
                current_status=m.current_status.value,
                drift_percent=m.drift_percent,
                drift_amount=m.drift_amount,
                success_rate=m.success_rate,
                avg_required_when_behind=m.avg_required_when_behind,
                total_days=m.total_days,
            )

        return cls(
            has_data=result.has_data,
            daily_records=records,
            recent_days=list(reversed(records[-RECENT_DAYS:])),
            chart=[
                ChartPoint(
                    date=r.date,
                    actual=r.end_capital,
                    planned=r.planned_capital,
                    required=r.required_today,
                )
                for r in result.daily_records
            ],
            today=today,
            suggestion=suggestion,
            summary=summary,
        )
