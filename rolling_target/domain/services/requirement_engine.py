"""
REQUIREMENT ENGINE (ENGINE-3)
Profit still required to stay on the compounding plan

RESPONSIBILITIES:
- Fill planned capital, deviation, required and headroom per day
- Classify each day ahead/behind
- Compute the forward-looking requirement for today
- Aggregate summary metrics

POLICIES (settings.mode):
- rolling: shortfall vs plan carries over, capped at carry_over_cap % of capital
- per-day: fixed target % of the day's starting capital, no memory

RULES:
❌ No I/O
❌ No exceptions for data conditions
✅ Non-positive capital -> zero requirement, flagged degenerate
✅ Plan beyond float range -> same, plan and deviation reported as 0
"""

import math
from dataclasses import replace
from datetime import date
from typing import List, Optional, Sequence

from rolling_target.domain.models import (
    DailyRecord,
    SummaryMetrics,
    TargetSettings,
    TodaySummary,
    TrackingMode,
)
from rolling_target.domain.services.forecast import project
from rolling_target.domain.services.planned_path import day_indices, next_day_index, planned_capital


class RequirementEngine:
    """
    Requirement Engine
    Applies one policy to a whole ledger
    """

    def __init__(self, settings: TargetSettings):
        """Initialize with a validated settings snapshot"""
        self.settings = settings

    @property
    def is_rolling(self) -> bool:
        return self.settings.mode == TrackingMode.ROLLING

    def _cap_amount(self, capital: float) -> float:
        return (self.settings.carry_over_cap / 100) * capital

    def evaluate_day(self, record: DailyRecord, initial_capital: float) -> DailyRecord:
        """
        Fill plan/requirement fields of one closed day.

        Args:
            record: Ledger record with day_index set
            initial_capital: Capital at the start of the plan

        Returns:
            New DailyRecord
        """
        planned = planned_capital(initial_capital, self.settings.target_percent, record.day_index)
        if not math.isfinite(planned):
            record = replace(record, plan_overflow=True)
            planned = 0.0
            deviation = 0.0
        else:
            deviation = record.end_capital - planned

        if record.degenerate:
            return replace(
                record,
                planned_capital=planned,
                deviation=deviation,
                required_today=0.0,
                headroom=0.0,
                return_percent=0.0,
                is_ahead=False,
            )

        if self.is_rolling:
            shortfall = planned - record.end_capital
            if shortfall <= 0:
                required = 0.0
                headroom = -shortfall
            else:
                required = min(shortfall, self._cap_amount(record.start_capital))
                headroom = 0.0
            is_ahead = deviation >= 0
        else:
            required = self.settings.rate * record.start_capital
            headroom = max(0.0, record.pnl - required)
            is_ahead = record.pnl >= required

        return replace(
            record,
            planned_capital=planned,
            deviation=deviation,
            required_today=required,
            headroom=headroom,
            is_ahead=is_ahead,
        )

    def evaluate(self, records: Sequence[DailyRecord], initial_capital: float) -> List[DailyRecord]:
        """Assign plan indices and evaluate every day in order"""
        indices = day_indices([r.date for r in records], self.settings.rollover_weekends)
        return [
            self.evaluate_day(replace(record, day_index=index), initial_capital)
            for record, index in zip(records, indices)
        ]

    def today(
        self,
        records: Sequence[DailyRecord],
        initial_capital: float,
        as_of: date,
    ) -> Optional[TodaySummary]:
        """
        Requirement for the day in progress.

        Uses the next plan index against the current actual capital
        (end capital of the last closed day). Ahead means nothing more is
        required today, in both modes.

        Returns:
            TodaySummary, or None when there is no ledger yet
        """
        if not records:
            return None

        last = records[-1]
        actual = last.end_capital
        target = self.settings.target_percent
        index = next_day_index(last.day_index, last.date, as_of, self.settings.rollover_weekends)

        planned_now = planned_capital(initial_capital, target, last.day_index)
        planned_next = planned_capital(initial_capital, target, index)
        overflow = not (math.isfinite(planned_now) and math.isfinite(planned_next))
        if overflow:
            planned_now = 0.0
        degenerate = actual <= 0 or overflow
        required = 0.0
        headroom = 0.0

        if not degenerate:
            if self.is_rolling:
                needed = planned_next - actual
                if needed <= 0:
                    headroom = -needed
                else:
                    required = min(needed, self._cap_amount(actual))
            else:
                required = self.settings.rate * actual

        return TodaySummary(
            day_index=index,
            required_today=required,
            headroom=headroom,
            is_ahead=not degenerate and required == 0,
            actual_capital=actual,
            planned_capital=planned_now,
            deviation=0.0 if overflow else actual - planned_now,
            degenerate=degenerate,
            forecast=project(actual, target),
        )

    @staticmethod
    def summarize(records: Sequence[DailyRecord]) -> Optional[SummaryMetrics]:
        """Success rate, drift and catch-up averages over the ledger"""
        if not records:
            return None

        behind = [r for r in records if not r.is_ahead]
        days_ahead = len(records) - len(behind)
        required_when_behind = sum(r.required_today for r in behind if r.required_today > 0)

        last = records[-1]
        drift_percent = (last.deviation / last.planned_capital) * 100 if last.planned_capital > 0 else 0.0

        return SummaryMetrics(
            current_status=last.status,
            drift_percent=drift_percent,
            drift_amount=abs(last.deviation),
            success_rate=(days_ahead / len(records)) * 100,
            avg_required_when_behind=required_when_behind / max(1, len(behind)),
            total_days=len(records),
        )


__all__ = ["RequirementEngine"]
