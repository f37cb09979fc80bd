"""
Unit Tests for the tracker pipeline and TargetTracker service

✅ recompute() end to end on plain trade lists
✅ Apply / Dismiss / new cycle against mock repositories
"""

import json
from dataclasses import asdict, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

import pytest

from rolling_target.domain.models import DayStatus, TargetSettings, Trade, TrackingMode
from rolling_target.domain.schemas.tracker import TrackerResponse
from rolling_target.domain.services.target_tracker import (
    SuggestionUnavailableError,
    TargetTracker,
    recompute,
)


# Mock Repositories for Testing
class MockTradeRepository:
    """Mock repository for testing"""

    def __init__(self, trades: List[Trade] = None):
        self.trades = trades or []

    async def list_closed(self, user_id: str) -> List[Trade]:
        return list(self.trades)


class MockSettingsRepository:
    """Mock repository for testing"""

    def __init__(self, settings: TargetSettings = None, initial_investment: float = 1000.0):
        self.settings = settings or TargetSettings()
        self.initial_investment = initial_investment
        self.writes: List[Dict[str, Any]] = []

    async def get(self, user_id: str) -> TargetSettings:
        return self.settings

    async def set(self, user_id: str, update: Dict[str, Any]) -> TargetSettings:
        self.writes.append(update)
        self.settings = replace(self.settings, **update).clamped()
        return self.settings

    async def get_initial_investment(self, user_id: str) -> float:
        return self.initial_investment


# Losing streak: 8 winners in 20 days -> hit rate 0.4
LOSING_PNLS = [-5.0, 4.0, -6.0, -3.0, 2.0, -4.0, -1.0, 3.0, -2.0, -7.0,
               1.0, -3.0, 5.0, -2.0, -1.0, 6.0, -4.0, 2.0, -3.0, 1.0]


@pytest.fixture
def now(start_day):
    return start_day + timedelta(days=30)


class TestRecompute:

    def test_not_enough_data(self):
        result = recompute([], 1000, TargetSettings())

        assert result.has_data is False
        assert result.today is None
        assert result.suggestion is None
        assert result.summary is None

    def test_no_capital(self, daily_trades):
        result = recompute(daily_trades([5.0]), 0, TargetSettings())
        assert result.has_data is False

    def test_rolling_example(self, daily_trades, start_day):
        settings = TargetSettings(mode=TrackingMode.ROLLING, target_percent=1.0, carry_over_cap=2.0)

        result = recompute(daily_trades([5.0]), 1000, settings, now=start_day + timedelta(days=1))

        day = result.daily_records[0]
        assert day.planned_capital == pytest.approx(1010)
        assert day.deviation == pytest.approx(-5)
        assert day.required_today == pytest.approx(5)
        assert result.today.is_ahead is False
        assert result.today.required_today == pytest.approx(15.1)
        assert result.summary.current_status == DayStatus.BEHIND
        assert result.suggestion is None

    def test_per_day_example(self, daily_trades, start_day):
        settings = TargetSettings(mode=TrackingMode.PER_DAY, target_percent=1.0)

        result = recompute(daily_trades([5.0]), 1000, settings, now=start_day)

        day = result.daily_records[0]
        assert day.required_today == pytest.approx(10)
        assert day.headroom == 0
        assert day.is_ahead is False

    def test_suggestion_surfaces(self, daily_trades, now):
        result = recompute(daily_trades(LOSING_PNLS), 1000, TargetSettings(), now=now)

        assert result.suggestion is not None
        assert 0.1 <= result.suggestion.suggested_percent <= 20
        assert result.suggestion.hit_rate == pytest.approx(0.4)

    def test_same_inputs_same_output(self, daily_trades, now):
        trades = daily_trades(LOSING_PNLS)
        settings = TargetSettings(mode=TrackingMode.ROLLING)

        assert recompute(trades, 1000, settings, now=now) == recompute(trades, 1000, settings, now=now)

    def test_weekend_setting_changes_plan(self, start_day):
        # Friday and the following Monday
        friday = start_day + timedelta(days=4)
        trades = [
            Trade(closed_at=friday, profit_loss=10.0),
            Trade(closed_at=friday + timedelta(days=3), profit_loss=10.0),
        ]

        rolled = recompute(trades, 1000, TargetSettings(rollover_weekends=True), now=friday + timedelta(days=3))
        calendar = recompute(trades, 1000, TargetSettings(rollover_weekends=False), now=friday + timedelta(days=3))

        assert rolled.daily_records[1].planned_capital == pytest.approx(1000 * 1.01 ** 2)
        assert calendar.daily_records[1].planned_capital == pytest.approx(1000 * 1.01 ** 4)

    def test_plan_beyond_float_range(self, start_day):
        # 20% a day over ~11 calendar years overflows a float
        later = start_day + timedelta(days=4000)
        trades = [Trade(closed_at=start_day, profit_loss=10.0), Trade(closed_at=later, profit_loss=10.0)]
        settings = TargetSettings(
            mode=TrackingMode.ROLLING, target_percent=20.0, carry_over_cap=40.0, rollover_weekends=False
        )

        result = recompute(trades, 1000, settings, now=later + timedelta(days=1))

        first, last = result.daily_records
        assert first.degenerate is False
        assert first.planned_capital == pytest.approx(1200)
        assert last.degenerate is True
        assert last.planned_capital == 0
        assert last.required_today == 0
        assert last.is_ahead is False
        assert result.today.degenerate is True
        assert result.today.required_today == 0
        assert result.summary.drift_percent == 0

        # renders as strict JSON
        body = TrackerResponse.from_domain(result).model_dump()
        json.dumps(body, default=str, allow_nan=False)


class TestTargetTracker:

    @pytest.mark.asyncio
    async def test_get_state(self, daily_trades, now):
        tracker = TargetTracker(MockTradeRepository(daily_trades([5.0, 7.0])), MockSettingsRepository())

        result = await tracker.get_state("u1", now=now)

        assert result.has_data is True
        assert len(result.daily_records) == 2

    @pytest.mark.asyncio
    async def test_apply_adopts_rounded_suggestion(self, daily_trades, now):
        settings_repo = MockSettingsRepository(TargetSettings(target_percent=5.0, carry_over_cap=10.0))
        tracker = TargetTracker(MockTradeRepository(daily_trades(LOSING_PNLS)), settings_repo)
        offered = (await tracker.get_state("u1", now=now)).suggestion

        stored = await tracker.apply("u1", now=now)

        assert stored.target_percent == round(offered.suggested_percent, 2)
        assert stored.last_suggestion_date == now
        assert stored.dismissed_suggestion is False

    @pytest.mark.asyncio
    async def test_apply_starts_cooldown(self, daily_trades, now):
        settings_repo = MockSettingsRepository()
        tracker = TargetTracker(MockTradeRepository(daily_trades(LOSING_PNLS)), settings_repo)

        await tracker.apply("u1", now=now)
        result = await tracker.get_state("u1", now=now + timedelta(days=3))

        assert result.suggestion is None

    @pytest.mark.asyncio
    async def test_apply_without_offer(self, daily_trades, now):
        tracker = TargetTracker(MockTradeRepository(daily_trades([5.0])), MockSettingsRepository())

        with pytest.raises(SuggestionUnavailableError, match="No target suggestion"):
            await tracker.apply("u1", now=now)

    @pytest.mark.asyncio
    async def test_dismiss_then_new_cycle(self, daily_trades, now):
        settings_repo = MockSettingsRepository()
        tracker = TargetTracker(MockTradeRepository(daily_trades(LOSING_PNLS)), settings_repo)

        dismissed = await tracker.dismiss("u1", now=now)
        assert dismissed.dismissed_suggestion is True
        assert (await tracker.get_state("u1", now=now + timedelta(days=1))).suggestion is None

        later = await tracker.get_state("u1", now=now + timedelta(days=8))

        assert later.suggestion is not None
        assert settings_repo.settings.dismissed_suggestion is False
        assert settings_repo.writes[-1] == {"dismissed_suggestion": False}

    @pytest.mark.asyncio
    async def test_state_read_does_not_write(self, daily_trades, now):
        settings_repo = MockSettingsRepository()
        tracker = TargetTracker(MockTradeRepository(daily_trades(LOSING_PNLS)), settings_repo)

        await tracker.get_state("u1", now=now)

        assert settings_repo.writes == []


def test_settings_clamped():
    settings = TargetSettings(target_percent=50.0, carry_over_cap=500.0).clamped()
    assert settings.target_percent == 20.0
    assert settings.carry_over_cap == 100.0

    settings = TargetSettings(target_percent=0.01, carry_over_cap=0.0).clamped()
    assert settings.target_percent == 0.1
    assert settings.carry_over_cap == 0.1

    assert asdict(TargetSettings().clamped()) == asdict(TargetSettings())


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
def test_settings_clamped_replaces_non_finite(bad):
    settings = TargetSettings(target_percent=bad, carry_over_cap=bad).clamped()

    assert settings.target_percent == 1.0
    assert settings.carry_over_cap == 2.0
