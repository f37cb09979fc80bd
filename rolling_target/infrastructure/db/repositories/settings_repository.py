"""
Target Settings Repository
Upsert-style access to per-user rolling target settings

Every write is clamped to the valid target / carry-over cap ranges.
"""

from dataclasses import replace
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rolling_target.domain.models import SuggestionMethod, TargetSettings, TrackingMode
from rolling_target.infrastructure.db.models import UserSettingsModel

# domain field -> column
_COLUMNS = {
    "mode": "rolling_target_mode",
    "target_percent": "rolling_target_percent",
    "carry_over_cap": "rolling_target_carryover_cap",
    "suggestions_enabled": "rolling_target_suggestions_enabled",
    "suggestion_method": "rolling_target_suggestion_method",
    "dismissed_suggestion": "rolling_target_dismissed_suggestion",
    "last_suggestion_date": "rolling_target_last_suggestion_date",
    "rollover_weekends": "rolling_target_rollover_weekends",
}


class TargetSettingsRepository:
    """Repository for TargetSettings data access"""

    def __init__(self, session: AsyncSession):
        """Initialize with database session"""
        self.session = session

    async def _get_model(self, user_id: str) -> Optional[UserSettingsModel]:
        result = await self.session.execute(
            select(UserSettingsModel).where(UserSettingsModel.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def _get_or_create_model(self, user_id: str) -> UserSettingsModel:
        model = await self._get_model(user_id)
        if model is None:
            model = UserSettingsModel(user_id=user_id)
            self._write(model, TargetSettings())
            model.initial_investment = 0
            self.session.add(model)
        return model

    async def get(self, user_id: str) -> TargetSettings:
        """
        Get settings for a user

        Returns:
            Stored TargetSettings, or defaults when the user has no row
        """
        model = await self._get_model(user_id)
        return self._to_domain(model) if model else TargetSettings()

    async def set(self, user_id: str, update: Dict[str, Any]) -> TargetSettings:
        """
        Partial update (last write wins)

        Args:
            user_id: Owner of the settings
            update: Domain field names -> new values

        Returns:
            Stored TargetSettings after clamping
        """
        unknown = set(update) - set(_COLUMNS)
        if unknown:
            raise ValueError(f"Unknown settings fields: {sorted(unknown)}")

        model = await self._get_or_create_model(user_id)
        current = self._to_domain(model)

        values = dict(update)
        if "mode" in values:
            values["mode"] = TrackingMode(values["mode"])
        if "suggestion_method" in values:
            values["suggestion_method"] = SuggestionMethod(values["suggestion_method"])

        merged = replace(current, **values).clamped()
        self._write(model, merged)
        await self.session.flush()

        return merged

    async def get_initial_investment(self, user_id: str) -> float:
        """Starting capital, 0 when never set"""
        model = await self._get_model(user_id)
        if model is None or model.initial_investment is None:
            return 0.0
        return float(model.initial_investment)

    async def set_initial_investment(self, user_id: str, amount: float) -> float:
        """Store the starting capital"""
        model = await self._get_or_create_model(user_id)
        model.initial_investment = amount
        await self.session.flush()
        return float(amount)

    @staticmethod
    def _write(model: UserSettingsModel, settings: TargetSettings) -> None:
        for field_name, column in _COLUMNS.items():
            value = getattr(settings, field_name)
            if isinstance(value, (TrackingMode, SuggestionMethod)):
                value = value.value
            setattr(model, column, value)

    @staticmethod
    def _to_domain(model: UserSettingsModel) -> TargetSettings:
        """Convert database model to domain entity (clamped, rows may predate the bounds)"""
        return TargetSettings(
            mode=TrackingMode(model.rolling_target_mode or TrackingMode.PER_DAY.value),
            target_percent=model.rolling_target_percent or 1.0,
            carry_over_cap=model.rolling_target_carryover_cap or 2.0,
            suggestions_enabled=bool(model.rolling_target_suggestions_enabled),
            suggestion_method=SuggestionMethod(
                model.rolling_target_suggestion_method or SuggestionMethod.MEDIAN.value
            ),
            dismissed_suggestion=bool(model.rolling_target_dismissed_suggestion),
            last_suggestion_date=model.rolling_target_last_suggestion_date,
            rollover_weekends=bool(model.rolling_target_rollover_weekends),
        ).clamped()
