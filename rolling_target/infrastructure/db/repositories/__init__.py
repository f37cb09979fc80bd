from .settings_repository import TargetSettingsRepository
from .trade_repository import TradeRepository

__all__ = ["TargetSettingsRepository", "TradeRepository"]
