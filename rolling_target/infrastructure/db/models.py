"""
Database Models (SQLAlchemy ORM)
Trade log and per-user rolling target settings
"""

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, Numeric, String, Index

from rolling_target.infrastructure.db.database import Base
from rolling_target.utils.time import now_utc


class TradeModel(Base):
    """Trade log (soft delete via deleted_at)"""
    __tablename__ = "trade"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    symbol = Column(String(32), nullable=True)
    profit_loss = Column(Numeric(14, 2), nullable=True)
    closed_at = Column(DateTime(timezone=True), nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)

    __table_args__ = (
        Index("ix_trade_user_closed_at", "user_id", "closed_at"),
    )


class UserSettingsModel(Base):
    """Per-user preferences relevant to target tracking"""
    __tablename__ = "user_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, unique=True, index=True)
    initial_investment = Column(Numeric(14, 2), nullable=False, default=0)

    rolling_target_mode = Column(String(16), nullable=False, default="per-day")
    rolling_target_percent = Column(Float, nullable=False, default=1.0)
    rolling_target_carryover_cap = Column(Float, nullable=False, default=2.0)
    rolling_target_suggestions_enabled = Column(Boolean, nullable=False, default=True)
    rolling_target_suggestion_method = Column(String(16), nullable=False, default="median")
    rolling_target_dismissed_suggestion = Column(Boolean, nullable=False, default=False)
    rolling_target_last_suggestion_date = Column(DateTime(timezone=True), nullable=True)
    rolling_target_rollover_weekends = Column(Boolean, nullable=False, default=True)

    updated_at = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
