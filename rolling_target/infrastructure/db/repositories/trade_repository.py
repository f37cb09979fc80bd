"""
Trade Repository
Read access to the trade log for target tracking
"""

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rolling_target.domain.models import Trade
from rolling_target.infrastructure.db.models import TradeModel


class TradeRepository:
    """Repository for Trade data access"""

    def __init__(self, session: AsyncSession):
        """Initialize with database session"""
        self.session = session

    async def list_closed(self, user_id: str) -> List[Trade]:
        """
        Live trades for a user, oldest close first

        Soft-deleted rows (deleted_at set) are skipped. Open trades are
        included; the aggregator drops them.
        """
        result = await self.session.execute(
            select(TradeModel)
            .where(TradeModel.user_id == user_id, TradeModel.deleted_at.is_(None))
            .order_by(TradeModel.closed_at.asc(), TradeModel.id.asc())
        )
        return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _to_domain(model: TradeModel) -> Trade:
        """Convert database model to domain entity"""
        return Trade(
            id=model.id,
            symbol=model.symbol,
            closed_at=model.closed_at,
            profit_loss=float(model.profit_loss) if model.profit_loss is not None else None,
        )
