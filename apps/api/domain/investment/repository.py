"""Investment repository implementation."""

from typing import Sequence

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.logging import get_logger

from .models import Investment

logger = get_logger(__name__)


class InvestmentRepository:
    """Repository for investment operations. Investments are insert-only."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, investment: Investment) -> Investment:
        """Record a new investment."""
        try:
            self.session.add(investment)
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create investment", error=str(e))
            raise
        logger.info(
            "Investment created",
            investment_id=investment.id,
            user_id=investment.user_id,
            product_id=investment.product_id,
            amount=investment.amount,
        )
        return investment

    async def list_for_user(self, user_id: str) -> Sequence[Investment]:
        """A user's investments joined with their products, newest first."""
        result = await self.session.execute(
            select(Investment)
            .where(Investment.user_id == user_id)
            .order_by(desc(Investment.invested_at))
        )
        return result.unique().scalars().all()
