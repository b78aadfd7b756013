"""Investment product repository implementation."""

from typing import Any, Optional, Sequence

from sqlalchemy import delete, desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.logging import get_logger

from .models import InvestmentProduct, RiskLevel

logger = get_logger(__name__)


class ProductRepository:
    """Repository for catalog operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> Sequence[InvestmentProduct]:
        """All products, newest first."""
        result = await self.session.execute(
            select(InvestmentProduct).order_by(desc(InvestmentProduct.created_at))
        )
        return result.scalars().all()

    async def get_by_id(self, product_id: str) -> Optional[InvestmentProduct]:
        result = await self.session.execute(
            select(InvestmentProduct)
            .where(InvestmentProduct.id == product_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_by_risk(
        self, risk_levels: Sequence[RiskLevel], limit: int = 10
    ) -> Sequence[InvestmentProduct]:
        result = await self.session.execute(
            select(InvestmentProduct)
            .where(InvestmentProduct.risk_level.in_(list(risk_levels)))
            .order_by(desc(InvestmentProduct.annual_yield))
            .limit(limit)
        )
        return result.scalars().all()

    async def create(self, product: InvestmentProduct) -> InvestmentProduct:
        """Create a new product."""
        try:
            self.session.add(product)
            await self.session.commit()
            await self.session.refresh(product)
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create product", error=str(e))
            raise
        logger.info("Product created", product_id=product.id, name=product.name)
        return product

    async def apply_changes(
        self, product_id: str, assignments: dict[str, Any]
    ) -> Optional[InvestmentProduct]:
        """Apply column assignments and return the refreshed product."""
        await self.session.execute(
            update(InvestmentProduct)
            .where(InvestmentProduct.id == product_id)
            .values(**assignments)
        )
        await self.session.commit()
        return await self.get_by_id(product_id)

    async def delete(self, product_id: str) -> int:
        result = await self.session.execute(
            delete(InvestmentProduct).where(InvestmentProduct.id == product_id)
        )
        await self.session.commit()
        logger.info("Product deleted", product_id=product_id, rows=result.rowcount)
        return result.rowcount
