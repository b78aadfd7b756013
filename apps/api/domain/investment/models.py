"""Investment domain models."""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Index, String
from sqlalchemy.orm import relationship

from core.database import Base
from domain.product.models import InvestmentProduct


class InvestmentStatus(str, enum.Enum):
    """Lifecycle status of an investment."""

    active = "active"
    matured = "matured"
    cancelled = "cancelled"


class Investment(Base):
    """A user's position in an investment product."""

    __tablename__ = "investments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    product_id = Column(String(36), ForeignKey("investment_products.id"), nullable=False)

    amount = Column(Float, nullable=False)
    # Principal plus one year of simple yield, fixed at investment time
    expected_return = Column(Float, nullable=False)

    status = Column(
        Enum(InvestmentStatus, native_enum=False),
        default=InvestmentStatus.active,
        nullable=False,
    )
    invested_at = Column(DateTime(timezone=True), default=datetime.utcnow)
    maturity_date = Column(DateTime(timezone=True), nullable=True)

    product = relationship(InvestmentProduct, lazy="joined", innerjoin=True)

    __table_args__ = (Index("ix_investments_user_invested", "user_id", "invested_at"),)

    def __repr__(self):
        return f"<Investment(id={self.id}, user_id={self.user_id}, amount={self.amount})>"
