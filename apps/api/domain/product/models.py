"""Investment product domain models."""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, Float, Index, Integer, String, Text

from core.database import Base


class RiskLevel(str, enum.Enum):
    """Risk tag shared by products and user risk appetite."""

    low = "low"
    moderate = "moderate"
    high = "high"


class InvestmentType(str, enum.Enum):
    """Kinds of investment products."""

    bond = "bond"
    fd = "fd"  # Fixed deposit
    mf = "mf"  # Mutual fund
    etf = "etf"
    other = "other"


DEFAULT_MIN_INVESTMENT = 500.0


class InvestmentProduct(Base):
    """Investment product offered in the catalog."""

    __tablename__ = "investment_products"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = Column(String(255), nullable=False)
    investment_type = Column(Enum(InvestmentType, native_enum=False), nullable=False)
    tenure_months = Column(Integer, nullable=False, default=0)
    annual_yield = Column(Float, nullable=False)  # Percent per year
    risk_level = Column(Enum(RiskLevel, native_enum=False), nullable=False)

    # Bounds
    min_investment = Column(Float, nullable=False, default=DEFAULT_MIN_INVESTMENT)
    max_investment = Column(Float, nullable=True)

    description = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at = Column(
        DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (Index("ix_investment_products_risk", "risk_level"),)

    def __repr__(self):
        return f"<InvestmentProduct(id={self.id}, name={self.name})>"
