"""Investment schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from core.schemas import CamelModel
from domain.product.models import RiskLevel

from .models import InvestmentStatus


class InvestmentCreate(CamelModel):
    product_id: str = Field(min_length=1)
    amount: float = Field(gt=0)


class InvestmentCreated(CamelModel):
    message: str
    amount: float
    expected_return: float


class ProductBrief(CamelModel):
    id: str
    name: str
    risk_level: RiskLevel
    annual_yield: float


class InvestmentItem(CamelModel):
    id: str
    user_id: str
    product_id: str
    amount: float
    invested_at: Optional[datetime] = None
    status: InvestmentStatus
    expected_return: Optional[float] = None
    maturity_date: Optional[datetime] = None
    product: ProductBrief


class RiskShare(BaseModel):
    amount: float
    percentage: float


class PortfolioResponse(CamelModel):
    total: float
    count: int
    breakdown: dict[str, float]
    risk_distribution: dict[str, RiskShare]
    diversification_score: int
    expected_total_return: float
    average_return: float
    investments: list[InvestmentItem]
    ai_summary: str = Field(alias="ai_summary")
