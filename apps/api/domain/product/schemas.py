"""Investment product schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from core.schemas import CamelModel

from .models import InvestmentType, RiskLevel

# Field -> column mapping for product patches, in UPDATE order
PRODUCT_COLUMNS = {
    "name": "name",
    "investment_type": "investment_type",
    "tenure_months": "tenure_months",
    "annual_yield": "annual_yield",
    "risk_level": "risk_level",
    "min_investment": "min_investment",
    "max_investment": "max_investment",
    "description": "description",
}


class ProductCreate(CamelModel):
    """New catalog product."""

    name: str = Field(min_length=1)
    investment_type: InvestmentType
    tenure_months: int = Field(ge=0)
    annual_yield: float = Field(gt=0)
    risk_level: RiskLevel
    min_investment: Optional[float] = Field(None, gt=0)
    max_investment: Optional[float] = Field(None, gt=0)
    description: Optional[str] = None

    @model_validator(mode="after")
    def check_bounds(self) -> "ProductCreate":
        if (
            self.min_investment is not None
            and self.max_investment is not None
            and self.min_investment > self.max_investment
        ):
            raise ValueError("minInvestment cannot exceed maxInvestment")
        return self


class ProductPatch(CamelModel):
    """Partial product update."""

    name: Optional[str] = Field(None, min_length=1)
    investment_type: Optional[InvestmentType] = None
    tenure_months: Optional[int] = Field(None, ge=0)
    annual_yield: Optional[float] = Field(None, gt=0)
    risk_level: Optional[RiskLevel] = None
    min_investment: Optional[float] = Field(None, gt=0)
    max_investment: Optional[float] = Field(None, gt=0)
    description: Optional[str] = None

    @field_validator(
        "name", "investment_type", "tenure_months", "annual_yield", "risk_level", "min_investment"
    )
    @classmethod
    def not_null(cls, v):
        """Columns that are NOT NULL can be changed but not cleared."""
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class ProductResponse(CamelModel):
    id: str
    name: str
    investment_type: InvestmentType
    tenure_months: int
    annual_yield: float
    risk_level: RiskLevel
    min_investment: Optional[float] = None
    max_investment: Optional[float] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RecommendationResponse(BaseModel):
    products: list[ProductResponse]
    rationale: str
