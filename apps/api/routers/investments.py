"""Investment and portfolio endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import Principal, get_current_principal
from core.database import get_session
from core.exceptions import ResourceNotFoundError
from domain.investment.analytics import (
    Holding,
    calculate_expected_return,
    calculate_maturity_date,
    summarize_portfolio,
)
from domain.investment.models import Investment, InvestmentStatus
from domain.investment.repository import InvestmentRepository
from domain.investment.schemas import (
    InvestmentCreate,
    InvestmentCreated,
    InvestmentItem,
    PortfolioResponse,
    ProductBrief,
    RiskShare,
)
from domain.product.repository import ProductRepository
from domain.user.repository import UserRepository

router = APIRouter()


@router.post("", response_model=InvestmentCreated, status_code=status.HTTP_201_CREATED)
async def create_investment(
    request: InvestmentCreate,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Invest ``amount`` in a product. The expected return is fixed here."""
    user_exists = await UserRepository(session).exists(principal.user_id)
    product = await ProductRepository(session).get_by_id(request.product_id)
    if not user_exists or product is None:
        raise ResourceNotFoundError("User or product not found")

    invested_at = datetime.utcnow()
    expected_return = calculate_expected_return(request.amount, product.annual_yield)
    investment = Investment(
        user_id=principal.user_id,
        product_id=product.id,
        amount=request.amount,
        expected_return=expected_return,
        status=InvestmentStatus.active,
        invested_at=invested_at,
        maturity_date=calculate_maturity_date(invested_at, product.tenure_months),
    )
    await InvestmentRepository(session).create(investment)

    return InvestmentCreated(
        message="Investment successful",
        amount=request.amount,
        expected_return=expected_return,
    )


@router.get("/portfolio", response_model=PortfolioResponse)
async def portfolio(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """The caller's investments with aggregate figures."""
    investments = await InvestmentRepository(session).list_for_user(principal.user_id)

    summary = summarize_portfolio(
        [
            Holding(
                amount=investment.amount,
                expected_return=investment.expected_return,
                risk_level=investment.product.risk_level,
            )
            for investment in investments
        ]
    )

    items = [
        InvestmentItem(
            id=investment.id,
            user_id=investment.user_id,
            product_id=investment.product_id,
            amount=investment.amount,
            invested_at=investment.invested_at,
            status=investment.status,
            expected_return=investment.expected_return,
            maturity_date=investment.maturity_date,
            product=ProductBrief.model_validate(investment.product),
        )
        for investment in investments
    ]

    return PortfolioResponse(
        total=summary.total,
        count=summary.count,
        breakdown=summary.breakdown,
        risk_distribution={
            risk: RiskShare(**share) for risk, share in summary.risk_distribution.items()
        },
        diversification_score=summary.diversification_score,
        expected_total_return=summary.expected_total_return,
        average_return=summary.average_return,
        investments=items,
        ai_summary=summary.ai_summary,
    )
