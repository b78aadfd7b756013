"""Portfolio calculations.

Everything here is pure: values in, values out, no session access. Routers
fetch rows and hand them over as :class:`Holding` objects.
"""

import calendar
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from domain.product.models import RiskLevel

RISK_ADVICE = {
    RiskLevel.low.value: "provides stability and capital preservation",
    RiskLevel.moderate.value: "offers balanced growth with manageable risk",
    RiskLevel.high.value: "seeks aggressive growth but requires careful monitoring",
}

RISK_ORDER = [level.value for level in RiskLevel]


def calculate_expected_return(amount: float, annual_yield: float) -> float:
    """Principal plus one year of simple yield."""
    return amount + amount * annual_yield / 100


def add_months(start: datetime, months: int) -> datetime:
    """Shift ``start`` by whole months, clamping to the last day of the month."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def calculate_maturity_date(invested_at: datetime, tenure_months: int) -> Optional[datetime]:
    """Maturity for fixed-tenure products; open-ended products have none."""
    if not tenure_months:
        return None
    return add_months(invested_at, tenure_months)


@dataclass(frozen=True)
class Holding:
    """The slice of an investment the portfolio math needs."""

    amount: float
    expected_return: Optional[float]
    risk_level: str


@dataclass
class PortfolioSummary:
    total: float = 0.0
    count: int = 0
    breakdown: dict[str, float] = field(default_factory=dict)
    risk_distribution: dict[str, dict[str, float]] = field(default_factory=dict)
    diversification_score: int = 0
    expected_total_return: float = 0.0
    average_return: float = 0.0
    ai_summary: str = ""


def risk_breakdown(holdings: Sequence[Holding]) -> dict[str, float]:
    """Total amount per risk level, in low/moderate/high order."""
    totals: dict[str, float] = {}
    for holding in holdings:
        risk = getattr(holding.risk_level, "value", holding.risk_level)
        totals[risk] = totals.get(risk, 0.0) + holding.amount
    return dict(
        sorted(
            totals.items(),
            key=lambda item: RISK_ORDER.index(item[0]) if item[0] in RISK_ORDER else len(RISK_ORDER),
        )
    )


def risk_distribution(breakdown: dict[str, float]) -> dict[str, dict[str, float]]:
    """Amount and share of the total for every non-empty risk bucket."""
    total = sum(breakdown.values())
    if total <= 0:
        return {}
    return {
        risk: {"amount": amount, "percentage": amount / total * 100}
        for risk, amount in breakdown.items()
        if amount > 0
    }


def diversification_score(breakdown: dict[str, float]) -> int:
    """Number of risk buckets holding money."""
    return sum(1 for amount in breakdown.values() if amount > 0)


def expected_gain(holding: Holding) -> float:
    if holding.expected_return is None:
        return 0.0
    return holding.expected_return - holding.amount


def describe_portfolio(
    total: float,
    distribution: dict[str, dict[str, float]],
    score: int,
    average_return: float,
) -> str:
    """Plain-language summary of a portfolio."""
    if not distribution:
        return (
            "Portfolio Analysis: You have no investments yet. Start with products that "
            "match your risk appetite and build up gradually."
        )

    risk_analysis = ", ".join(
        f"{data['percentage']:.1f}% in {risk}-risk investments "
        f"({RISK_ADVICE.get(risk, 'has a custom risk profile')})"
        for risk, data in distribution.items()
    )
    if score >= 2:
        diversification_advice = "Good diversification across risk levels"
    else:
        diversification_advice = (
            "Consider diversifying across different risk levels for better portfolio balance"
        )

    return (
        f"Portfolio Analysis: Your total investment of ₹{total:,.2f} is distributed as "
        f"{risk_analysis}. {diversification_advice}. "
        f"Expected average return: ₹{average_return:,.2f}. Consider rebalancing quarterly "
        "and maintaining an emergency fund equivalent to 3-6 months of expenses."
    )


def summarize_portfolio(holdings: Sequence[Holding]) -> PortfolioSummary:
    """Aggregate a user's holdings."""
    breakdown = risk_breakdown(holdings)
    distribution = risk_distribution(breakdown)
    score = diversification_score(breakdown)
    total = sum(holding.amount for holding in holdings)
    total_return = sum(expected_gain(holding) for holding in holdings)
    average_return = total_return / len(holdings) if holdings else 0.0

    return PortfolioSummary(
        total=total,
        count=len(holdings),
        breakdown=breakdown,
        risk_distribution=distribution,
        diversification_score=score,
        expected_total_return=total_return,
        average_return=average_return,
        ai_summary=describe_portfolio(total, distribution, score, average_return),
    )
